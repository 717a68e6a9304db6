"""Entity package: Product."""

from .entity import HalalStatus, Product
from .repository import ProductRepository
from .table import ProductTable

__all__ = ["HalalStatus", "Product", "ProductRepository", "ProductTable"]
