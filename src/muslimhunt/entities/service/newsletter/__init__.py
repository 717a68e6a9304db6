"""Entity package: NewsletterSubscriber."""

from .entity import NewsletterSubscriber
from .repository import NewsletterRepository
from .table import NewsletterSubscriberTable

__all__ = ["NewsletterRepository", "NewsletterSubscriber", "NewsletterSubscriberTable"]
