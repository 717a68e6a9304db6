"""Entity package: LaunchContent, Definition."""

from .entity import LAUNCH_SECTIONS, Definition, LaunchContent
from .repository import DefinitionRepository, LaunchContentRepository
from .table import DefinitionTable, LaunchContentTable

__all__ = [
    "LAUNCH_SECTIONS",
    "Definition",
    "DefinitionRepository",
    "DefinitionTable",
    "LaunchContent",
    "LaunchContentRepository",
    "LaunchContentTable",
]
