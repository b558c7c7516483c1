"""Game logic."""

from .desktop import Desktop, Lobby, PassResult, PlayResult, SitResult
from .validator import PlayValidator, ValidationResult

__all__ = [
    "Desktop",
    "Lobby",
    "PassResult",
    "PlayResult",
    "PlayValidator",
    "SitResult",
    "ValidationResult",
]
