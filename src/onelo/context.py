"""Contextual information tracked through a build."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from onelo import __version__


@dataclass(frozen=True)
class BuildContext:
    """
    The version of onelo used and when the build started.

    A context is created once per build and passed explicitly to the operations
    that need it.
    """

    version: str = __version__
    created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls) -> "BuildContext":
        """Create a context with default values."""
        return cls()
