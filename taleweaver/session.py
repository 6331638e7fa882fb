"""
Session collaborators consumed by the parsers.

The parsers read player stats from a PlayerStateProvider and report fatal
parse failures to an ErrorSink. Both are injected; the concrete classes
here cover logging, fixed stats and test capture.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .parser.models import DEFAULT_STATS, StatsSnapshot

logger = logging.getLogger(__name__)


class PlayerStateProvider(ABC):
    """Read-only source of the live player's stats."""

    @abstractmethod
    def current_stats(self) -> Optional[StatsSnapshot]:
        """
        Return the player's current stats.

        Returns:
            StatsSnapshot, or None when no live session exists
        """
        pass


class FixedPlayerState(PlayerStateProvider):
    """Provider that always reports the same stats."""

    def __init__(self, health: int = 10, luck: int = 2, skill_modifier: int = 0):
        self.stats = StatsSnapshot(health=health, luck=luck, skill_modifier=skill_modifier)

    def current_stats(self) -> Optional[StatsSnapshot]:
        return self.stats


class NoPlayerState(PlayerStateProvider):
    """Provider for when no game session is running."""

    def current_stats(self) -> Optional[StatsSnapshot]:
        return None


def snapshot_stats(
    provider: Optional[PlayerStateProvider],
    default: StatsSnapshot = DEFAULT_STATS,
    warn_for: Optional[str] = None
) -> StatsSnapshot:
    """
    Read stats from the provider, falling back to a full default snapshot.

    Args:
        provider: Source of live stats, or None
        default: Snapshot used when there is no live session
        warn_for: When set, log a warning naming this record if defaults are used
    """
    stats = provider.current_stats() if provider is not None else None
    if stats is not None:
        return stats
    if warn_for:
        logger.warning("No live player state for %s; using default stats", warn_for)
    return default


class ErrorSink(ABC):
    """Destination for parse failure reports."""

    @abstractmethod
    def report(self, message: str) -> None:
        pass


class LoggingErrorSink(ErrorSink):
    """Reports failures to the log at ERROR level."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def report(self, message: str) -> None:
        self.log.error("%s", message)


class CollectingErrorSink(ErrorSink):
    """Keeps reported messages in memory, for tests and batch tools."""

    def __init__(self):
        self.messages: list[str] = []

    def report(self, message: str) -> None:
        self.messages.append(message)

    def clear(self) -> None:
        self.messages.clear()
