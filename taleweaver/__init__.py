"""TaleWeaver: parses generated story text into structured encounters."""

from .parser.conclusion import ConclusionParser
from .parser.encounter import EncounterParser
from .parser.models import (
    Encounter,
    MechanicKind,
    Option,
    ParseError,
    ParseResult,
    StatsSnapshot,
)
from .parser.sections import extract_image_prompt
from .session import (
    CollectingErrorSink,
    ErrorSink,
    FixedPlayerState,
    LoggingErrorSink,
    PlayerStateProvider,
)

__version__ = "0.1.0"

__all__ = [
    "ConclusionParser",
    "EncounterParser",
    "Encounter",
    "MechanicKind",
    "Option",
    "ParseError",
    "ParseResult",
    "StatsSnapshot",
    "extract_image_prompt",
    "CollectingErrorSink",
    "ErrorSink",
    "FixedPlayerState",
    "LoggingErrorSink",
    "PlayerStateProvider",
]
