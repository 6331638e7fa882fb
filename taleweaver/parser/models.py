"""Data models for the encounter parser.

Records handed to callers, the per-mechanic extraction variants, and the
error/result types returned by the parsers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .utils import first_parenthetical


# ---------------------------------------------------------------------------
# Player state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StatsSnapshot:
    """Point-in-time copy of the player's stats."""
    health: int = 10
    luck: int = 2
    skill_modifier: int = 0

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.health, self.luck, self.skill_modifier)


DEFAULT_STATS = StatsSnapshot()


# ---------------------------------------------------------------------------
# Encounter record
# ---------------------------------------------------------------------------

class MechanicKind(Enum):
    """Gameplay rule governing how an encounter's choices resolve."""
    ROLL = "Roll"
    RIDDLE = "Riddle"
    CHECK = "Check"
    COMBAT = "Combat"
    LUCK = "Luck"
    PLAIN_OPTIONS = "PlainOptions"
    NONE = "None"  # Conclusions


@dataclass(frozen=True)
class Option:
    """A player-facing choice and its mechanic-specific payload."""
    text: str
    outcome: str = ""


@dataclass(frozen=True)
class Encounter:
    """One parsed page of interactive narrative."""
    number: str
    name: str
    introduction: str
    image_prompt_or_path: str
    description: str
    mechanic_kind: MechanicKind
    mechanic_info: str = ""
    options: tuple[Option, ...] = ()
    stats: StatsSnapshot = DEFAULT_STATS
    image_prompt: str = ""

    @property
    def is_conclusion(self) -> bool:
        return self.mechanic_kind is MechanicKind.NONE

    def to_dict(self) -> dict:
        return {
            "number": self.number,
            "name": self.name,
            "introduction": self.introduction,
            "image_prompt_or_path": self.image_prompt_or_path,
            "image_prompt": self.image_prompt,
            "description": self.description,
            "mechanic_kind": self.mechanic_kind.value,
            "mechanic_info": self.mechanic_info,
            "options": [
                {"text": o.text, "outcome": o.outcome} for o in self.options
            ],
            "stats": list(self.stats.as_tuple()),
        }


# ---------------------------------------------------------------------------
# Mechanic variants
#
# Each variant carries only what its mechanic needs; to_options() flattens
# it into the ordered Option list stored on the Encounter.
# ---------------------------------------------------------------------------

# Outcome payload for each die face, indexed by face - 1. Face 6 has no
# fixed payload: its outcome is the annotation the generator wrote on it.
ROLL_FACE_OUTCOMES = ("-2 life", "-1 life", "Nothing", "+1 luck", "+1 life")


@dataclass(frozen=True)
class RollFace:
    face: int  # 1-6
    label: str

    @property
    def outcome(self) -> str:
        if self.face <= len(ROLL_FACE_OUTCOMES):
            return ROLL_FACE_OUTCOMES[self.face - 1]
        return first_parenthetical(self.label) or ""


@dataclass(frozen=True)
class RollMechanic:
    """Dice roll: one label per die face, in face order."""
    faces: tuple[RollFace, ...] = ()
    kind = MechanicKind.ROLL

    @property
    def info(self) -> str:
        return ""

    def to_options(self) -> list[Option]:
        return [Option(text=f.label, outcome=f.outcome) for f in self.faces]


@dataclass(frozen=True)
class RiddleMechanic:
    """Riddle with up to three answers, one of them correct."""
    prompt: str = ""
    answers: tuple[str, ...] = ()
    correct_index: Optional[int] = None  # 0-based
    kind = MechanicKind.RIDDLE

    @property
    def info(self) -> str:
        return self.prompt

    def to_options(self) -> list[Option]:
        return [
            Option(text=answer, outcome="Correct" if i == self.correct_index else "Wrong")
            for i, answer in enumerate(self.answers)
        ]


@dataclass(frozen=True)
class CheckMechanic:
    """Skill check against a percentage threshold."""
    description: str = ""
    threshold: str = ""
    found: bool = False
    kind = MechanicKind.CHECK

    @property
    def info(self) -> str:
        return self.description

    def to_options(self) -> list[Option]:
        if not self.found:
            return []
        return [Option(text=self.description, outcome=self.threshold)]


@dataclass(frozen=True)
class CombatMechanic:
    """Fight against a single named opponent."""
    opponent: str = ""
    difficulty: Optional[int] = None
    kind = MechanicKind.COMBAT

    @property
    def info(self) -> str:
        return ""

    def to_options(self) -> list[Option]:
        outcome = str(self.difficulty) if self.difficulty is not None else ""
        return [Option(text=f"Combat with {self.opponent}", outcome=outcome)]


@dataclass(frozen=True)
class LuckScenario:
    text: str = ""
    effect: str = ""


@dataclass(frozen=True)
class LuckMechanic:
    """Luck event with two possible scenarios."""
    scenarios: tuple[LuckScenario, ...] = ()
    kind = MechanicKind.LUCK

    @property
    def info(self) -> str:
        return ""

    def to_options(self) -> list[Option]:
        return [Option(text=s.text, outcome=s.effect) for s in self.scenarios]


@dataclass(frozen=True)
class PlainOptionsMechanic:
    """Plain branching choices, each with a free-text effect."""
    prompt: str = ""
    choices: tuple[Option, ...] = ()
    kind = MechanicKind.PLAIN_OPTIONS

    @property
    def info(self) -> str:
        return self.prompt

    def to_options(self) -> list[Option]:
        return list(self.choices)


Mechanic = Union[
    RollMechanic,
    RiddleMechanic,
    CheckMechanic,
    CombatMechanic,
    LuckMechanic,
    PlainOptionsMechanic,
]


# ---------------------------------------------------------------------------
# Errors and results
# ---------------------------------------------------------------------------

class ParseErrorKind(Enum):
    MISSING_HEADER = "missing_header"
    MALFORMED_SECTIONS = "malformed_sections"
    INDEX_PARSE_FAILURE = "index_parse_failure"


class ParseError(Exception):
    """Fatal structural failure while parsing a narrative."""
    kind: ParseErrorKind = ParseErrorKind.MALFORMED_SECTIONS

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingHeaderError(ParseError):
    kind = ParseErrorKind.MISSING_HEADER


class MalformedSectionsError(ParseError):
    kind = ParseErrorKind.MALFORMED_SECTIONS


class IndexParseError(ParseError):
    kind = ParseErrorKind.INDEX_PARSE_FAILURE


@dataclass
class ParseResult:
    """Outcome of an encounter parse: a record, or the error that stopped it."""
    encounter: Optional[Encounter] = None
    error: Optional[ParseError] = None
    missing_markers: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.encounter is not None

    def unwrap(self) -> Encounter:
        """Return the encounter or raise the stored error."""
        if self.encounter is None:
            raise self.error or ParseError("No encounter produced")
        return self.encounter
