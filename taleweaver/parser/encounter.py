"""Encounter Parser.

Turns the generator's narrative text for one encounter into an Encounter
record: header, positional sections, mechanic extraction, then truncation
and parenthetical cleanup once every section boundary is settled.
"""

import logging
from typing import Optional

from ..config import ParserSettings
from ..session import ErrorSink, LoggingErrorSink, PlayerStateProvider, snapshot_stats
from .mechanics import extract_mechanic
from .models import (
    ROLL_FACE_OUTCOMES,
    Encounter,
    Mechanic,
    Option,
    ParseError,
    ParseResult,
    RollMechanic,
    StatsSnapshot,
)
from .sections import parse_header, split_sections
from .utils import (
    remove_nth_parenthetical,
    replace_first_parenthetical,
    strip_parenthetical,
    truncate_words,
)

logger = logging.getLogger(__name__)

# Display string substituted into the label of each die face.
ROLL_OUTCOMES: dict[int, str] = {
    face: f"({outcome})" for face, outcome in enumerate(ROLL_FACE_OUTCOMES, start=1)
}

# Face whose label keeps its own annotation.
ROLL_OPEN_FACE = 6


def _clean(text: str) -> str:
    return strip_parenthetical(text).strip()


def _clean_roll_label(face: int, label: str) -> str:
    if face == ROLL_OPEN_FACE:
        return remove_nth_parenthetical(label, 2).strip()
    return replace_first_parenthetical(label, ROLL_OUTCOMES[face]).strip()


def clean_options(mechanic: Mechanic) -> tuple[Option, ...]:
    """Flatten a mechanic into options with cosmetically cleaned labels."""
    options = mechanic.to_options()
    if isinstance(mechanic, RollMechanic):
        return tuple(
            Option(text=_clean_roll_label(face.face, option.text), outcome=option.outcome)
            for face, option in zip(mechanic.faces, options)
        )
    return tuple(Option(text=_clean(o.text), outcome=o.outcome) for o in options)


class EncounterParser:
    """Parses generated encounter narratives into Encounter records.

    Stateless apart from its injected collaborators, so one instance can be
    shared across callers.
    """

    def __init__(
        self,
        state_provider: Optional[PlayerStateProvider] = None,
        error_sink: Optional[ErrorSink] = None,
        settings: Optional[ParserSettings] = None,
    ):
        self.state_provider = state_provider
        self.error_sink = error_sink or LoggingErrorSink()
        self.settings = settings or ParserSettings()

    def parse(self, narrative: str, image_ref: str = "") -> ParseResult:
        """Parse one encounter narrative.

        Args:
            narrative: Full text returned by the narrative generator.
            image_ref: Resolved image path, or "" to keep the generation prompt.

        Returns:
            ParseResult with the encounter, or with the error that prevented
            one. Fatal errors are also reported to the error sink.
        """
        missing: list[str] = []
        try:
            encounter = self._build(narrative, image_ref, missing)
        except ParseError as e:
            message = f"Error parsing page: {e.message}"
            self.error_sink.report(message)
            logger.info("Encounter parse failed (%s)", e.kind.value)
            return ParseResult(error=e, missing_markers=missing)

        if missing:
            logger.debug("Encounter %s missing optional markers: %s", encounter.number, missing)
        logger.info(
            "Parsed encounter %s (%s, %d options)",
            encounter.number, encounter.mechanic_kind.value, len(encounter.options)
        )
        return ParseResult(encounter=encounter, missing_markers=missing)

    def _build(self, narrative: str, image_ref: str, missing: list[str]) -> Encounter:
        header = parse_header(narrative)
        sections = split_sections(narrative)

        mechanic, mechanic_missing = extract_mechanic(sections.mechanic_lines)
        missing.extend(mechanic_missing)

        # Cleanup only after every boundary above has been found
        introduction = truncate_words(
            sections.introduction,
            self.settings.introduction_max_words,
            self.settings.continuation_marker,
        )
        description = truncate_words(
            sections.description,
            self.settings.description_max_words,
            self.settings.continuation_marker,
        )

        return Encounter(
            number=_clean(header.number),
            name=_clean(header.name),
            introduction=_clean(introduction),
            image_prompt_or_path=image_ref or sections.image_prompt,
            description=_clean(description),
            mechanic_kind=mechanic.kind,
            mechanic_info=_clean(mechanic.info),
            options=clean_options(mechanic),
            stats=snapshot_stats(self.state_provider, StatsSnapshot(*self.settings.default_stats)),
            image_prompt=sections.image_prompt,
        )
