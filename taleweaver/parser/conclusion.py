"""Conclusion Parser: builds the terminal Encounter from an end-of-story message."""

import logging
from typing import Optional

from ..config import ParserSettings
from ..session import PlayerStateProvider, snapshot_stats
from .models import Encounter, MechanicKind, StatsSnapshot
from .sections import CONCLUSION_IMAGE_MARKER, CONCLUSION_WRAPPER
from .utils import split_lines, strip_parenthetical

logger = logging.getLogger(__name__)

CONCLUSION_HEADER = "### Conclusion:"
CONCLUSION_NUMBER = "Conclusion"


class ConclusionParser:
    """Parses the closing message of a story. Missing markers yield empty fields."""

    def __init__(
        self,
        state_provider: Optional[PlayerStateProvider] = None,
        settings: Optional[ParserSettings] = None,
    ):
        self.state_provider = state_provider
        self.settings = settings or ParserSettings()

    def parse(self, message: str, image_ref: str = "") -> Encounter:
        name = ""
        body: list[str] = []
        for line in split_lines(message):
            if line.startswith(CONCLUSION_HEADER):
                name = line.replace(CONCLUSION_HEADER, "").strip()
            elif line.startswith(CONCLUSION_IMAGE_MARKER):
                break
            else:
                body.append(line)

        introduction = " ".join(body).replace(CONCLUSION_WRAPPER, "")
        introduction = " ".join(introduction.split())

        stats = snapshot_stats(
            self.state_provider,
            StatsSnapshot(*self.settings.default_stats),
            warn_for="conclusion",
        )

        if not name:
            logger.debug("Conclusion header not found")
        return Encounter(
            number=CONCLUSION_NUMBER,
            name=strip_parenthetical(name).strip(),
            introduction=strip_parenthetical(introduction).strip(),
            image_prompt_or_path=image_ref,
            description="",
            mechanic_kind=MechanicKind.NONE,
            stats=stats,
        )
