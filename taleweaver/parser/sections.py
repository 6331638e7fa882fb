"""Section splitting for generated encounter text.

The generator marks the header with ``###`` and separates the body with
literal ``**`` tokens. Sections are addressed by position in the ``**``
split; every positional assumption about that format lives in this module.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from .models import MalformedSectionsError, MissingHeaderError
from .utils import split_lines

logger = logging.getLogger(__name__)

HEADER_MARKER = "###"
BOLD_DELIMITER = "**"

# Positions in the "**" split. The generator emits a label segment before
# each content segment, so content sits at the even indices.
INTRODUCTION_INDEX = 2
DESCRIPTION_INDEX = 4
IMAGE_PROMPT_INDEX = 6
MECHANIC_INDEX = 8

CONCLUSION_WRAPPER = "^^conclusion^^"
CONCLUSION_IMAGE_MARKER = "^^conclusion image description^^"

# Labels that may follow the image prompt inside its segment.
IMAGE_PROMPT_END_TAGS = ("Encounter Description:", "Mechanics:")


@dataclass(frozen=True)
class EncounterHeader:
    number: str
    name: str = ""


@dataclass(frozen=True)
class EncounterSections:
    """The four content segments of an encounter body."""
    introduction: str
    description: str
    image_prompt: str
    mechanic_block: str

    @property
    def mechanic_lines(self) -> list[str]:
        return split_lines(self.mechanic_block)


def parse_header(narrative: str) -> EncounterHeader:
    """Find the ``### <number>: <name>`` line.

    Raises:
        MissingHeaderError: If no line starts with the header marker.
    """
    for line in split_lines(narrative):
        if line.startswith(HEADER_MARKER):
            parts = line.replace(HEADER_MARKER, "").strip().split(":", 1)
            number = parts[0].strip()
            name = parts[1].strip() if len(parts) > 1 else ""
            return EncounterHeader(number=number, name=name)
    raise MissingHeaderError("Encounter header line not found")


def split_bold_segments(narrative: str) -> list[str]:
    """Split the full text on the bold delimiter, keeping empty segments."""
    return narrative.split(BOLD_DELIMITER)


def split_sections(narrative: str) -> EncounterSections:
    """Slice the introduction, description, image prompt and mechanic block.

    Raises:
        MalformedSectionsError: If the split is too short to reach the
            mechanic block, or the mechanic block is empty.
    """
    segments = split_bold_segments(narrative)
    if len(segments) <= MECHANIC_INDEX:
        raise MalformedSectionsError(
            f"Narrative format is incorrect: expected at least "
            f"{MECHANIC_INDEX + 1} '{BOLD_DELIMITER}'-delimited segments, "
            f"got {len(segments)}"
        )

    sections = EncounterSections(
        introduction=segments[INTRODUCTION_INDEX].strip(),
        description=segments[DESCRIPTION_INDEX].strip(),
        image_prompt=segments[IMAGE_PROMPT_INDEX].strip(),
        mechanic_block=segments[MECHANIC_INDEX].strip(),
    )
    if not sections.mechanic_lines:
        raise MalformedSectionsError("Narrative format is incorrect: mechanic block is empty")
    return sections


def _find_marker(marker: str, text: str) -> Optional[re.Match]:
    # Offsets index the original text, not a case-folded copy
    return re.search(re.escape(marker), text, re.IGNORECASE)


def extract_image_prompt(message: str, conclusion: bool = False) -> Optional[str]:
    """Pull the image-generation prompt out of a generated message.

    For encounters the prompt is the image segment, cut at the first
    trailing section label. For conclusions it is everything after the
    conclusion image marker, and only when the conclusion wrapper is present.
    Returns None when the expected markers are missing.
    """
    if not message:
        return None

    if conclusion:
        wrapper = _find_marker(CONCLUSION_WRAPPER, message)
        marker = _find_marker(CONCLUSION_IMAGE_MARKER, message)
        if wrapper is None or marker is None:
            logger.warning("Conclusion image description section not found")
            return None
        return message[marker.end():].strip()

    segments = split_bold_segments(message)
    if len(segments) <= IMAGE_PROMPT_INDEX:
        logger.warning("Image generation section not found")
        return None

    prompt = segments[IMAGE_PROMPT_INDEX].strip()
    for tag in IMAGE_PROMPT_END_TAGS:
        match = _find_marker(tag, prompt)
        if match is not None:
            prompt = prompt[:match.start()].strip()
            break
    return prompt
