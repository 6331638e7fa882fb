"""Mechanic block extraction.

The first line of the mechanic block names the mechanic with a
double-sigil marker (``$$Roll$$``, ``&&Riddle&&``, ...). Each mechanic has
its own extractor that reads the block's sub-markers into a variant from
``models``. A block with no known marker is read as plain numbered options.

Optional sub-markers that are absent never raise: the field stays empty and
the marker is reported back to the caller in ``missing``.
"""

import logging
import re
from typing import Callable, Optional

from .models import (
    CheckMechanic,
    CombatMechanic,
    IndexParseError,
    LuckMechanic,
    LuckScenario,
    Mechanic,
    Option,
    PlainOptionsMechanic,
    RiddleMechanic,
    RollFace,
    RollMechanic,
)

logger = logging.getLogger(__name__)

ROLL_MARKER = "$$Roll$$"
ROLL_LABEL_END = "$$"
ROLL_FACES = 6

RIDDLE_MARKER = "&&Riddle&&"
RIDDLE_DESCRIPTION_MARKER = "&&RiddleDescription&&"
RIDDLE_ANSWER_MARKER = "&&RiddleAns&&"
RIDDLE_ANSWERS = 3

CHECK_MARKER = "%%Check%%"
CHECK_DESCRIPTION_MARKER = "%%CheckDescription%%"

COMBAT_MARKER = "##Combat##"
COMBAT_NAME_MARKER = "##Name##"
COMBAT_DIFFICULTY_MARKER = "##Diff##"

LUCK_MARKER = "@@luck@@"
LUCK_SIGIL = "@@"
LUCK_SCENARIOS = 2

PLAIN_OPTION_SEPARATOR = "!!"
PLAIN_OPTION_PREFIXES = ("1.", "2.", "3.")
PLAIN_OPTIONS_MAX = 3


def luck_effect_marker(n: int) -> str:
    return f"@@scenario {n}:@@"


def luck_description_marker(n: int) -> str:
    return f"@@luck{n}Description@@"


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------

def _marker_index(lines: list[str], marker: str) -> Optional[int]:
    for i, line in enumerate(lines):
        if line.startswith(marker):
            return i
    return None


def _line_after(lines: list[str], index: int, offset: int = 1) -> Optional[str]:
    target = index + offset
    if target < len(lines):
        return lines[target].strip()
    return None


def _numbered_line(lines: list[str], n: int) -> Optional[str]:
    """Return the body of the first ``n.`` line, without the number."""
    prefix = f"{n}."
    for line in lines:
        if line.startswith(prefix):
            return line[len(prefix):].strip()
    return None


# ---------------------------------------------------------------------------
# Extractors
# ---------------------------------------------------------------------------

def extract_roll(lines: list[str], missing: list[str]) -> RollMechanic:
    faces = []
    for face in range(1, ROLL_FACES + 1):
        body = _numbered_line(lines, face)
        if body is None:
            missing.append(f"{face}.")
            continue
        faces.append(RollFace(face=face, label=body.split(ROLL_LABEL_END)[0].strip()))
    return RollMechanic(faces=tuple(faces))


def extract_riddle(lines: list[str], missing: list[str]) -> RiddleMechanic:
    prompt = ""
    info_at = _marker_index(lines, RIDDLE_DESCRIPTION_MARKER)
    if info_at is not None:
        prompt = _line_after(lines, info_at) or ""
    if not prompt:
        missing.append(RIDDLE_DESCRIPTION_MARKER)

    answers = []
    for n in range(1, RIDDLE_ANSWERS + 1):
        body = _numbered_line(lines, n)
        if body is not None:
            answers.append(body)

    correct_index = None
    answer_at = _marker_index(lines, RIDDLE_ANSWER_MARKER)
    if answer_at is None:
        missing.append(RIDDLE_ANSWER_MARKER)
    else:
        correct_index = _parse_answer_index(_line_after(lines, answer_at), len(answers))

    return RiddleMechanic(prompt=prompt, answers=tuple(answers), correct_index=correct_index)


def _parse_answer_index(answer_line: Optional[str], answer_count: int) -> int:
    """Read the leading 1-based number of the answer line as a 0-based index."""
    if answer_line is None:
        raise IndexParseError("Riddle answer marker is not followed by an answer")

    head = answer_line.split(".", 1)[0].strip()
    try:
        number = int(head)
    except ValueError:
        raise IndexParseError(f"Riddle answer index is not a number: {answer_line!r}")

    if not 1 <= number <= answer_count:
        raise IndexParseError(
            f"Riddle answer index {number} out of range for {answer_count} answers"
        )
    return number - 1


def extract_check(lines: list[str], missing: list[str]) -> CheckMechanic:
    at = _marker_index(lines, CHECK_DESCRIPTION_MARKER)
    description = _line_after(lines, at) if at is not None else None
    if description is None:
        missing.append(CHECK_DESCRIPTION_MARKER)
        return CheckMechanic()

    threshold = _line_after(lines, at, 2)
    if threshold is None:
        missing.append(f"{CHECK_DESCRIPTION_MARKER} threshold")
        threshold = ""
    return CheckMechanic(
        description=description,
        threshold=threshold.replace("%", "").strip(),
        found=True,
    )


def extract_combat(lines: list[str], missing: list[str]) -> CombatMechanic:
    opponent = None
    difficulty = None
    difficulty_seen = False
    for line in lines:
        if line.startswith(COMBAT_NAME_MARKER):
            opponent = line.replace(COMBAT_NAME_MARKER, "").strip()
        elif line.startswith(COMBAT_DIFFICULTY_MARKER):
            difficulty_seen = True
            raw = line.replace(COMBAT_DIFFICULTY_MARKER, "").strip()
            match = re.match(r"-?\d+", raw)
            if match:
                difficulty = int(match.group(0))
            else:
                logger.warning("Combat difficulty is not a number: %r", raw)

    if opponent is None:
        missing.append(COMBAT_NAME_MARKER)
    if not difficulty_seen:
        missing.append(COMBAT_DIFFICULTY_MARKER)
    return CombatMechanic(opponent=opponent or "", difficulty=difficulty)


def extract_luck(lines: list[str], missing: list[str]) -> LuckMechanic:
    scenarios = []
    found_any = False
    for n in range(1, LUCK_SCENARIOS + 1):
        effect_marker = luck_effect_marker(n)
        text_marker = luck_description_marker(n)
        effect = None
        text = None
        for i, line in enumerate(lines):
            if effect is None and line.startswith(effect_marker):
                effect = line.replace(effect_marker, "").strip()
                effect = effect.replace(LUCK_SIGIL, "").strip()
            elif text is None and line.startswith(text_marker):
                text = _line_after(lines, i) or ""

        if effect is None:
            missing.append(effect_marker)
        if text is None:
            missing.append(text_marker)
        found_any = found_any or effect is not None or text is not None
        scenarios.append(LuckScenario(text=text or "", effect=effect or ""))

    if not found_any:
        return LuckMechanic()
    return LuckMechanic(scenarios=tuple(scenarios))


def extract_plain_options(lines: list[str], missing: list[str]) -> PlainOptionsMechanic:
    """Read up to three ``N. text !! effect`` lines and the prompt above them.

    Option text is stored without its leading ``N.`` number; callers that
    display numbered choices add their own.
    """
    prompt = None
    choices: list[Option] = []
    for line in lines:
        if line.startswith(PLAIN_OPTION_PREFIXES):
            if len(choices) >= PLAIN_OPTIONS_MAX:
                continue
            parts = line[2:].split(PLAIN_OPTION_SEPARATOR)
            if len(parts) < 2:
                missing.append(f"{line[:2]} {PLAIN_OPTION_SEPARATOR}")
            effect = parts[1].strip() if len(parts) > 1 else ""
            choices.append(Option(text=parts[0].strip(), outcome=effect))
        elif prompt is None and not choices and not line.startswith(PLAIN_OPTION_SEPARATOR):
            prompt = line
    return PlainOptionsMechanic(prompt=prompt or "", choices=tuple(choices))


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

Extractor = Callable[[list[str], list[str]], Mechanic]

MECHANIC_EXTRACTORS: tuple[tuple[str, Extractor], ...] = (
    (ROLL_MARKER, extract_roll),
    (RIDDLE_MARKER, extract_riddle),
    (CHECK_MARKER, extract_check),
    (COMBAT_MARKER, extract_combat),
    (LUCK_MARKER, extract_luck),
)


def select_extractor(discriminator: str) -> Extractor:
    """Pick the extractor for a mechanic block from its first line.

    Markers are matched as case-sensitive prefixes; anything else is read
    as plain options.
    """
    for marker, extractor in MECHANIC_EXTRACTORS:
        if discriminator.startswith(marker):
            return extractor
    return extract_plain_options


def extract_mechanic(lines: list[str]) -> tuple[Mechanic, list[str]]:
    """Extract the mechanic variant from the lines of a mechanic block.

    Args:
        lines: Stripped, non-blank lines; the first one is the discriminator.

    Returns:
        (mechanic, missing) where missing lists the optional sub-markers
        that were not found.

    Raises:
        IndexParseError: If a riddle answer index cannot be used.
    """
    missing: list[str] = []
    extractor = select_extractor(lines[0] if lines else "")
    return extractor(lines, missing), missing
