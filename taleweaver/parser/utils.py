"""Text utilities shared by the encounter and conclusion parsers."""

import re
from typing import Optional

CONTINUATION_MARKER = "..."

# Parenthetical annotation, non-nested: "(...)" with no ")" inside.
PARENTHETICAL_RE = re.compile(r"\([^)]*\)")

# Same span plus the horizontal whitespace on either side, so removal
# leaves a single gap ("A (b) C" -> "A C").
_PARENTHETICAL_GAP_RE = re.compile(r"([ \t]*)\([^)]*\)([ \t]*)")

# Used when counting spans: no parenthesis of either kind inside.
_INNERMOST_GAP_RE = re.compile(r"([ \t]*)\([^()]*\)([ \t]*)")


# Characters that attach to the preceding word, so no gap is kept before them.
_NO_GAP_BEFORE = frozenset(".,;:!?)(")


def _close_gap(match: re.Match) -> str:
    """Replacement for a removed span: one space between words, else nothing."""
    text = match.string
    before = text[match.start() - 1] if match.start() > 0 else ""
    after = text[match.end()] if match.end() < len(text) else ""
    if not before or not after or before.isspace() or after.isspace():
        return ""
    if after in _NO_GAP_BEFORE:
        return ""
    # Glued on both sides: the span was never a word of its own
    if not match.group(1) and not match.group(2):
        return ""
    return " "


def count_words(text: str) -> int:
    """Count words in text."""
    return len(text.split())


def split_lines(text: str) -> list[str]:
    """Split text into stripped, non-blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def truncate_words(text: str, max_words: int, marker: str = CONTINUATION_MARKER) -> str:
    """Cut text down to max_words words, appending a continuation marker.

    Text already within the limit is returned unchanged, so the function is
    idempotent for a given limit.

    >>> truncate_words("one two three", 2)
    'one two...'
    """
    words = text.split()
    if len(words) > max_words:
        return " ".join(words[:max_words]) + marker
    return text


def strip_parenthetical(text: str) -> str:
    """Remove every ``(...)`` annotation in a single left-to-right pass.

    Nested parentheses are not handled. Text without annotations comes back
    untouched.

    >>> strip_parenthetical("A (b) C")
    'A C'
    """
    result, count = _PARENTHETICAL_GAP_RE.subn(_close_gap, text)
    return result if count else text


def replace_first_parenthetical(text: str, replacement: str) -> str:
    """Replace the first annotation with a literal replacement and strip the rest.

    >>> replace_first_parenthetical("Trip (a) over a root (b)", "(-2 life)")
    'Trip (-2 life) over a root'
    """
    first = True

    def _replace(match: re.Match) -> str:
        nonlocal first
        if first:
            first = False
            return match.group(1) + replacement + match.group(2)
        return _close_gap(match)

    return _PARENTHETICAL_GAP_RE.sub(_replace, text)


def remove_nth_parenthetical(text: str, n: int) -> str:
    """Remove only the n-th (1-based) annotation, leaving the others."""
    matches = list(_INNERMOST_GAP_RE.finditer(text))
    if len(matches) < n:
        return text
    match = matches[n - 1]
    return text[:match.start()] + _close_gap(match) + text[match.end():]


def first_parenthetical(text: str) -> Optional[str]:
    """Return the inner text of the first annotation, or None."""
    match = PARENTHETICAL_RE.search(text)
    if match is None:
        return None
    return match.group(0)[1:-1].strip()
