"""Test fixtures for taleweaver tests."""

from .narratives import (
    CHECK_BLOCK,
    COMBAT_BLOCK,
    LUCK_BLOCK,
    PLAIN_BLOCK,
    RIDDLE_BLOCK,
    ROLL_BLOCK,
    make_conclusion,
    make_narrative,
)

__all__ = [
    "CHECK_BLOCK",
    "COMBAT_BLOCK",
    "LUCK_BLOCK",
    "PLAIN_BLOCK",
    "RIDDLE_BLOCK",
    "ROLL_BLOCK",
    "make_conclusion",
    "make_narrative",
]
