"""
Income track.

A player's income is stored as an income level in [-10, 30]; the level
is also the amount of money paid or owed at a round boundary. The
printed track groups several spaces per level above 10, which is what
the space helpers below translate for renderers.
"""

from __future__ import annotations

MIN_INCOME = -10
MAX_INCOME = 30
STARTING_INCOME = 10

# (level, spaces on the printed track)
INCOME_TRACK: list[tuple[int, int]] = (
    [(level, 1) for level in range(-10, 11)]
    + [(level, 2) for level in range(11, 16)]
    + [(level, 3) for level in range(16, 20)]
    + [(level, 4) for level in range(20, 24)]
    + [(24, 5), (25, 5), (26, 5), (27, 6), (28, 6), (29, 7), (30, 8)]
)

TRACK_LENGTH = sum(spaces for _, spaces in INCOME_TRACK)


def clamp_income(level: int) -> int:
    return max(MIN_INCOME, min(MAX_INCOME, level))


def first_space_of_level(level: int) -> int:
    """Index of the first printed space belonging to an income level."""
    level = clamp_income(level)
    space = 0
    for track_level, spaces in INCOME_TRACK:
        if track_level == level:
            return space
        space += spaces
    return space


def level_at_space(space: int) -> int:
    """Income level printed at a track space (clamped to the track)."""
    space = max(0, min(TRACK_LENGTH - 1, space))
    seen = 0
    for track_level, spaces in INCOME_TRACK:
        if space < seen + spaces:
            return track_level
        seen += spaces
    return MAX_INCOME
