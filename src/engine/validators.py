"""
Yahtzee - Input Validation Utilities

Provides validation functions for game engine inputs. Validators either
return validated data or raise descriptive ValueError exceptions; the
predicate helpers return booleans for callers that reject silently.
"""

from typing import Sequence

from src.engine.base import DIE_FACES, MAX_NAME_LENGTH, MAX_PLAYERS, MIN_PLAYERS, NUM_DICE


def is_valid_hand(values: Sequence[int]) -> bool:
    """
    Check whether a sequence is a scoreable hand.

    A hand is exactly 5 integers, each between 1 and 6.

    Args:
        values: Candidate dice values

    Returns:
        True if the hand can be scored
    """
    if len(values) != NUM_DICE:
        return False
    return all(
        isinstance(v, int) and not isinstance(v, bool) and 1 <= v <= DIE_FACES
        for v in values
    )


def validate_dice_values(
    values: Sequence[int],
    min_count: int = NUM_DICE,
    max_count: int | None = NUM_DICE
) -> tuple[int, ...]:
    """
    Validate and normalize dice values.

    Args:
        values: Sequence of dice values to validate
        min_count: Minimum number of dice required
        max_count: Maximum number of dice allowed (None = no limit)

    Returns:
        Validated values as a tuple

    Raises:
        ValueError: If validation fails
    """
    values_tuple = tuple(values)
    count = len(values_tuple)

    if count < min_count:
        raise ValueError(f"At least {min_count} dice required, got {count}.")

    if max_count is not None and count > max_count:
        raise ValueError(f"At most {max_count} dice allowed, got {count}.")

    for i, value in enumerate(values_tuple):
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"Die value at index {i} must be an integer, got {type(value).__name__}.")
        if not (1 <= value <= DIE_FACES):
            raise ValueError(
                f"Die value at index {i} is {value}, must be between 1 and {DIE_FACES}."
            )

    return values_tuple


def is_valid_die_index(index: int, dice_count: int = NUM_DICE) -> bool:
    """Check that an index addresses one of the dice."""
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < dice_count


def validate_player_names(names: Sequence[str]) -> tuple[str, ...]:
    """
    Validate the names a game is started with.

    Surrounding whitespace is trimmed and blank entries are dropped.

    Args:
        names: Names entered on the setup screen

    Returns:
        Cleaned names as a tuple

    Raises:
        ValueError: If fewer than 1 or more than 4 names remain, or a name is too long
    """
    cleaned = []
    for name in names:
        if not isinstance(name, str):
            raise ValueError(f"Player name must be a string, got {type(name).__name__}.")
        stripped = name.strip()
        if stripped:
            cleaned.append(stripped)

    if not (MIN_PLAYERS <= len(cleaned) <= MAX_PLAYERS):
        raise ValueError(
            f"Player count must be {MIN_PLAYERS}-{MAX_PLAYERS}, got {len(cleaned)}."
        )

    for name in cleaned:
        if len(name) > MAX_NAME_LENGTH:
            raise ValueError(
                f"Player name '{name[:10]}...' exceeds {MAX_NAME_LENGTH} characters."
            )

    return tuple(cleaned)


def validate_frame_count(count: int) -> int:
    """
    Validate the number of frames in a tumble animation.

    Raises:
        ValueError: If count is not a positive integer
    """
    if not isinstance(count, int) or isinstance(count, bool):
        raise ValueError(f"Frame count must be an integer, got {type(count).__name__}.")
    if count < 1:
        raise ValueError(f"Frame count must be positive, got {count}.")
    return count
