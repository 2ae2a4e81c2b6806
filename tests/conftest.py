"""
Yahtzee - Test Configuration and Fixtures

Common fixtures and test data for all test modules.
"""

import random
from typing import Callable

import pytest

from src.engine.base import ScoreCategory
from src.engine.game import GameEngine


# =============================================================================
# SCORING TEST DATA
# =============================================================================

@pytest.fixture
def scoring_hands() -> dict[str, tuple[tuple[int, ...], dict[ScoreCategory, int]]]:
    """
    Hands with the category scores they must produce.

    Returns:
        Dict mapping name to (dice_values, {category: expected_points})
    """
    return {
        "five_fives": (
            (5, 5, 5, 5, 5),
            {
                ScoreCategory.ONES: 0,
                ScoreCategory.TWOS: 0,
                ScoreCategory.THREES: 0,
                ScoreCategory.FOURS: 0,
                ScoreCategory.FIVES: 25,
                ScoreCategory.SIXES: 0,
                ScoreCategory.THREE_OF_A_KIND: 25,
                ScoreCategory.FOUR_OF_A_KIND: 25,
                ScoreCategory.FULL_HOUSE: 0,
                ScoreCategory.SMALL_STRAIGHT: 0,
                ScoreCategory.LARGE_STRAIGHT: 0,
                ScoreCategory.YAHTZEE: 50,
                ScoreCategory.CHANCE: 25,
            },
        ),
        "low_full_house": (
            (1, 1, 1, 2, 2),
            {
                ScoreCategory.ONES: 3,
                ScoreCategory.TWOS: 4,
                ScoreCategory.FULL_HOUSE: 25,
                ScoreCategory.THREE_OF_A_KIND: 7,
                ScoreCategory.FOUR_OF_A_KIND: 0,
                ScoreCategory.YAHTZEE: 0,
                ScoreCategory.CHANCE: 7,
            },
        ),
        "low_straight": (
            (1, 2, 3, 4, 5),
            {
                ScoreCategory.SMALL_STRAIGHT: 30,
                ScoreCategory.LARGE_STRAIGHT: 40,
                ScoreCategory.FULL_HOUSE: 0,
                ScoreCategory.THREE_OF_A_KIND: 0,
                ScoreCategory.CHANCE: 15,
            },
        ),
        "high_straight_shuffled": (
            (6, 3, 5, 2, 4),
            {
                ScoreCategory.SMALL_STRAIGHT: 30,
                ScoreCategory.LARGE_STRAIGHT: 40,
                ScoreCategory.SIXES: 6,
                ScoreCategory.CHANCE: 20,
            },
        ),
        "small_straight_with_pair": (
            (3, 4, 4, 5, 6),
            {
                ScoreCategory.SMALL_STRAIGHT: 30,
                ScoreCategory.LARGE_STRAIGHT: 0,
                ScoreCategory.FOURS: 8,
                ScoreCategory.CHANCE: 22,
            },
        ),
        "four_sixes": (
            (6, 6, 2, 6, 6),
            {
                ScoreCategory.SIXES: 24,
                ScoreCategory.TWOS: 2,
                ScoreCategory.THREE_OF_A_KIND: 26,
                ScoreCategory.FOUR_OF_A_KIND: 26,
                ScoreCategory.FULL_HOUSE: 0,
                ScoreCategory.YAHTZEE: 0,
            },
        ),
        "nothing": (
            (1, 1, 3, 4, 6),
            {
                ScoreCategory.THREE_OF_A_KIND: 0,
                ScoreCategory.FULL_HOUSE: 0,
                ScoreCategory.SMALL_STRAIGHT: 0,
                ScoreCategory.LARGE_STRAIGHT: 0,
                ScoreCategory.CHANCE: 15,
            },
        ),
    }


# =============================================================================
# TIME AND RANDOMNESS
# =============================================================================

class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source for reproducible tumbles."""
    return random.Random(1234)


# =============================================================================
# COLLABORATORS
# =============================================================================

class RecordingSound:
    """Sound collaborator that remembers every call."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def on_dice_roll_started(self) -> None:
        self.calls.append("dice_roll_started")

    def on_die_held(self) -> None:
        self.calls.append("die_held")

    def on_category_scored(self) -> None:
        self.calls.append("category_scored")

    def on_yahtzee_scored(self) -> None:
        self.calls.append("yahtzee_scored")

    def on_game_over(self) -> None:
        self.calls.append("game_over")


class RecordingCelebration:
    def __init__(self) -> None:
        self.count = 0

    def on_yahtzee(self) -> None:
        self.count += 1


class RecordingSink:
    def __init__(self) -> None:
        self.games: list = []

    def record_game(self, results) -> None:
        self.games.append(list(results))


@pytest.fixture
def sound() -> RecordingSound:
    return RecordingSound()


@pytest.fixture
def celebration() -> RecordingCelebration:
    return RecordingCelebration()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


# =============================================================================
# GAME HELPERS
# =============================================================================

@pytest.fixture
def play_hand() -> Callable[[GameEngine, tuple[int, ...]], None]:
    """
    Roll for the current player and land the dice on a chosen hand.

    Returns:
        Function (game, values) -> None
    """
    def _play(game: GameEngine, values: tuple[int, ...]) -> None:
        assert game.roll(now=0.0)
        game.settle()
        game.dice.set_values(values)
        game.refresh_potential_scores()

    return _play
