"""
Yahtzee - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine: score categories, scoring constants, dice and schedule
records, and the per-player result handed to persistence collaborators.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# Dice
NUM_DICE = 5
DIE_FACES = 6
ROLLS_PER_TURN = 3

# Scoring constants
UPPER_BONUS_THRESHOLD = 63
UPPER_BONUS_VALUE = 35
FULL_HOUSE_SCORE = 25
SMALL_STRAIGHT_SCORE = 30
LARGE_STRAIGHT_SCORE = 40
YAHTZEE_SCORE = 50
YAHTZEE_BONUS_VALUE = 100

# Players
MIN_PLAYERS = 1
MAX_PLAYERS = 4
MAX_NAME_LENGTH = 30


class ScoreCategory(Enum):
    """The 13 boxes of a Yahtzee score card, in card order."""

    # Upper section
    ONES = "Ones"
    TWOS = "Twos"
    THREES = "Threes"
    FOURS = "Fours"
    FIVES = "Fives"
    SIXES = "Sixes"

    # Lower section
    THREE_OF_A_KIND = "Three of a Kind"
    FOUR_OF_A_KIND = "Four of a Kind"
    FULL_HOUSE = "Full House"
    SMALL_STRAIGHT = "Small Straight"
    LARGE_STRAIGHT = "Large Straight"
    YAHTZEE = "Yahtzee"
    CHANCE = "Chance"

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def is_upper(self) -> bool:
        """Returns True for Ones through Sixes."""
        return self in _UPPER

    @property
    def face_value(self) -> int | None:
        """Face value counted by an upper category, None for lower ones."""
        if not self.is_upper:
            return None
        return _UPPER.index(self) + 1

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @classmethod
    def upper(cls) -> tuple["ScoreCategory", ...]:
        return _UPPER

    @classmethod
    def lower(cls) -> tuple["ScoreCategory", ...]:
        return _LOWER

    @classmethod
    def for_face(cls, value: int) -> "ScoreCategory | None":
        """Upper category matching a die face, or None if out of range."""
        if not (1 <= value <= DIE_FACES):
            return None
        return _UPPER[value - 1]


_UPPER = (
    ScoreCategory.ONES,
    ScoreCategory.TWOS,
    ScoreCategory.THREES,
    ScoreCategory.FOURS,
    ScoreCategory.FIVES,
    ScoreCategory.SIXES,
)

_LOWER = (
    ScoreCategory.THREE_OF_A_KIND,
    ScoreCategory.FOUR_OF_A_KIND,
    ScoreCategory.FULL_HOUSE,
    ScoreCategory.SMALL_STRAIGHT,
    ScoreCategory.LARGE_STRAIGHT,
    ScoreCategory.YAHTZEE,
    ScoreCategory.CHANCE,
)

_DESCRIPTIONS = {
    ScoreCategory.ONES: "Sum of all ones",
    ScoreCategory.TWOS: "Sum of all twos",
    ScoreCategory.THREES: "Sum of all threes",
    ScoreCategory.FOURS: "Sum of all fours",
    ScoreCategory.FIVES: "Sum of all fives",
    ScoreCategory.SIXES: "Sum of all sixes",
    ScoreCategory.THREE_OF_A_KIND: "3 of same kind, sum all dice",
    ScoreCategory.FOUR_OF_A_KIND: "4 of same kind, sum all dice",
    ScoreCategory.FULL_HOUSE: "3 of one + 2 of another = 25",
    ScoreCategory.SMALL_STRAIGHT: "4 in a row = 30",
    ScoreCategory.LARGE_STRAIGHT: "5 in a row = 40",
    ScoreCategory.YAHTZEE: "5 of a kind = 50",
    ScoreCategory.CHANCE: "Sum of all dice",
}


class TurnPhase(Enum):
    """Where the current player is within their turn."""
    AWAITING_ROLL = "awaiting_roll"
    ROLLING_OR_HOLDING = "rolling_or_holding"
    MUST_SCORE = "must_score"


@dataclass
class Die:
    """
    A single die owned by the DiceEngine.

    Attributes:
        value: Face currently showing (1-6)
        held: Whether the die is kept out of the next roll
        animating: Whether the die is mid-tumble
    """
    value: int
    held: bool = False
    animating: bool = False


@dataclass(frozen=True)
class TumbleFrame:
    """
    One scheduled face change of a tumbling die.

    Attributes:
        die_index: Which die (0-4) the frame belongs to
        value: Face shown once the frame is applied
        offset: Time at which the frame is due
    """
    die_index: int
    value: int
    offset: float


@dataclass(frozen=True)
class UndoSnapshot:
    """Bookkeeping needed to take back the last committed score."""
    player_index: int
    category: ScoreCategory
    prior_bonus_count: int


@dataclass(frozen=True)
class PlayerResult:
    """
    Final per-player totals handed to persistence collaborators at game over.

    Attributes:
        name: Player name
        grand_total: Upper + upper bonus + lower + Yahtzee bonus
        upper_total: Sum of upper categories (without bonus)
        lower_total: Sum of lower categories
        upper_bonus: 35 or 0
        yahtzee_bonus: 100 per bonus Yahtzee
        had_yahtzee: Whether the Yahtzee box holds 50
        yahtzee_bonus_count: Number of bonus Yahtzees
        category_scores: Display name -> score for every scored category
    """
    name: str
    grand_total: int
    upper_total: int
    lower_total: int
    upper_bonus: int
    yahtzee_bonus: int
    had_yahtzee: bool
    yahtzee_bonus_count: int = 0
    category_scores: dict[str, int] = field(default_factory=dict)

    @property
    def yahtzee_count(self) -> int:
        """Yahtzees rolled in the game, counting the scored one."""
        if not self.had_yahtzee:
            return 0
        return 1 + self.yahtzee_bonus_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "player_name": self.name,
            "final_score": self.grand_total,
            "upper_score": self.upper_total,
            "lower_score": self.lower_total,
            "upper_bonus": self.upper_bonus,
            "yahtzee_bonus": self.yahtzee_bonus,
            "had_yahtzee": self.had_yahtzee,
            "category_scores": dict(self.category_scores),
        }
