"""
Yahtzee - Scoring Engine

Computes the value of each of the 13 score categories for a 5-die hand.

Scoring rules:
- Ones..Sixes: sum of the dice showing that face
- Three/Four of a Kind: sum of all dice if any face appears 3+/4+ times
- Full House: 25 if face counts are exactly [2, 3] (five of a kind does not count)
- Small Straight: 30 if the dice contain 1-2-3-4, 2-3-4-5 or 3-4-5-6
- Large Straight: 40 if the sorted dice are 1-2-3-4-5 or 2-3-4-5-6
- Yahtzee: 50 if all five dice match
- Chance: sum of all dice

All methods are stateless class methods. Results never depend on dice order.
An invalid hand (wrong count or out-of-range value) scores nothing: the
single-category scorers return 0 and all_potential_scores returns {}.
"""

from collections import Counter
from typing import ClassVar, Sequence

from src.engine.base import (
    FULL_HOUSE_SCORE,
    LARGE_STRAIGHT_SCORE,
    SMALL_STRAIGHT_SCORE,
    UPPER_BONUS_THRESHOLD,
    UPPER_BONUS_VALUE,
    YAHTZEE_SCORE,
    ScoreCategory,
)
from src.engine.validators import is_valid_hand


class ScoringEngine:
    """Stateless engine for Yahtzee category scoring."""

    SMALL_STRAIGHTS: ClassVar[tuple[frozenset[int], ...]] = (
        frozenset({1, 2, 3, 4}),
        frozenset({2, 3, 4, 5}),
        frozenset({3, 4, 5, 6}),
    )
    LARGE_STRAIGHTS: ClassVar[tuple[tuple[int, ...], ...]] = (
        (1, 2, 3, 4, 5),
        (2, 3, 4, 5, 6),
    )

    @classmethod
    def is_valid_hand(cls, dice: Sequence[int]) -> bool:
        """Returns True if the dice form a scoreable 5-die hand."""
        return is_valid_hand(dice)

    @classmethod
    def dice_counts(cls, dice: Sequence[int]) -> Counter:
        """Count occurrences of each face value."""
        return Counter(dice)

    @classmethod
    def upper_score(cls, face: int, dice: Sequence[int]) -> int:
        """
        Score an upper category.

        Args:
            face: Face value counted (1-6)
            dice: The hand

        Returns:
            Sum of the dice showing ``face``
        """
        if not cls.is_valid_hand(dice):
            return 0
        return sum(d for d in dice if d == face)

    @classmethod
    def n_of_a_kind(cls, n: int, dice: Sequence[int]) -> int:
        """Sum of all dice if any face appears at least ``n`` times."""
        if not cls.is_valid_hand(dice):
            return 0
        if any(count >= n for count in cls.dice_counts(dice).values()):
            return sum(dice)
        return 0

    @classmethod
    def three_of_a_kind(cls, dice: Sequence[int]) -> int:
        return cls.n_of_a_kind(3, dice)

    @classmethod
    def four_of_a_kind(cls, dice: Sequence[int]) -> int:
        return cls.n_of_a_kind(4, dice)

    @classmethod
    def full_house(cls, dice: Sequence[int]) -> int:
        """25 points for three of one face and two of another."""
        if not cls.is_valid_hand(dice):
            return 0
        if sorted(cls.dice_counts(dice).values()) == [2, 3]:
            return FULL_HOUSE_SCORE
        return 0

    @classmethod
    def small_straight(cls, dice: Sequence[int]) -> int:
        """30 points for four sequential faces."""
        if not cls.is_valid_hand(dice):
            return 0
        faces = set(dice)
        if any(straight <= faces for straight in cls.SMALL_STRAIGHTS):
            return SMALL_STRAIGHT_SCORE
        return 0

    @classmethod
    def large_straight(cls, dice: Sequence[int]) -> int:
        """40 points for five sequential faces."""
        if not cls.is_valid_hand(dice):
            return 0
        if tuple(sorted(dice)) in cls.LARGE_STRAIGHTS:
            return LARGE_STRAIGHT_SCORE
        return 0

    @classmethod
    def yahtzee(cls, dice: Sequence[int]) -> int:
        """50 points for five of a kind."""
        if not cls.is_valid_hand(dice):
            return 0
        if 5 in cls.dice_counts(dice).values():
            return YAHTZEE_SCORE
        return 0

    @classmethod
    def chance(cls, dice: Sequence[int]) -> int:
        if not cls.is_valid_hand(dice):
            return 0
        return sum(dice)

    @classmethod
    def is_yahtzee(cls, dice: Sequence[int]) -> bool:
        """Returns True for a natural Yahtzee (five of a kind)."""
        return cls.yahtzee(dice) == YAHTZEE_SCORE

    @classmethod
    def score(cls, category: ScoreCategory, dice: Sequence[int]) -> int:
        """
        Score a single category.

        Args:
            category: The category to evaluate
            dice: The hand

        Returns:
            Points the hand is worth in ``category`` (0 for an invalid hand)
        """
        if category.is_upper:
            return cls.upper_score(category.face_value, dice)
        return _LOWER_SCORERS[category](dice)

    @classmethod
    def all_potential_scores(cls, dice: Sequence[int]) -> dict[ScoreCategory, int]:
        """
        Score every category in one pass.

        Args:
            dice: The hand

        Returns:
            Mapping of all 13 categories to points, or {} for an invalid hand
        """
        if not cls.is_valid_hand(dice):
            return {}
        return {category: cls.score(category, dice) for category in ScoreCategory}

    @classmethod
    def upper_bonus(cls, upper_total: int) -> int:
        """35 points once the upper section reaches 63."""
        return UPPER_BONUS_VALUE if upper_total >= UPPER_BONUS_THRESHOLD else 0


_LOWER_SCORERS = {
    ScoreCategory.THREE_OF_A_KIND: ScoringEngine.three_of_a_kind,
    ScoreCategory.FOUR_OF_A_KIND: ScoringEngine.four_of_a_kind,
    ScoreCategory.FULL_HOUSE: ScoringEngine.full_house,
    ScoreCategory.SMALL_STRAIGHT: ScoringEngine.small_straight,
    ScoreCategory.LARGE_STRAIGHT: ScoringEngine.large_straight,
    ScoreCategory.YAHTZEE: ScoringEngine.yahtzee,
    ScoreCategory.CHANCE: ScoringEngine.chance,
}
