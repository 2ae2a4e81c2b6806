"""
Yahtzee - Score Card

Per-player record of scored categories, derived totals and bonuses, and the
Joker-rule logic that decides which categories a bonus Yahtzee may go into.

Joker rules (optional, official Hasbro variant):
- A bonus Yahtzee is five of a kind rolled after the Yahtzee box holds 50
- Full House, Small Straight and Large Straight then score their fixed values
- Placement follows a strict priority:
    1. the upper category matching the rolled face, if open
    2. otherwise any open lower category
    3. otherwise any open upper category (scores zero)
"""

import logging
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from src.engine.base import (
    FULL_HOUSE_SCORE,
    LARGE_STRAIGHT_SCORE,
    SMALL_STRAIGHT_SCORE,
    YAHTZEE_BONUS_VALUE,
    YAHTZEE_SCORE,
    PlayerResult,
    ScoreCategory,
)
from src.engine.scoring import ScoringEngine

logger = logging.getLogger(__name__)

_JOKER_VALUES = {
    ScoreCategory.FULL_HOUSE: FULL_HOUSE_SCORE,
    ScoreCategory.SMALL_STRAIGHT: SMALL_STRAIGHT_SCORE,
    ScoreCategory.LARGE_STRAIGHT: LARGE_STRAIGHT_SCORE,
}


def _joker_rules_disabled() -> bool:
    return False


class ScoreCard:
    """
    One player's score card.

    Each category is write-once: a recorded score only goes away through
    :meth:`unscore`, which the game engine uses for its single undo step.

    Args:
        joker_rules: Callable returning whether Joker rules are enabled. It is
            read every time potential scores are updated and every time a
            category is checked for selection.
    """

    def __init__(self, joker_rules: Callable[[], bool] | None = None) -> None:
        self._scores: dict[ScoreCategory, int | None] = {c: None for c in ScoreCategory}
        self._joker_rules = joker_rules if joker_rules is not None else _joker_rules_disabled
        self.potential_scores: dict[ScoreCategory, int] = {}
        self.yahtzee_bonus_count = 0
        self._hand_is_yahtzee = False
        self._yahtzee_face: int | None = None

    # -- Recorded scores ---------------------------------------------------

    @property
    def scores(self) -> Mapping[ScoreCategory, int | None]:
        """Read-only view of every category (None = not scored yet)."""
        return MappingProxyType(self._scores)

    def get(self, category: ScoreCategory) -> int | None:
        return self._scores[category]

    def is_scored(self, category: ScoreCategory) -> bool:
        return self._scores[category] is not None

    @property
    def upper_total(self) -> int:
        return sum(self._scores[c] or 0 for c in ScoreCategory.upper())

    @property
    def upper_bonus(self) -> int:
        return ScoringEngine.upper_bonus(self.upper_total)

    @property
    def upper_total_with_bonus(self) -> int:
        return self.upper_total + self.upper_bonus

    @property
    def lower_total(self) -> int:
        return sum(self._scores[c] or 0 for c in ScoreCategory.lower())

    @property
    def yahtzee_bonus(self) -> int:
        return self.yahtzee_bonus_count * YAHTZEE_BONUS_VALUE

    @property
    def grand_total(self) -> int:
        return self.upper_total + self.upper_bonus + self.lower_total + self.yahtzee_bonus

    @property
    def is_complete(self) -> bool:
        return all(score is not None for score in self._scores.values())

    @property
    def categories_remaining(self) -> int:
        return sum(1 for score in self._scores.values() if score is None)

    @property
    def has_yahtzee(self) -> bool:
        """True once the Yahtzee box holds 50."""
        return self._scores[ScoreCategory.YAHTZEE] == YAHTZEE_SCORE

    # -- Current hand ------------------------------------------------------

    @property
    def hand_is_yahtzee(self) -> bool:
        return self._hand_is_yahtzee

    @property
    def yahtzee_face(self) -> int | None:
        """Face of the current natural Yahtzee, if any."""
        return self._yahtzee_face

    @property
    def is_bonus_yahtzee(self) -> bool:
        """Five of a kind rolled after the Yahtzee box already holds 50."""
        return self._hand_is_yahtzee and self.has_yahtzee

    @property
    def joker_rules_enabled(self) -> bool:
        return bool(self._joker_rules())

    def update_potential_scores(self, dice: Sequence[int]) -> None:
        """
        Recompute what every category would score with ``dice``.

        With Joker rules on and a bonus Yahtzee showing, Full House and both
        straights are set to their fixed values regardless of the dice.
        """
        self.potential_scores = ScoringEngine.all_potential_scores(dice)
        if not self.potential_scores:
            self._hand_is_yahtzee = False
            self._yahtzee_face = None
            return

        self._hand_is_yahtzee = ScoringEngine.is_yahtzee(dice)
        self._yahtzee_face = dice[0] if self._hand_is_yahtzee else None

        if self.is_bonus_yahtzee and self.joker_rules_enabled:
            self.potential_scores.update(_JOKER_VALUES)

    def clear_potential_scores(self) -> None:
        self.potential_scores = {}
        self._hand_is_yahtzee = False
        self._yahtzee_face = None

    # -- Selection ---------------------------------------------------------

    def is_category_valid_for_selection(self, category: ScoreCategory) -> bool:
        """
        Decide whether the player may put the current hand in ``category``.

        Without a bonus Yahtzee (or with Joker rules off) every open category
        is allowed. Otherwise only the highest-priority open tier is.
        """
        if self.is_scored(category):
            return False

        if not self.joker_rules_enabled or not self.is_bonus_yahtzee:
            return True

        matching = ScoreCategory.for_face(self._yahtzee_face)
        if matching is not None and not self.is_scored(matching):
            return category is matching

        if any(not self.is_scored(c) for c in ScoreCategory.lower()):
            return not category.is_upper

        return category.is_upper

    def valid_categories(self) -> list[ScoreCategory]:
        """Categories currently selectable, in card order."""
        return [c for c in ScoreCategory if self.is_category_valid_for_selection(c)]

    # -- Mutation ----------------------------------------------------------

    def score(self, category: ScoreCategory, value: int) -> bool:
        """
        Record ``value`` in ``category``.

        Scoring a natural Yahtzee anywhere but the Yahtzee box while that box
        already holds 50 also earns a Yahtzee bonus.

        Returns:
            False if the category was already scored
        """
        if self.is_scored(category):
            return False

        if self._hand_is_yahtzee and category is not ScoreCategory.YAHTZEE and self.has_yahtzee:
            self.yahtzee_bonus_count += 1
            logger.debug("Yahtzee bonus earned, count now %d", self.yahtzee_bonus_count)

        self._scores[category] = value
        return True

    def unscore(self, category: ScoreCategory) -> bool:
        """Clear a recorded category. Only the undo path should call this."""
        if not self.is_scored(category):
            return False
        self._scores[category] = None
        return True

    def reset(self) -> None:
        for category in ScoreCategory:
            self._scores[category] = None
        self.yahtzee_bonus_count = 0
        self.clear_potential_scores()

    def to_result(self, name: str) -> PlayerResult:
        """Snapshot the card as the final record handed to persistence."""
        return PlayerResult(
            name=name,
            grand_total=self.grand_total,
            upper_total=self.upper_total,
            lower_total=self.lower_total,
            upper_bonus=self.upper_bonus,
            yahtzee_bonus=self.yahtzee_bonus,
            had_yahtzee=self.has_yahtzee,
            yahtzee_bonus_count=self.yahtzee_bonus_count,
            category_scores={
                c.display_name: score
                for c, score in self._scores.items()
                if score is not None
            },
        )
