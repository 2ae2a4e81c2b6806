"""
Yahtzee - Game Engine

Orchestrates a game for 1-4 players sharing one set of dice.

Turn flow:
- AWAITING_ROLL: 3 rolls left, nothing rolled yet
- ROLLING_OR_HOLDING: rolled at least once, may hold/release and re-roll
- MUST_SCORE: no rolls left

Scoring is allowed any time after the first roll once the dice have settled.
A valid score ends the turn; every other input leaves the turn as it is.
The last committed score can be taken back once.
"""

import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

from src.engine.base import (
    YAHTZEE_SCORE,
    PlayerResult,
    ScoreCategory,
    TurnPhase,
    UndoSnapshot,
)
from src.engine.collaborators import (
    CelebrationCollaborator,
    NullCelebration,
    NullSound,
    ResultSink,
    SoundCollaborator,
    notify,
)
from src.engine.dice import DiceEngine
from src.engine.events import EventListener, EventPayload, GameEvent
from src.engine.scorecard import ScoreCard
from src.engine.validators import validate_player_names

logger = logging.getLogger(__name__)


@dataclass
class Player:
    """A seat at the table."""
    id: int
    name: str
    score_card: ScoreCard = field(default_factory=ScoreCard)


class GameEngine:
    """
    One play session.

    Args:
        player_names: 1-4 names; blanks are dropped and whitespace trimmed
        joker_rules: Callable returning whether Joker rules are enabled
        sound: Sound collaborator
        celebration: Receives the Yahtzee celebration event
        result_sinks: Persistence collaborators called once at game over
        rng: Random source for the dice
        clock: Time source for the dice animation

    Raises:
        ValueError: If the player names are invalid
    """

    def __init__(
        self,
        player_names: Sequence[str],
        *,
        joker_rules: Callable[[], bool] | None = None,
        sound: SoundCollaborator | None = None,
        celebration: CelebrationCollaborator | None = None,
        result_sinks: Sequence[ResultSink] = (),
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        names = validate_player_names(player_names)
        self.players = [
            Player(id=i, name=name, score_card=ScoreCard(joker_rules))
            for i, name in enumerate(names)
        ]
        self.current_player_index = 0
        self.dice = DiceEngine(rng=rng, clock=clock)
        self._sound = sound if sound is not None else NullSound()
        self._celebration = celebration if celebration is not None else NullCelebration()
        self._result_sinks = list(result_sinks)
        self._undo: UndoSnapshot | None = None
        self._listeners: list[EventListener] = []
        self._game_over_reported = False
        logger.info("Game started with %d player(s): %s", len(names), ", ".join(names))

    # -- Queries -----------------------------------------------------------

    @property
    def current_player(self) -> Player:
        return self.players[self.current_player_index]

    @property
    def categories_remaining(self) -> int:
        """Open categories on the current player's card."""
        return self.current_player.score_card.categories_remaining

    @property
    def can_undo(self) -> bool:
        return self._undo is not None

    @property
    def undo_snapshot(self) -> UndoSnapshot | None:
        return self._undo

    @property
    def turn_phase(self) -> TurnPhase:
        if not self.dice.has_rolled:
            return TurnPhase.AWAITING_ROLL
        if self.dice.rolls_remaining == 0:
            return TurnPhase.MUST_SCORE
        return TurnPhase.ROLLING_OR_HOLDING

    @property
    def is_game_over(self) -> bool:
        return all(p.score_card.is_complete for p in self.players)

    def can_score(self) -> bool:
        return self.dice.has_rolled and not self.dice.animating and not self.is_game_over

    def standings(self) -> list[Player]:
        """Players ordered by grand total, highest first (ties keep seat order)."""
        return sorted(self.players, key=lambda p: p.score_card.grand_total, reverse=True)

    def winner(self) -> Player:
        return self.standings()[0]

    def final_results(self) -> list[PlayerResult]:
        return [p.score_card.to_result(p.name) for p in self.players]

    # -- Change listeners --------------------------------------------------

    def subscribe(self, listener: EventListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: EventListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, event: GameEvent, player_index: int | None = None, **data) -> None:
        payload = EventPayload(
            event=event,
            player_index=self.current_player_index if player_index is None else player_index,
            data=data,
        )
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Error in listener for %s", event.name)

    # -- Dice --------------------------------------------------------------

    def roll(self, now: float | None = None) -> bool:
        """Roll the unheld dice for the current player."""
        if self.is_game_over:
            return False
        if not self.dice.roll(now):
            return False

        notify(self._sound, "on_dice_roll_started")
        self._emit(GameEvent.DICE_ROLLED, rolls_remaining=self.dice.rolls_remaining)
        return True

    def toggle_hold(self, index: int) -> bool:
        if not self.dice.toggle_hold(index):
            return False
        notify(self._sound, "on_die_held")
        self._emit(GameEvent.DIE_HELD, index=index, held=self.dice.dice[index].held)
        return True

    def tick(self, now: float | None = None) -> bool:
        """
        Advance the dice animation.

        The current player's potential scores follow the dice on every change.

        Returns:
            True if any die value changed
        """
        was_animating = self.dice.animating
        changed = self.dice.tick(now)
        self._after_dice_change(changed, was_animating)
        return changed

    def settle(self) -> bool:
        """Finish the dice animation immediately."""
        was_animating = self.dice.animating
        changed = self.dice.settle()
        self._after_dice_change(changed, was_animating)
        return changed

    def _after_dice_change(self, changed: bool, was_animating: bool) -> None:
        if changed and self.dice.has_rolled:
            self.refresh_potential_scores()
        if was_animating and not self.dice.animating:
            self._emit(GameEvent.DICE_SETTLED, values=self.dice.values)

    def refresh_potential_scores(self) -> None:
        self.current_player.score_card.update_potential_scores(self.dice.values)

    # -- Scoring -----------------------------------------------------------

    def score_current_player(self, category: ScoreCategory) -> bool:
        """
        Commit the current hand to ``category`` and pass the dice on.

        Returns:
            False if the category cannot be chosen right now
        """
        if not self.can_score():
            return False

        card = self.current_player.score_card
        value = card.potential_scores.get(category)
        if value is None or not card.is_category_valid_for_selection(category):
            return False

        player_index = self.current_player_index
        self._undo = UndoSnapshot(
            player_index=player_index,
            category=category,
            prior_bonus_count=card.yahtzee_bonus_count,
        )

        is_yahtzee = category is ScoreCategory.YAHTZEE and value == YAHTZEE_SCORE
        if is_yahtzee:
            notify(self._sound, "on_yahtzee_scored")
            notify(self._celebration, "on_yahtzee")
        else:
            notify(self._sound, "on_category_scored")

        card.score(category, value)
        logger.debug(
            "Player %d scored %d in %s (bonus count %d)",
            player_index, value, category.display_name, card.yahtzee_bonus_count,
        )
        self._emit(GameEvent.CATEGORY_SCORED, player_index, category=category, value=value)
        if is_yahtzee:
            self._emit(GameEvent.YAHTZEE_SCORED, player_index)

        self.next_turn()
        if self.is_game_over:
            self._finish()
        return True

    def next_turn(self) -> None:
        """Pass the dice to the next player, keeping their faces."""
        for player in self.players:
            player.score_card.clear_potential_scores()
        self.current_player_index = (self.current_player_index + 1) % len(self.players)
        self.dice.reset()
        self._emit(GameEvent.TURN_ADVANCED)

    def undo_last_score(self) -> bool:
        """
        Take back the last committed score.

        The scoring player gets the turn back with the dice as they show now
        (settled if still tumbling) and no rolls left, so they can immediately
        pick another category. The snapshot survives later rolls; only one
        level of undo exists.

        Returns:
            False if there is nothing to undo
        """
        snapshot = self._undo
        if snapshot is None:
            return False

        self._undo = None
        for player in self.players:
            player.score_card.clear_potential_scores()

        self.current_player_index = snapshot.player_index
        card = self.current_player.score_card
        card.unscore(snapshot.category)
        card.yahtzee_bonus_count = snapshot.prior_bonus_count

        self.dice.settle()
        self.dice.force_must_score()
        self.refresh_potential_scores()
        logger.debug("Undid %s for player %d", snapshot.category.display_name, snapshot.player_index)
        self._emit(GameEvent.SCORE_UNDONE, category=snapshot.category)
        return True

    def _finish(self) -> None:
        if self._game_over_reported:
            return
        self._game_over_reported = True
        self._undo = None

        results = self.final_results()
        logger.info(
            "Game over: %s",
            ", ".join(f"{r.name}={r.grand_total}" for r in results),
        )
        notify(self._sound, "on_game_over")
        for sink in self._result_sinks:
            notify(sink, "record_game", results)
        self._emit(GameEvent.GAME_OVER, winner=self.winner().name)
