"""
Yahtzee - External Collaborator Interfaces

The engine talks to sound, celebration and persistence services only through
these narrow protocols. Implementations are injected into the GameEngine;
the no-op defaults let the engine run headless and in tests.
"""

import logging
from typing import Protocol, Sequence, runtime_checkable

from src.engine.base import PlayerResult

logger = logging.getLogger(__name__)


@runtime_checkable
class SoundCollaborator(Protocol):
    """Fire-and-forget sound notifications."""

    def on_dice_roll_started(self) -> None: ...

    def on_die_held(self) -> None: ...

    def on_category_scored(self) -> None: ...

    def on_yahtzee_scored(self) -> None: ...

    def on_game_over(self) -> None: ...


@runtime_checkable
class CelebrationCollaborator(Protocol):
    """Receives the Yahtzee celebration event."""

    def on_yahtzee(self) -> None: ...


@runtime_checkable
class ResultSink(Protocol):
    """Persistence target for final per-player results."""

    def record_game(self, results: Sequence[PlayerResult]) -> None: ...


class NullSound:
    """Sound collaborator that plays nothing."""

    def on_dice_roll_started(self) -> None:
        pass

    def on_die_held(self) -> None:
        pass

    def on_category_scored(self) -> None:
        pass

    def on_yahtzee_scored(self) -> None:
        pass

    def on_game_over(self) -> None:
        pass


class NullCelebration:
    """Celebration collaborator that shows nothing."""

    def on_yahtzee(self) -> None:
        pass


def notify(target: object, method: str, *args) -> None:
    """
    Call ``target.method(*args)`` and absorb any failure.

    Errors raised by the collaborator are logged and dropped.
    """
    try:
        getattr(target, method)(*args)
    except Exception:
        logger.exception("Collaborator %s.%s failed", type(target).__name__, method)
