"""
Yahtzee - Game Event Definitions

Event types and payloads emitted by the game engine to change listeners.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable


class GameEvent(Enum):
    """Events that can occur during a game."""

    DICE_ROLLED = auto()
    DIE_HELD = auto()
    DICE_SETTLED = auto()
    CATEGORY_SCORED = auto()
    YAHTZEE_SCORED = auto()
    TURN_ADVANCED = auto()
    SCORE_UNDONE = auto()
    GAME_OVER = auto()


@dataclass
class EventPayload:
    """Wrapper for event data."""

    event: GameEvent
    player_index: int
    data: dict[str, Any] = field(default_factory=dict)


EventListener = Callable[[EventPayload], None]
