"""
Yahtzee Game Engine.

Pure Python game logic with zero UI/database dependencies.
Handles dice rolling and tumbling, category scoring, Joker rules,
turn order and undo.
"""

from src.engine.base import (
    Die,
    PlayerResult,
    ScoreCategory,
    TumbleFrame,
    TurnPhase,
    UndoSnapshot,
)
from src.engine.collaborators import (
    CelebrationCollaborator,
    NullCelebration,
    NullSound,
    ResultSink,
    SoundCollaborator,
)
from src.engine.dice import DiceEngine
from src.engine.events import EventPayload, GameEvent
from src.engine.game import GameEngine, Player
from src.engine.scorecard import ScoreCard
from src.engine.scoring import ScoringEngine

__all__ = [
    # Data Classes
    "Die",
    "PlayerResult",
    "TumbleFrame",
    "UndoSnapshot",
    "EventPayload",
    # Enums
    "ScoreCategory",
    "TurnPhase",
    "GameEvent",
    # Engines
    "ScoringEngine",
    "DiceEngine",
    "ScoreCard",
    "GameEngine",
    "Player",
    # Collaborators
    "SoundCollaborator",
    "CelebrationCollaborator",
    "ResultSink",
    "NullSound",
    "NullCelebration",
]
