"""
Yahtzee Database Layer.

Supabase integration for high scores, player statistics, and game history.
Each manager is a result sink the game engine calls once at game over.
"""

from src.database.client import get_supabase_client
from src.database.game_history import GameHistoryManager
from src.database.high_scores import HighScoreManager
from src.database.models import GameRecord, HighScoreEntry, PlayerGameRecord, PlayerStats
from src.database.player_stats import PlayerStatsManager
from src.database.sinks import build_result_sinks

__all__ = [
    "get_supabase_client",
    "GameHistoryManager",
    "GameRecord",
    "HighScoreEntry",
    "HighScoreManager",
    "PlayerGameRecord",
    "PlayerStats",
    "PlayerStatsManager",
    "build_result_sinks",
]
