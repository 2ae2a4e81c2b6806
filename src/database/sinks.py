"""
Yahtzee - Persistence Sinks

Wires the persistence managers into the list of result sinks the game
engine calls at game over.
"""

from supabase import Client

from src.database.client import get_supabase_client
from src.database.game_history import GameHistoryManager
from src.database.high_scores import HighScoreManager
from src.database.player_stats import PlayerStatsManager
from src.engine.collaborators import ResultSink


def build_result_sinks(client: Client | None = None) -> list[ResultSink]:
    """All persistence managers, sharing one client."""
    client = client if client is not None else get_supabase_client()
    return [
        HighScoreManager(client),
        PlayerStatsManager(client),
        GameHistoryManager(client),
    ]
