"""
Yahtzee - Game History Manager

CRUD operations for the `game_history` table. Each row stores a complete
finished game with every player's score card. Only the newest
``MAX_GAMES`` games are kept.
"""

import json
import logging
from typing import Sequence

from supabase import Client

from src.database.models import GameRecord, PlayerGameRecord
from src.engine.base import PlayerResult

logger = logging.getLogger(__name__)

MAX_GAMES = 100


class GameHistoryManager:
    """Manages finished-game records in Supabase."""

    def __init__(self, client: Client, max_games: int = MAX_GAMES) -> None:
        self.client = client
        self.table = client.table("game_history")
        self.max_games = max_games

    @staticmethod
    def build_record(results: Sequence[PlayerResult]) -> GameRecord:
        """Assemble a game record; the winner is the first player with the top score."""
        players = [PlayerGameRecord.model_validate(r.to_dict()) for r in results]
        winner = ""
        best = None
        for player in players:
            if best is None or player.final_score > best:
                best = player.final_score
                winner = player.player_name
        return GameRecord(winner_name=winner, players=players)

    def record_game(self, results: Sequence[PlayerResult]) -> GameRecord | None:
        """Store a finished game and drop the oldest beyond ``max_games``."""
        if not results:
            return None
        record = self.build_record(results)
        data = (
            self.table
            .insert(record.model_dump(mode="json", exclude_none=True))
            .execute()
        )
        logger.info("Saved game won by %s", record.winner_name)
        self.trim()
        return GameRecord.model_validate(data.data[0])

    def trim(self) -> int:
        """
        Delete every game older than the newest ``max_games``.

        Returns:
            Number of games removed
        """
        data = (
            self.table
            .select("id")
            .order("played_at", desc=True)
            .range(self.max_games, self.max_games + 999)
            .execute()
        )
        stale = [row["id"] for row in data.data]
        if stale:
            self.table.delete().in_("id", stale).execute()
            logger.debug("Pruned %d old games", len(stale))
        return len(stale)

    def recent_games(self, limit: int = 20) -> list[GameRecord]:
        """Most recent games first."""
        data = (
            self.table
            .select("*")
            .order("played_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [GameRecord.model_validate(row) for row in data.data]

    def all_games(self) -> list[GameRecord]:
        """Every stored game, most recent first."""
        data = (
            self.table
            .select("*")
            .order("played_at", desc=True)
            .execute()
        )
        return [GameRecord.model_validate(row) for row in data.data]

    def games_for_player(self, player_name: str) -> list[GameRecord]:
        """Games the player took part in, matched inside the `players` JSON column."""
        data = (
            self.table
            .select("*")
            .contains("players", json.dumps([{"player_name": player_name}]))
            .order("played_at", desc=True)
            .execute()
        )
        return [GameRecord.model_validate(row) for row in data.data]

    def delete_game(self, game_id: str) -> None:
        self.table.delete().eq("id", game_id).execute()

    def clear_history(self) -> None:
        self.table.delete().neq("winner_name", "__none__").execute()
