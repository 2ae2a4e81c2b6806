"""
Yahtzee - High Score Manager

CRUD operations for the `high_scores` table. Only the best
``MAX_HIGH_SCORES`` entries are kept; lower ones are pruned after each save.
"""

import logging
from typing import Sequence

from supabase import Client

from src.database.models import HighScoreEntry
from src.engine.base import PlayerResult

logger = logging.getLogger(__name__)

MAX_HIGH_SCORES = 100


class HighScoreManager:
    """Manages the high score table in Supabase."""

    def __init__(self, client: Client, max_scores: int = MAX_HIGH_SCORES) -> None:
        self.client = client
        self.table = client.table("high_scores")
        self.max_scores = max_scores

    def record_game(self, results: Sequence[PlayerResult]) -> None:
        """Store every player's final score from a finished game."""
        if not results:
            return
        rows = [{"player_name": r.name, "score": r.grand_total} for r in results]
        self.table.insert(rows).execute()
        logger.info("Saved %d high score entries", len(rows))
        self.trim()

    def save_score(self, player_name: str, score: int) -> HighScoreEntry:
        """Add a single high score entry."""
        data = (
            self.table
            .insert({"player_name": player_name, "score": score})
            .execute()
        )
        self.trim()
        return HighScoreEntry.model_validate(data.data[0])

    def trim(self) -> int:
        """
        Delete every entry ranked below the best ``max_scores``.

        Returns:
            Number of entries removed
        """
        data = (
            self.table
            .select("id")
            .order("score", desc=True)
            .range(self.max_scores, self.max_scores + 999)
            .execute()
        )
        stale = [row["id"] for row in data.data]
        if stale:
            self.table.delete().in_("id", stale).execute()
            logger.debug("Pruned %d high score entries", len(stale))
        return len(stale)

    def top_scores(self, limit: int = 10) -> list[HighScoreEntry]:
        """Best scores across all players."""
        data = (
            self.table
            .select("*")
            .order("score", desc=True)
            .limit(limit)
            .execute()
        )
        return [HighScoreEntry.model_validate(row) for row in data.data]

    def scores_for_player(self, player_name: str) -> list[HighScoreEntry]:
        """All scores for a player (name match is case-insensitive)."""
        data = (
            self.table
            .select("*")
            .ilike("player_name", player_name)
            .order("score", desc=True)
            .execute()
        )
        return [HighScoreEntry.model_validate(row) for row in data.data]

    def best_score_for_player(self, player_name: str) -> HighScoreEntry | None:
        scores = self.scores_for_player(player_name)
        return scores[0] if scores else None

    def clear_all_scores(self) -> None:
        self.table.delete().gte("score", 0).execute()
