"""
Yahtzee - Player Stats Manager

CRUD operations for the `player_stats` table.
"""

import logging
from datetime import datetime, timezone
from typing import Sequence

from supabase import Client

from src.database.game_history import GameHistoryManager
from src.database.models import PlayerStats
from src.engine.base import YAHTZEE_BONUS_VALUE, PlayerResult

logger = logging.getLogger(__name__)


def _fold_game(
    existing: PlayerStats | None,
    player_name: str,
    score: int,
    yahtzee_count: int,
    played_at: datetime | None,
) -> PlayerStats:
    """Add one game to a player's running totals."""
    if existing is None:
        return PlayerStats(
            player_name=player_name,
            games_played=1,
            total_score=score,
            high_score=score,
            total_yahtzees=yahtzee_count,
            last_played=played_at,
        )

    last_played = existing.last_played
    if played_at is not None and (last_played is None or played_at > last_played):
        last_played = played_at
    return existing.model_copy(update={
        "games_played": existing.games_played + 1,
        "total_score": existing.total_score + score,
        "high_score": max(existing.high_score, score),
        "total_yahtzees": existing.total_yahtzees + yahtzee_count,
        "last_played": last_played,
    })


class PlayerStatsManager:
    """Tracks per-player statistics across games in Supabase."""

    def __init__(self, client: Client) -> None:
        self.client = client
        self.table = client.table("player_stats")

    def record_game(self, results: Sequence[PlayerResult]) -> None:
        """Fold one finished game into each player's running totals."""
        for result in results:
            self.record(result.name, result.grand_total, result.yahtzee_count)

    def record(self, player_name: str, score: int, yahtzee_count: int) -> PlayerStats:
        """Add a single game result to a player's stats."""
        stats = _fold_game(
            self.stats_for(player_name),
            player_name,
            score,
            yahtzee_count,
            datetime.now(timezone.utc),
        )
        data = (
            self.table
            .upsert(stats.model_dump(mode="json"), on_conflict="player_name")
            .execute()
        )
        logger.debug("Updated stats for %s: %d games", player_name, stats.games_played)
        return PlayerStats.model_validate(data.data[0])

    def recalculate_from_history(self, history: GameHistoryManager) -> list[PlayerStats]:
        """
        Rebuild every player's stats from the stored game history.

        Used after games are deleted. A player who had a Yahtzee in a game is
        credited with one plus one per 100-point Yahtzee bonus.

        Returns:
            The rebuilt stats, one entry per player found in the history
        """
        rebuilt: dict[str, PlayerStats] = {}
        for game in history.all_games():
            for player in game.players:
                yahtzees = 1 + player.yahtzee_bonus // YAHTZEE_BONUS_VALUE if player.had_yahtzee else 0
                rebuilt[player.player_name] = _fold_game(
                    rebuilt.get(player.player_name),
                    player.player_name,
                    player.final_score,
                    yahtzees,
                    game.played_at,
                )

        self.clear_stats()
        if rebuilt:
            rows = [stats.model_dump(mode="json") for stats in rebuilt.values()]
            self.table.upsert(rows, on_conflict="player_name").execute()
        logger.info("Recalculated stats for %d players from history", len(rebuilt))
        return list(rebuilt.values())

    def stats_for(self, player_name: str) -> PlayerStats | None:
        data = (
            self.table
            .select("*")
            .eq("player_name", player_name)
            .execute()
        )
        if data.data:
            return PlayerStats.model_validate(data.data[0])
        return None

    def all_player_stats(self) -> list[PlayerStats]:
        """Every player's stats, best high score first."""
        data = (
            self.table
            .select("*")
            .order("high_score", desc=True)
            .execute()
        )
        return [PlayerStats.model_validate(row) for row in data.data]

    def top_players(self, limit: int = 10) -> list[PlayerStats]:
        return self.all_player_stats()[:limit]

    def clear_stats(self, player_name: str | None = None) -> None:
        """Delete one player's stats, or everyone's when no name is given."""
        if player_name is None:
            self.table.delete().neq("player_name", "").execute()
        else:
            self.table.delete().eq("player_name", player_name).execute()
