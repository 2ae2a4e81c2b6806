"""
Yahtzee - Database Models

Pydantic models that mirror the Supabase table schemas.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class HighScoreEntry(BaseModel):
    """Mirrors the `high_scores` table."""

    id: UUID | None = None
    player_name: str = Field(max_length=30)
    score: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class PlayerStats(BaseModel):
    """Mirrors the `player_stats` table."""

    player_name: str = Field(max_length=30)
    games_played: int = 0
    total_score: int = 0
    high_score: int = 0
    total_yahtzees: int = 0
    last_played: datetime | None = None

    model_config = {"from_attributes": True}

    @property
    def average_score(self) -> float:
        if self.games_played == 0:
            return 0.0
        return self.total_score / self.games_played


class PlayerGameRecord(BaseModel):
    """One player's line in a finished game."""

    player_name: str
    final_score: int
    upper_score: int
    lower_score: int
    upper_bonus: int
    yahtzee_bonus: int
    had_yahtzee: bool
    category_scores: dict[str, int] = Field(default_factory=dict)

    def score_for(self, category_name: str) -> int | None:
        return self.category_scores.get(category_name)


class GameRecord(BaseModel):
    """Mirrors the `game_history` table."""

    id: UUID | None = None
    played_at: datetime | None = None
    winner_name: str
    players: list[PlayerGameRecord] = Field(default_factory=list)

    model_config = {"from_attributes": True}

    @property
    def player_count(self) -> int:
        return len(self.players)
