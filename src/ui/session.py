"""Yahtzee - game session wiring.

Builds a :class:`GameEngine` with the Streamlit sound and celebration
collaborators, the configured Joker-rules flag, and the Supabase result
sinks when persistence is configured.

This is the composition root of the application: a Streamlit page starts a
game with :func:`new_game` and drives it through the returned engine.
"""

from __future__ import annotations

import logging
from typing import Sequence

from src.config.settings import get_settings, joker_rules_enabled
from src.database.sinks import build_result_sinks
from src.engine.game import GameEngine
from src.ui.themes.animations import StreamlitCelebration
from src.ui.themes.sounds import StreamlitSound

logger = logging.getLogger(__name__)


def new_game(player_names: Sequence[str]) -> GameEngine:
    """Start a game for the given player names.

    Raises:
        ValueError: If the player names are invalid.
    """
    settings = get_settings()
    sinks = []
    if settings.persistence_enabled:
        try:
            sinks = build_result_sinks()
        except Exception:
            logger.exception("Persistence unavailable; results will not be saved")

    return GameEngine(
        player_names,
        joker_rules=joker_rules_enabled,
        sound=StreamlitSound(enabled=settings.enable_sounds),
        celebration=StreamlitCelebration(),
        result_sinks=sinks,
    )
