"""Streamlit collaborators for Yahtzee: sound effects and celebrations."""

from src.ui.themes.animations import StreamlitCelebration, render_yahtzee_celebration
from src.ui.themes.sounds import StreamlitSound, play_sfx, render_pending_sfx

__all__ = [
    "StreamlitCelebration",
    "StreamlitSound",
    "play_sfx",
    "render_pending_sfx",
    "render_yahtzee_celebration",
]
