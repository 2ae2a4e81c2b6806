"""Sound effects for Yahtzee.

The game engine announces sounds through the :class:`SoundCollaborator`
protocol. :class:`StreamlitSound` implements it by queueing the effect in
``st.session_state``; :func:`render_pending_sfx` plays the queued effect on
the next render cycle.

The SFX on/off preference lives in the non-widget session-state key
``_sfx_pref`` so it survives Streamlit's widget-lifecycle cleanup.
"""

from __future__ import annotations

import base64
from pathlib import Path

import streamlit as st
import streamlit.components.v1 as components

from src.config.settings import get_settings

# ---------------------------------------------------------------------------
# Asset paths and mappings
# ---------------------------------------------------------------------------

_SOUNDS_DIR = Path(__file__).resolve().parents[3] / "assets" / "sounds"

_SFX_FILES: dict[str, str] = {
    "dice_roll": "dice_roll.mp3",
    "hold": "hold.mp3",
    "score": "score.mp3",
    "yahtzee": "yahtzee.mp3",
    "game_over": "game_over.mp3",
}

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@st.cache_data(show_spinner=False)
def _load_audio_b64(filename: str) -> str | None:
    """Read an audio file and return its base64-encoded string.

    Returns ``None`` if the file doesn't exist.
    """
    path = _SOUNDS_DIR / filename
    if not path.exists():
        return None
    return base64.b64encode(path.read_bytes()).decode("ascii")


# ---------------------------------------------------------------------------
# Public API - SFX
# ---------------------------------------------------------------------------


def play_sfx(name: str) -> None:
    """Queue a sound effect to be played on the next render cycle.

    The actual playback happens in :func:`render_pending_sfx`.
    """
    if not st.session_state.get("_sfx_pref", True):
        return
    if name not in _SFX_FILES:
        return
    st.session_state["_sfx_pending"] = name


class StreamlitSound:
    """Sound collaborator that queues effects for the Streamlit page."""

    def __init__(self, enabled: bool | None = None) -> None:
        self.enabled = get_settings().enable_sounds if enabled is None else enabled

    def _play(self, name: str) -> None:
        if self.enabled:
            play_sfx(name)

    def on_dice_roll_started(self) -> None:
        self._play("dice_roll")

    def on_die_held(self) -> None:
        self._play("hold")

    def on_category_scored(self) -> None:
        self._play("score")

    def on_yahtzee_scored(self) -> None:
        self._play("yahtzee")

    def on_game_over(self) -> None:
        self._play("game_over")


# ---------------------------------------------------------------------------
# Public API - renderer
# ---------------------------------------------------------------------------


def render_pending_sfx() -> bool:
    """Play the queued sound effect, if any.

    Returns:
        True if an effect was emitted to the page.
    """
    pending = st.session_state.pop("_sfx_pending", None)
    if not pending or not st.session_state.get("_sfx_pref", True):
        return False

    b64 = _load_audio_b64(_SFX_FILES[pending])
    if not b64:
        return False

    volume = st.session_state.get("_sfx_volume", 50) / 100.0
    html = (
        "<script>\n"
        "(function() {\n"
        "  try {\n"
        f"    var s = new window.parent.Audio('data:audio/mpeg;base64,{b64}');\n"
        f"    s.volume = {volume};\n"
        "    s.play().catch(function(){});\n"
        "  } catch(e) { console.warn('Yahtzee audio:', e); }\n"
        "})();\n"
        "</script>"
    )
    components.html(html, height=0)
    return True
