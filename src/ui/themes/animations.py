"""Yahtzee celebration overlay."""

import streamlit as st

_CELEBRATION_KEY = "_yahtzee_celebration"


class StreamlitCelebration:
    """Celebration collaborator that flags the overlay for the next render."""

    def on_yahtzee(self) -> None:
        st.session_state[_CELEBRATION_KEY] = True


def render_yahtzee_celebration() -> bool:
    """Render the Yahtzee overlay once if it was flagged.

    Returns:
        True if the overlay was rendered.
    """
    if not st.session_state.pop(_CELEBRATION_KEY, False):
        return False
    st.markdown(
        '<div class="yahtzee-overlay">'
        "<h1>YAHTZEE!</h1>"
        "<p>Five of a kind for 50 points.</p>"
        "</div>",
        unsafe_allow_html=True,
    )
    return True
