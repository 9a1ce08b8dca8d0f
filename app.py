"""Chain Clicker (Streamlit)

Principles:
- UI only renders + triggers.
- The ledger and its session are pure Python modules (chain_core, chain_engine).
- The session object lives in st.session_state and is passed explicitly.

Entry point: streamlit run app.py
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict
from typing import List

import streamlit as st

import chain_core
import chain_engine
from chain_core.state import Unit, display_value
from chain_engine.config import EngineConfig, config_from_env, configure_logging
from chain_engine.export import dumps_save_export, import_save_file, make_save_export
from chain_engine.persistence import JsonFileStore
from chain_engine.session import GameSession


APP_TITLE = "Chain Clicker"
APP_SUBTITLE = "Click A. Trade A for B, B for C, C for D, D for E. Everything upstream keeps producing."
APP_VERSION = "1.0.0"
EXPECTED_CORE_API = "chain-core-v1"
EXPECTED_ENGINE_API = "chain-engine-v1"
PLACEHOLDER_IMAGE = "https://picsum.photos/255/255"
UNITS_PER_ROW = 3

CONFIG: EngineConfig = config_from_env()
configure_logging(CONFIG)
logger = logging.getLogger(__name__)

st.set_page_config(page_title=APP_TITLE, page_icon="🖱️", layout="wide")

CSS = """
<style>
.block-container {padding-top: 3.2rem; padding-bottom: 2rem;}
.unit-name {font-size: 22px; font-weight: 600; margin-bottom: 0;}
.unit-desc {opacity: .75; margin-bottom: .4rem;}
.leftalign {text-align: left; margin: 0;}
.small {font-size: 13px; opacity:.75;}
</style>
"""

st.markdown(CSS, unsafe_allow_html=True)


def check_api_versions_or_stop() -> None:
    """Stop with a helpful message if the packages don't match this app."""
    found = {
        "chain_core": getattr(chain_core, "API_VERSION", None),
        "chain_engine": getattr(chain_engine, "API_VERSION", None),
    }
    expected = {"chain_core": EXPECTED_CORE_API, "chain_engine": EXPECTED_ENGINE_API}
    if found != expected:
        st.error(
            "Package versions do not match the app (partial update?).\n\n"
            f"Expected: {expected}\n\nFound: {found}"
        )
        st.stop()


check_api_versions_or_stop()


# =========================
# State
# =========================


def _ensure_state() -> GameSession:
    ss = st.session_state
    if ss.get("session") is None:
        ss.session = GameSession.open(CONFIG, JsonFileStore(CONFIG.save_path))
        ss.last_import = None
        ss.flash = ""
    return ss.session


def _on_click(session: GameSession, name: str) -> None:
    if not session.click(name):
        unit = session.ledger.get(name)
        desc = unit.description if unit is not None else ""
        st.session_state.flash = f"Not enough for {name} ({desc})."
    else:
        st.session_state.flash = ""


# =========================
# Board
# =========================


def _rows(units: List[Unit]) -> List[List[Unit]]:
    return [units[i : i + UNITS_PER_ROW] for i in range(0, len(units), UNITS_PER_ROW)]


def render_summary(session: GameSession) -> None:
    rates = session.ledger.rates()
    for unit in session.ledger:
        rate = rates.get(unit.name, 0.0)
        suffix = f" <span class='small'>(+{display_value(rate)}/s)</span>" if rate > 0 else ""
        st.markdown(
            f"<p class='leftalign'>{unit.name} {display_value(unit.value)}{suffix}</p>",
            unsafe_allow_html=True,
        )


def render_save_panel(session: GameSession) -> None:
    # lives in the fragment so it follows every tick and click
    st.caption(f"Tick every {CONFIG.tick_ms} ms · {session.ticks} ticks this session")
    export_text = dumps_save_export(
        make_save_export(session.ledger, ticks=session.ticks, app=APP_TITLE, version=APP_VERSION)
    )
    st.download_button(
        "Download save",
        data=export_text.encode("utf-8"),
        file_name="chain_clicker_save.json",
        mime="application/json",
        key="download_save",
        use_container_width=True,
    )
    with st.expander("Save file"):
        st.code(export_text, language="json")


def render_units(session: GameSession) -> None:
    for row in _rows(list(session.ledger)):
        cols = st.columns(UNITS_PER_ROW)
        for col, unit in zip(cols, row):
            with col:
                st.markdown(f"<p class='unit-name'>{unit.name}</p>", unsafe_allow_html=True)
                st.markdown(f"<p class='unit-desc'>{unit.description}</p>", unsafe_allow_html=True)
                st.image(PLACEHOLDER_IMAGE, width=255)
                st.button(
                    f"Click {unit.name}",
                    key=f"click_{unit.name}",
                    on_click=_on_click,
                    args=(session, unit.name),
                    use_container_width=True,
                )


@st.fragment(run_every=CONFIG.tick_seconds)
def board(session: GameSession) -> None:
    try:
        session.pump(time.monotonic())
    except OSError as e:
        logger.error("could not save session: %s", e)
        st.error(f"Saving failed: {e}")

    left, right = st.columns([3.0, 1.0])
    with right:
        st.markdown("#### Units")
        render_summary(session)
        if st.session_state.get("flash"):
            st.caption(st.session_state.flash)
        render_save_panel(session)
    with left:
        render_units(session)


# =========================
# Sidebar
# =========================


def import_controls(session: GameSession) -> None:
    ss = st.session_state
    st.sidebar.markdown("---")
    st.sidebar.markdown("### Save Import")

    up = st.sidebar.file_uploader("Load save", type=["json"], accept_multiple_files=False)
    if up is None:
        return
    marker = (up.name, up.size)
    if ss.get("last_import") == marker:
        return
    ss.last_import = marker

    ok, message = import_save_file(session, up.read())
    if ok:
        st.sidebar.success(message)
    else:
        st.sidebar.error(message)


def sidebar(session: GameSession) -> None:
    st.sidebar.markdown(f"**{APP_TITLE}**  ")
    st.sidebar.markdown(f"v{APP_VERSION}")

    if st.sidebar.button("Reset", key="reset", use_container_width=True):
        session.reset()
        st.session_state.flash = ""
        st.rerun()

    import_controls(session)

    with st.sidebar.expander("Debug"):
        st.json({"config": asdict(CONFIG)})


# =========================
# Main
# =========================


def main() -> None:
    session = _ensure_state()
    sidebar(session)

    st.title(APP_TITLE)
    st.caption(APP_SUBTITLE)
    board(session)


if __name__ == "__main__":
    main()
