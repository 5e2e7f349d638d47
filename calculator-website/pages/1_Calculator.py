from __future__ import annotations

import html
from typing import List, Tuple

import streamlit as st

from calculator.config import configure_logging, get_config
from calculator.history import KeyValueStore, build_store, history_csv
from calculator.session import CalculatorSession
from calculator.theme import set_theme
from calculator.tokens import CLEAR, DELETE, EVALUATE, TOGGLE_SIGN


cfg = get_config()
configure_logging(cfg.log_level)
set_theme(page_title="Calculator", page_icon="🧮")

st.title("Calculator")
st.caption("Keys that would make the expression invalid are refused. Use the keypad or type below.")


# (label, kind, value) per button; kind is "token" or "action".
KEYPAD: List[List[Tuple[str, str, str]]] = [
    [("C", "action", CLEAR), ("⌫", "action", DELETE), ("(", "token", "("), (")", "token", ")")],
    [("7", "token", "7"), ("8", "token", "8"), ("9", "token", "9"), ("÷", "token", "÷")],
    [("4", "token", "4"), ("5", "token", "5"), ("6", "token", "6"), ("×", "token", "×")],
    [("1", "token", "1"), ("2", "token", "2"), ("3", "token", "3"), ("−", "token", "−")],
    [("±", "action", TOGGLE_SIGN), ("0", "token", "0"), (".", "token", "."), ("+", "token", "+")],
    [("%", "token", "%"), ("=", "action", EVALUATE)],
]


@st.cache_resource(show_spinner=False)
def _history_store() -> KeyValueStore:
    return build_store(get_config())


def _session() -> CalculatorSession:
    if "calc_session" not in st.session_state:
        st.session_state.calc_session = CalculatorSession(cfg, store=_history_store())
    return st.session_state.calc_session


def _on_press(kind: str, value: str) -> None:
    session = _session()
    if kind == "action":
        session.handle_action(value)
    else:
        session.press(value)


def _on_keys() -> None:
    typed = st.session_state.get("calc_keys") or ""
    _session().type_text(typed)
    st.session_state.calc_keys = ""


def _on_load(index: int) -> None:
    _session().load_history(index)


def _on_delete(index: int) -> None:
    _session().delete_history(index)


def _on_clear_history() -> None:
    _session().clear_history()


@st.fragment(run_every=0.25)
def _display_panel() -> None:
    # Re-rendered on a timer so an error flash reverts by itself.
    session = _session()
    css = "uc-display flash" if session.display.flashing else "uc-display"
    st.markdown(f'<div class="{css}">{html.escape(session.display_text)}</div>', unsafe_allow_html=True)


session = _session()

_display_panel()

for r, row in enumerate(KEYPAD):
    cols = st.columns(4)
    for c, (label, kind, value) in enumerate(row):
        with cols[c]:
            st.button(
                label,
                key=f"calc_btn_{r}_{c}",
                on_click=_on_press,
                args=(kind, value),
                use_container_width=True,
            )

st.text_input(
    "Keyboard",
    key="calc_keys",
    on_change=_on_keys,
    placeholder="e.g. 12*(3+4)=",
    help="Digits, + - * / . ( ) % are appended, ',' counts as '.', '=' evaluates.",
)

st.divider()
st.subheader("History")

session.refresh_history()
entries = session.history
if not entries:
    st.markdown('<div class="uc-history-empty">No history yet</div>', unsafe_allow_html=True)
else:
    for idx, h in enumerate(entries):
        c1, c2, c3 = st.columns([6, 3, 1])
        with c1:
            st.button(
                h.expression,
                key=f"calc_hist_load_{idx}",
                on_click=_on_load,
                args=(idx,),
                help=f"Load into the calculator ({h.timestamp})",
                use_container_width=True,
            )
        with c2:
            st.markdown(f'<span class="uc-history-res">= {html.escape(h.result)}</span>', unsafe_allow_html=True)
        with c3:
            st.button(
                "✕",
                key=f"calc_hist_del_{idx}",
                on_click=_on_delete,
                args=(idx,),
                help=f"Delete history entry {idx + 1}",
            )

    a, b = st.columns(2)
    with a:
        st.button("Clear history", on_click=_on_clear_history, use_container_width=True)
    with b:
        st.download_button(
            "Download CSV",
            data=history_csv(entries),
            file_name="calculator_history.csv",
            mime="text/csv",
            use_container_width=True,
        )
