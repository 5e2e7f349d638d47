import streamlit as st


CALCULATOR_CSS = """
.uc-display {
    background: linear-gradient(180deg,#f7fbff,#ffffff);
    border-radius:10px; padding:12px; font-size:1.6rem; text-align:right;
    border:1px solid #e6eefc; color:#0b2140; margin: 12px 0 16px 0;
    font-variant-numeric: tabular-nums; overflow-x:auto; white-space:nowrap;
}
.uc-display.flash { color:#c62828; border-color:#f5b7b1; background:#fff5f5; }
.uc-history-res { color:#0b63d6; font-weight:600; }
.uc-history-empty { color:#6b7b8f; font-size:0.9rem; }
"""


def calculator_css() -> str:
    return f"<style>{CALCULATOR_CSS}</style>"


def set_theme(
    page_title: str = "Calculator",
    page_icon: str = "🧮",
    layout: str = "centered",
    initial_sidebar_state: str = "expanded",
):
    """Set the page title and icon, then add the display and history styles.

    Every page calls this first. Only the first page config per run takes
    effect; the styles are added on every call.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except Exception:
        # set_page_config can only be called once; ignore if already set.
        pass

    st.markdown(calculator_css(), unsafe_allow_html=True)
