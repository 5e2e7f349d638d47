import streamlit as st

from calculator.config import configure_logging, get_config
from calculator.theme import set_theme

configure_logging(get_config().log_level)
set_theme(page_title="Calculator", page_icon="🧮")

st.markdown(
    """
    <style>
    .main-hero {
        background: linear-gradient(120deg, #e0eafc 0%, #cfdef3 100%);
        border-radius: 18px;
        box-shadow: 0 8px 32px 0 rgba(31, 38, 135, 0.15);
        padding: 2.5rem 2rem 2rem 2rem;
        max-width: 900px;
        margin: 2.5rem auto 1.5rem auto;
        text-align: center;
    }
    .main-hero h1 { font-size: 2.6rem; font-weight: 800; color: #0b63d6; margin-bottom: 0.5rem; }
    .main-hero h2 { font-size: 1.3rem; color: #51658a; font-weight: 400; margin-bottom: 1.2rem; }
    .main-hero .desc { color: #3a4a6b; font-size: 1.05rem; }
    </style>
    """,
    unsafe_allow_html=True
)

st.markdown('<div class="main-hero">', unsafe_allow_html=True)
st.markdown('<h1>Calculator</h1>', unsafe_allow_html=True)
st.markdown('<h2>Checked as you type, remembered when you are done</h2>', unsafe_allow_html=True)
st.markdown(
    '<div class="desc">Every key is validated before it reaches the expression, so what you see can '
    'always be finished or evaluated. Percent, parentheses and sign toggling are supported, and every '
    'result is kept in a history you can reload, prune or download.</div>',
    unsafe_allow_html=True,
)
st.markdown('</div>', unsafe_allow_html=True)

st.page_link("pages/1_Calculator.py", label="Open the calculator", icon="🧮")
