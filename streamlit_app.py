"""
Correlation Reminders
Main entry point for Streamlit Cloud deployment
"""

import logging

import streamlit as st

# Set page config FIRST - before any other Streamlit command
st.set_page_config(
    page_title="Correlation Reminders",
    page_icon="📈",
    layout="wide",
    initial_sidebar_state="collapsed"
)

if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    from correlation_page import show
    show()
