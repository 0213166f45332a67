"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``pm_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from pm_app.app import main
from pm_app.core.settings import load_settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("pm_app")

st.set_page_config(page_title="PM Dashboard", layout="wide")


def _auto_init_settings():
    """Load credentials once per session from Streamlit secrets and the environment."""
    if "settings" in st.session_state:
        return
    try:
        secrets = st.secrets.to_dict()
    except FileNotFoundError:
        secrets = {}
    settings = load_settings(secrets)
    st.session_state["settings"] = settings
    if settings.jira.is_complete:
        st.sidebar.success("Jira credentials loaded.")
    else:
        st.sidebar.warning("Jira credentials not found. Please use the Setup page.")


_auto_init_settings()

PAGES_DIR = Path(__file__).parent / "pm_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"pm_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception:
        logger.exception("Failed importing page %s", mod_name)

if __name__ == "__main__":
    main()
