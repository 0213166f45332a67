"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

SETUP_PAGE = "Setup / Connection"
PAGE_ORDER = (
    "Analytics",
    "Board & Stale Tickets",
    "Slack Messenger",
    "Meeting Notes",
    SETUP_PAGE,
)

PAGES = {}


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def ordered_pages() -> list[str]:
    """Known pages in menu order, then any others alphabetically."""
    known = [name for name in PAGE_ORDER if name in PAGES]
    return known + sorted(name for name in PAGES if name not in PAGE_ORDER)


def main():
    st.sidebar.title("PM Dashboard")
    pages = ordered_pages()
    if not pages:
        st.write("No pages registered yet.")
        return
    # Land on setup until Jira credentials are in place
    settings = st.session_state.get("settings")
    needs_setup = settings is None or not settings.jira.is_complete
    default = pages.index(SETUP_PAGE) if needs_setup and SETUP_PAGE in pages else 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
