from __future__ import annotations

import logging
from datetime import datetime, timezone

import streamlit as st

from smart_task_ai.config import load_settings
from smart_task_ai.llm import get_openai_client
from smart_task_ai.session import AuthSession
from smart_task_ai.state import get_task_store, init_state, reset_state
from smart_task_ai.ui.analytics import render_analytics
from smart_task_ai.ui.assistant import render_assistant
from smart_task_ai.ui.auth import render_auth_form
from smart_task_ai.ui.common import inject_styles, render_flash
from smart_task_ai.ui.dashboard import render_dashboard
from smart_task_ai.ui.planner import render_planner
from smart_task_ai.ui.tasks import render_tasks_tab

TAB_LABELS = ["📊 Dashboard", "✅ Tasks", "🧠 AI Assistant", "📅 Daily Planner", "📈 Analytics"]


def _render_header(session: AuthSession) -> None:
    user = session.current()
    title_col, user_col = st.columns([0.75, 0.25])
    with title_col:
        st.title("🧠 SmartTaskAI")
        st.caption("Your Intelligent Task Manager & Assistant")
    with user_col:
        st.caption(f"Welcome, {user.email if user else ''}")
        if st.button("Sign Out", key="header_sign_out"):
            session.sign_out()
            reset_state()
            st.rerun()


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    st.set_page_config(
        page_title="SmartTaskAI",
        page_icon="🧠",
        layout="wide",
    )
    inject_styles()

    settings = load_settings()
    session = init_state(settings)
    if session.current() is None:
        render_auth_form(session)
        return

    _render_header(session)
    render_flash()

    if get_openai_client(settings) is None:
        st.info("No OPENAI_API_KEY found. AI features answer with fallback texts until a key is configured.")

    store = get_task_store(settings)
    now = datetime.now(timezone.utc)
    dashboard_tab, tasks_tab, assistant_tab, planner_tab, analytics_tab = st.tabs(TAB_LABELS)
    with dashboard_tab:
        render_dashboard(store.tasks, today=now.date())
    with tasks_tab:
        render_tasks_tab(store)
    with assistant_tab:
        render_assistant(store)
    with planner_tab:
        render_planner(store, today=now.date())
    with analytics_tab:
        render_analytics(store.tasks, now=now)


if __name__ == "__main__":
    main()
