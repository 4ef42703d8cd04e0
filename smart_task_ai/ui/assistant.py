from __future__ import annotations

from typing import Optional, Sequence

import streamlit as st

from smart_task_ai.ai_features import (
    AssistantMode,
    draft_task_from_response,
    generate_daily_insights,
    request_assistance,
    supports_task_creation,
)
from smart_task_ai.constants import AI_DAILY_INSIGHTS_KEY, AI_INPUT_KEY, AI_RESPONSE_KEY
from smart_task_ai.models import Task
from smart_task_ai.state import push_flash
from smart_task_ai.task_store import TaskStore


def _stored_response(mode: AssistantMode) -> Optional[dict[str, str]]:
    response = st.session_state.get(AI_RESPONSE_KEY)
    if isinstance(response, dict) and response.get("mode") == mode.value:
        return response
    return None


def _create_task(store: TaskStore, mode: AssistantMode, user_input: str, response_text: str) -> None:
    draft = draft_task_from_response(user_input, response_text)
    if draft is None:
        return
    if store.create(draft) is None:
        push_flash("error", "Could not create the task. Please try again.")
        return
    st.session_state.pop(AI_RESPONSE_KEY, None)
    st.session_state[f"{AI_INPUT_KEY}_{mode.value}"] = ""
    push_flash("success", f"Task created with {len(draft.subtasks)} subtasks.")


def _render_mode(store: TaskStore, mode: AssistantMode) -> None:
    input_key = f"{AI_INPUT_KEY}_{mode.value}"
    user_input = st.text_area("Describe your task", placeholder=mode.placeholder, key=input_key)

    if st.button(mode.label, key=f"ai_run_{mode.value}", disabled=not user_input.strip()):
        with st.spinner("Thinking..."):
            suggestion = request_assistance(mode, user_input)
        st.session_state[AI_RESPONSE_KEY] = {"mode": mode.value, "input": user_input, "text": suggestion.payload}

    response = _stored_response(mode)
    if response is None or not response.get("text"):
        return

    with st.container(border=True):
        st.markdown("**AI Response**")
        st.markdown(response["text"])

    if supports_task_creation(mode):
        st.button(
            "➕ Create Task from Response",
            key=f"ai_create_{mode.value}",
            on_click=_create_task,
            args=(store, mode, response["input"], response["text"]),
        )


def _render_daily_insights(tasks: Sequence[Task]) -> None:
    with st.container(border=True):
        st.subheader("📈 Daily Insights")
        st.caption("AI-powered analysis of your current workload")
        if st.button("Get Daily Insights", key="ai_daily_insights_button"):
            with st.spinner("Analyzing your tasks..."):
                suggestion = generate_daily_insights(tasks)
            st.session_state[AI_DAILY_INSIGHTS_KEY] = suggestion.payload

        insights = st.session_state.get(AI_DAILY_INSIGHTS_KEY)
        if insights:
            st.markdown(insights)
        else:
            st.caption("Click the button to get AI-powered insights about your tasks and schedule.")


def render_assistant(store: TaskStore) -> None:
    st.subheader("🧠 AI Task Assistant")
    st.caption("Get intelligent help with task management, planning, and productivity")

    modes = list(AssistantMode)
    mode_tabs = st.tabs([mode.label for mode in modes])
    for mode, tab in zip(modes, mode_tabs):
        with tab:
            _render_mode(store, mode)

    _render_daily_insights(store.tasks)


__all__ = ["render_assistant"]
