from __future__ import annotations

import streamlit as st

from smart_task_ai.constants import AUTH_EMAIL_KEY, AUTH_PASSWORD_KEY
from smart_task_ai.integrations.supabase import SupabaseError
from smart_task_ai.session import AuthSession


def render_auth_form(session: AuthSession) -> None:
    """Sign-in / sign-up surface shown while nobody is signed in."""

    st.title("🧠 SmartTaskAI")
    st.caption("Your Intelligent Task Manager & Assistant")

    sign_in_tab, sign_up_tab = st.tabs(["Sign In", "Sign Up"])

    with sign_in_tab:
        with st.form("sign_in_form"):
            email = st.text_input("Email", key=f"{AUTH_EMAIL_KEY}_sign_in")
            password = st.text_input("Password", type="password", key=f"{AUTH_PASSWORD_KEY}_sign_in")
            submitted = st.form_submit_button("Sign In")
        if submitted:
            if not email.strip() or not password:
                st.warning("Please enter email and password.")
            else:
                try:
                    session.sign_in(email, password)
                except SupabaseError as exc:
                    st.error(str(exc))
                else:
                    st.rerun()

    with sign_up_tab:
        with st.form("sign_up_form"):
            email = st.text_input("Email", key=f"{AUTH_EMAIL_KEY}_sign_up")
            password = st.text_input("Password", type="password", key=f"{AUTH_PASSWORD_KEY}_sign_up")
            submitted = st.form_submit_button("Create Account")
        if submitted:
            if not email.strip() or not password:
                st.warning("Please enter email and password.")
            else:
                try:
                    user = session.sign_up(email, password)
                except SupabaseError as exc:
                    st.error(str(exc))
                else:
                    if user is None:
                        st.info("Check your inbox to confirm your email address, then sign in.")
                    else:
                        st.rerun()


__all__ = ["render_auth_form"]
