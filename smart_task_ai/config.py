from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

DEFAULT_TASKS_TABLE = "tasks"
DEFAULT_MODEL = "gpt-4o-mini"


def get_secret(name: str) -> Optional[str]:
    """Read a setting from ``st.secrets`` first, then from the environment."""

    try:
        value = st.secrets.get(name)
        if value:
            return str(value)
    except StreamlitSecretNotFoundError:
        value = None
    return os.getenv(name)


@dataclass(frozen=True)
class Settings:
    supabase_url: Optional[str]
    supabase_anon_key: Optional[str]
    tasks_table: str
    openai_api_key: Optional[str]
    openai_base_url: Optional[str]
    openai_model: str


def load_settings() -> Settings:
    """Collect the store and generation credentials.

    Missing values are kept as ``None``; the first call against the
    corresponding service fails and is handled there.
    """

    return Settings(
        supabase_url=get_secret("SUPABASE_URL"),
        supabase_anon_key=get_secret("SUPABASE_ANON_KEY"),
        tasks_table=get_secret("SUPABASE_TASKS_TABLE") or DEFAULT_TASKS_TABLE,
        openai_api_key=get_secret("OPENAI_API_KEY"),
        openai_base_url=get_secret("OPENAI_BASE_URL"),
        openai_model=get_secret("OPENAI_MODEL") or DEFAULT_MODEL,
    )


__all__ = ["DEFAULT_MODEL", "DEFAULT_TASKS_TABLE", "Settings", "get_secret", "load_settings"]
