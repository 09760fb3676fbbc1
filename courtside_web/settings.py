from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import streamlit as st
from streamlit.errors import StreamlitSecretNotFoundError

from courtside_store.db import DB_FILENAME

ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True)
class AppSettings:
    db_path: Path
    log_level: str
    allow_signup: bool


def _env_flag(name: str, default: bool = True) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return str(raw).strip().lower() not in {"0", "false", "no", "off"}


def _secret(name: str) -> str | None:
    try:
        value = st.secrets.get(name)
    except StreamlitSecretNotFoundError:
        value = None
    return str(value) if value else None


def load_settings() -> AppSettings:
    db_path = _secret("DB_PATH") or os.getenv("COURTSIDE_DB_PATH") or str(ROOT / DB_FILENAME)
    return AppSettings(
        db_path=Path(db_path),
        log_level=os.getenv("COURTSIDE_LOG_LEVEL", "INFO"),
        allow_signup=_env_flag("COURTSIDE_ALLOW_SIGNUP", default=True),
    )
