from __future__ import annotations

import html
from typing import Any, Mapping

from courtside_core.formatting import format_event_date
from courtside_core.results import event_result, format_scoreline
from courtside_web.ui_constants import RESULT_LABELS


def get_app_css() -> str:
    return """
    <style>
    :root {
        --cs-ink: #1B1F2A;
        --cs-ink-2: #252B3A;
        --cs-light-bg: #F4F1EC;
        --cs-card-bg: #FFFFFF;
        --cs-text: #1A1D24;
        --cs-muted: #6A7080;
        --cs-accent: #FF7D00;
        --cs-win: #2E9E5B;
        --cs-loss: #D64545;
        --cs-border: #E2DDD5;
        --cs-shadow: 0 8px 20px rgba(27, 31, 42, 0.06);
    }

    .stApp {
        background: linear-gradient(180deg, #F8F6F2 0%, #F4F1EC 240px, #F4F1EC 100%);
        color: var(--cs-text);
    }

    #MainMenu,
    footer {
        visibility: hidden;
        height: 0;
    }

    .block-container {
        max-width: 1180px;
        padding-top: 1.1rem;
        padding-bottom: 1.4rem;
    }

    section[data-testid="stSidebar"] > div {
        background: linear-gradient(180deg, #1B1F2A 0%, #252B3A 100%);
        border-right: 1px solid rgba(255,255,255,0.08);
    }

    section[data-testid="stSidebar"] * {
        color: #E9E4DC;
    }

    section[data-testid="stSidebar"] hr {
        border-color: rgba(255,255,255,0.12);
        margin: 0.55rem 0;
    }

    .cs-header {
        background: linear-gradient(90deg, var(--cs-ink), var(--cs-ink-2));
        color: white;
        border-radius: 12px;
        padding: 12px 14px;
        margin-bottom: 10px;
        border-bottom: 3px solid var(--cs-accent);
        box-shadow: var(--cs-shadow);
    }

    .cs-wordmark {
        font-size: 1.16rem;
        font-weight: 700;
        letter-spacing: 0.02em;
    }

    .cs-tagline {
        color: #D9D2C7;
        font-size: 0.86rem;
        margin-top: 3px;
    }

    .cs-chip {
        background: rgba(255, 255, 255, 0.10);
        border: 1px solid rgba(255, 255, 255, 0.18);
        border-radius: 999px;
        padding: 2px 9px;
        font-size: 0.76rem;
        line-height: 1.45;
        margin-right: 6px;
    }

    .cs-card-title {
        font-size: 0.95rem;
        font-weight: 700;
        margin-bottom: 4px;
        color: #222634;
    }

    .cs-card-subtitle {
        font-size: 0.81rem;
        color: var(--cs-muted);
        margin-bottom: 10px;
    }

    .cs-badge {
        border-radius: 999px;
        padding: 2px 9px;
        font-size: 0.74rem;
        font-weight: 600;
        white-space: nowrap;
    }

    .cs-badge-win {
        background: rgba(46, 158, 91, 0.12);
        color: var(--cs-win);
    }

    .cs-badge-loss {
        background: rgba(214, 69, 69, 0.12);
        color: var(--cs-loss);
    }

    .cs-badge-draw {
        background: rgba(106, 112, 128, 0.12);
        color: var(--cs-muted);
    }

    .cs-disclaimer {
        color: #8A8F9A;
        font-size: 0.74rem;
        margin-top: 8px;
        margin-bottom: 4px;
    }

    [data-testid="stTabs"] button[role="tab"] {
        border-radius: 9px 9px 0 0;
        padding: 0.4rem 0.8rem;
        font-weight: 600;
        font-size: 0.88rem;
    }

    [data-testid="stDataFrame"] {
        border: 1px solid var(--cs-border);
        border-radius: 10px;
        overflow: hidden;
    }

    [data-testid="stMetricValue"] {
        font-size: 1.25rem;
    }

    .stButton > button {
        border-radius: 8px;
        font-weight: 600;
    }
    </style>
    """


def result_badge(result: str | None) -> str:
    if not result:
        return '<span class="cs-badge cs-badge-draw">No score</span>'
    label = RESULT_LABELS.get(result, result.title())
    return f'<span class="cs-badge cs-badge-{result}">{label}</span>'


def chip(text: str) -> str:
    return f'<span class="cs-chip">{html.escape(text)}</span>'


def card_title(text: str) -> str:
    return f'<div class="cs-card-title">{html.escape(text)}</div>'


def game_line(game: Mapping[str, Any]) -> str:
    # Rendered with unsafe_allow_html, so every user-entered field is escaped.
    parts = [f"**{html.escape(str(game.get('title') or ''))}**", format_event_date(game.get("date"))]
    if game.get("opponent"):
        parts.append(f"vs {html.escape(str(game['opponent']))}")
    if game.get("location"):
        parts.append(html.escape(str(game["location"])))
    parts.append(f"{format_scoreline(game)} {result_badge(event_result(game))}")
    return " · ".join(parts)
