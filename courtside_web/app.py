from __future__ import annotations

import logging
import sys
from dataclasses import asdict
from datetime import date, datetime, timezone
from io import BytesIO, StringIO
from pathlib import Path
from typing import Any, Callable

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import altair as alt
import pandas as pd
import streamlit as st

from courtside_core.aggregates import (
    compute_player_averages,
    compute_team_averages,
    compute_totals,
    get_event_series,
    get_player_series,
)
from courtside_core.attendance import attendance_history, initial_attendance
from courtside_core.calendar import combine_date_time, group_events_by_day
from courtside_core.dashboard import build_dashboard_summary
from courtside_core.errors import CourtsideError, ValidationError
from courtside_core.formatting import (
    fmt_average,
    fmt_percent,
    format_event_date,
    format_event_datetime,
    parse_event_datetime,
)
from courtside_core.log import configure_logging
from courtside_core.models import EVENT_TYPE_GAME, EVENT_TYPES, STAT_FIELDS
from courtside_core.stat_entry import clean_stat_line, initial_stat_lines
from courtside_core.validation import (
    MIN_USERNAME_LENGTH,
    parse_optional_int,
    validate_event_form,
    validate_game_form,
    validate_player_form,
)
from courtside_reports.pdf_report import generate_player_report_pdf
from courtside_store.auth import Session, SessionProvider
from courtside_store.db import Database
from courtside_web.settings import AppSettings, load_settings
from courtside_web.ui_constants import (
    APP_DISCLAIMER,
    APP_SUBTITLE,
    APP_TITLE,
    EVENT_TYPE_LABELS,
    HELP_TEXT,
    NAV_ICONS,
    NAV_SCREENS,
    POSITIONS,
    SECTION_GAP_MD,
    STAT_COLORS,
    STAT_LABELS,
)
from courtside_web.ui_styles import card_title, chip, game_line, get_app_css

logger = logging.getLogger(__name__)

NAV_KEY = "sidebar_nav"
NEW_ITEM = "➕ New"


@st.cache_resource(show_spinner=False)
def _get_database(db_path: str) -> Database:
    logger.info("Opening database at %s", db_path)
    return Database(db_path)


def _inject_styles() -> None:
    st.markdown(get_app_css(), unsafe_allow_html=True)


def _notify_error(action: str, exc: CourtsideError) -> None:
    logger.warning("%s failed: %s", action, exc)
    if isinstance(exc, ValidationError):
        for message in exc.errors:
            st.error(message)
        return
    st.error(f"{action} failed. {exc}")


def _load(action: str, loader: Callable[..., Any], *args: Any, default: Any = None, **kwargs: Any) -> Any:
    try:
        return loader(*args, **kwargs)
    except CourtsideError as exc:
        _notify_error(action, exc)
        return default


def _write(action: str, writer: Callable[..., Any], *args: Any, success: str | None = None, **kwargs: Any) -> bool:
    try:
        writer(*args, **kwargs)
    except CourtsideError as exc:
        _notify_error(action, exc)
        return False
    if success:
        st.toast(success)
    return True


def _show_errors(errors: list[str]) -> bool:
    for message in errors:
        st.error(message)
    return bool(errors)


def _event_label(event: dict[str, Any]) -> str:
    return f"{event['title']} ({format_event_date(event.get('date'))})"


def _stats_frame(rows: list[Any], label_field: str, label_title: str) -> pd.DataFrame:
    records = [asdict(row) for row in rows]
    columns = [label_field] + (["date"] if label_field == "event" else []) + list(STAT_FIELDS)
    frame = pd.DataFrame(records, columns=columns)
    return frame.rename(columns={label_field: label_title, "date": "Date", **STAT_LABELS})


def _with_totals_row(frame: pd.DataFrame, rows: list[Any], label_title: str, total_label: str) -> pd.DataFrame:
    totals = compute_totals(rows)
    if totals is None:
        return frame
    total_row = {label_title: total_label, **{STAT_LABELS[k]: v for k, v in asdict(totals).items()}}
    if "Date" in frame.columns:
        total_row["Date"] = ""
    return pd.concat([frame, pd.DataFrame([total_row])], ignore_index=True)


def _stat_bar_chart(frame: pd.DataFrame, label_title: str) -> None:
    long_df = frame.melt(
        id_vars=[label_title],
        value_vars=list(STAT_LABELS.values()),
        var_name="Stat",
        value_name="Value",
    )
    chart = (
        alt.Chart(long_df)
        .mark_bar()
        .encode(
            x=alt.X(f"{label_title}:N", sort=None, title=None, axis=alt.Axis(labelAngle=-45)),
            xOffset=alt.XOffset("Stat:N", sort=list(STAT_LABELS.values())),
            y=alt.Y("Value:Q", title=None),
            color=alt.Color(
                "Stat:N",
                sort=list(STAT_LABELS.values()),
                scale=alt.Scale(domain=list(STAT_LABELS.values()), range=STAT_COLORS),
            ),
            tooltip=[alt.Tooltip(f"{label_title}:N"), alt.Tooltip("Stat:N"), alt.Tooltip("Value:Q")],
        )
        .properties(height=360)
    )
    st.altair_chart(chart, use_container_width=True)


def _build_export_csv(frame: pd.DataFrame, scope: str) -> str:
    header_lines = [
        f"# Export generated_at_utc: {datetime.now(timezone.utc).isoformat()}",
        f"# Scope: {scope}",
    ]
    buffer = StringIO()
    frame.to_csv(buffer, index=False)
    return "\n".join(header_lines) + "\n" + buffer.getvalue()


def _render_auth(auth: SessionProvider, settings: AppSettings) -> None:
    st.markdown(
        f'<div class="cs-header"><div class="cs-wordmark">{APP_TITLE}</div>'
        f'<div class="cs-tagline">{APP_SUBTITLE}</div></div>',
        unsafe_allow_html=True,
    )
    tab_names = ["Sign in", "Sign up"] if settings.allow_signup else ["Sign in"]
    tabs = st.tabs(tab_names)
    with tabs[0]:
        with st.form("sign_in_form", clear_on_submit=False):
            email = st.text_input("Email", key="sign_in_email")
            password = st.text_input("Password", type="password", key="sign_in_password")
            submitted = st.form_submit_button("Sign in", use_container_width=True)
        if submitted:
            try:
                auth.sign_in(email, password)
            except CourtsideError as exc:
                _notify_error("Sign in", exc)
            else:
                st.rerun()
    if settings.allow_signup:
        with tabs[1]:
            with st.form("sign_up_form", clear_on_submit=False):
                username = st.text_input("Username", key="sign_up_username")
                email = st.text_input("Email", key="sign_up_email")
                password = st.text_input("Password", type="password", key="sign_up_password")
                submitted = st.form_submit_button("Create account", use_container_width=True)
            if submitted:
                try:
                    auth.sign_up(email, password, username)
                except CourtsideError as exc:
                    _notify_error("Sign up", exc)
                else:
                    st.rerun()


def _render_sidebar(auth: SessionProvider, session: Session) -> str:
    st.sidebar.markdown(f"### {APP_TITLE}")
    st.sidebar.caption(f"Signed in as {session.username or session.email}")
    options = [f"{NAV_ICONS.get(screen, '')} {screen}" for screen in NAV_SCREENS]
    if st.session_state.get(NAV_KEY) not in options:
        st.session_state[NAV_KEY] = options[0]
    choice = st.sidebar.radio("Navigation", options=options, key=NAV_KEY)
    st.sidebar.markdown("---")
    if st.sidebar.button("Sign out", use_container_width=True):
        auth.sign_out()
        st.rerun()
    return choice.split(" ", 1)[1] if " " in choice else choice


def _render_top_header(session: Session, section: str) -> None:
    st.markdown(
        (
            '<div class="cs-header">'
            f'<div class="cs-wordmark">{APP_TITLE}</div>'
            f'<div class="cs-tagline">{APP_SUBTITLE}</div>'
            '<div style="margin-top:8px;">'
            + chip(f"Coach: {session.username or session.email}")
            + chip(f"View: {section}")
            + "</div></div>"
        ),
        unsafe_allow_html=True,
    )


def _render_dashboard(db: Database, user_id: str) -> None:
    st.subheader("Dashboard")
    players = _load("Loading players", db.list_players, user_id, default=[])
    events = _load("Loading events", db.list_events, user_id, default=[])
    attendance = _load("Loading attendance", db.list_attendance, user_id, default=[])
    games = [event for event in events if event.get("type") == EVENT_TYPE_GAME]

    summary = build_dashboard_summary(players, games, attendance, events)
    c1, c2, c3, c4 = st.columns(4, gap="small")
    c1.metric("Players", summary.player_count)
    c2.metric("Games", summary.game_count)
    c3.metric("Record (W-L-D)", f"{summary.victories}-{summary.defeats}-{summary.draws}")
    c4.metric("Attendance rate", fmt_percent(summary.attendance_rate))
    last_date = format_event_date(summary.last_attendance_date) if summary.last_attendance_date else "—"
    st.caption(f"Last attendance recorded: {last_date}")

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    st.markdown('<div class="cs-card-title">Upcoming events</div>', unsafe_allow_html=True)
    now = datetime.now()
    upcoming = []
    for event in events:
        parsed = parse_event_datetime(event.get("date"))
        if parsed is not None and parsed.replace(tzinfo=None) >= now:
            upcoming.append(event)
    if not upcoming:
        st.info(HELP_TEXT["no_events"])
        return
    for event in upcoming[:5]:
        st.markdown(
            f"- **{event['title']}** · {EVENT_TYPE_LABELS.get(event['type'], event['type'])} · "
            f"{format_event_datetime(event.get('date'))}"
            + (f" · {event['location']}" if event.get("location") else "")
        )


def _render_players(db: Database, user_id: str) -> None:
    st.subheader("Players")
    players = _load("Loading players", db.list_players, user_id, default=[])
    if players:
        frame = pd.DataFrame(players, columns=["name", "position", "jersey_number"]).rename(
            columns={"name": "Name", "position": "Position", "jersey_number": "Jersey #"}
        )
        st.dataframe(frame, use_container_width=True, hide_index=True)
    else:
        st.info(HELP_TEXT["no_players"])

    by_label = {f"{p['name']}" + (f" #{p['jersey_number']}" if p.get("jersey_number") is not None else ""): p for p in players}
    selected = st.selectbox("Add or edit", options=[NEW_ITEM] + list(by_label), key="player_edit_select")
    editing = by_label.get(selected)

    with st.form("player_form", clear_on_submit=editing is None):
        name = st.text_input("Name", value=editing["name"] if editing else "")
        current_position = (editing or {}).get("position") or ""
        position_options = POSITIONS if current_position in POSITIONS else POSITIONS + [current_position]
        position = st.selectbox("Position", options=position_options, index=position_options.index(current_position))
        jersey_raw = st.text_input(
            "Jersey number (optional)",
            value="" if not editing or editing.get("jersey_number") is None else str(editing["jersey_number"]),
        )
        submitted = st.form_submit_button("Update player" if editing else "Add player")

    if submitted and not _show_errors(validate_player_form(name, jersey_raw)):
        jersey_number = parse_optional_int(jersey_raw)
        if editing:
            ok = _write(
                "Updating player",
                db.update_player,
                user_id,
                editing["id"],
                name,
                position=position or None,
                jersey_number=jersey_number,
                success="Player updated.",
            )
        else:
            ok = _write(
                "Adding player",
                db.add_player,
                user_id,
                name,
                position=position or None,
                jersey_number=jersey_number,
                success="Player added.",
            )
        if ok:
            st.rerun()

    if editing:
        st.caption(HELP_TEXT["delete_player"])
        confirm = st.checkbox(f"Confirm deletion of {editing['name']}", key=f"confirm_delete_player_{editing['id']}")
        if st.button("Delete player", disabled=not confirm, key="delete_player_btn"):
            if _write("Deleting player", db.delete_player, user_id, editing["id"], success="Player deleted."):
                st.rerun()


def _render_game_form(db: Database, user_id: str, editing: dict[str, Any] | None) -> None:
    existing_date = parse_event_datetime(editing.get("date")) if editing else None
    with st.form("game_form", clear_on_submit=editing is None):
        title = st.text_input("Title", value=editing["title"] if editing else "")
        c1, c2 = st.columns(2, gap="small")
        game_day = c1.date_input("Date", value=existing_date.date() if existing_date else date.today())
        game_time = c2.text_input("Time (HH:MM)", value=existing_date.strftime("%H:%M") if existing_date else "")
        c3, c4 = st.columns(2, gap="small")
        location = c3.text_input("Location (optional)", value=(editing or {}).get("location") or "")
        opponent = c4.text_input("Opponent (optional)", value=(editing or {}).get("opponent") or "")
        s1, s2 = st.columns(2, gap="small")
        team_score_raw = s1.text_input(
            "Team score", value="" if not editing or editing.get("team_score") is None else str(editing["team_score"])
        )
        opponent_score_raw = s2.text_input(
            "Opponent score",
            value="" if not editing or editing.get("opponent_score") is None else str(editing["opponent_score"]),
        )
        submitted = st.form_submit_button("Update game" if editing else "Add game")

    if not submitted or _show_errors(validate_game_form(title, game_day, team_score_raw, opponent_score_raw)):
        return
    try:
        when = combine_date_time(game_day, game_time)
    except ValidationError as exc:
        _notify_error("Saving game", exc)
        return
    fields = dict(
        title=title,
        event_type=EVENT_TYPE_GAME,
        date=when,
        location=location or None,
        opponent=opponent or None,
        team_score=parse_optional_int(team_score_raw),
        opponent_score=parse_optional_int(opponent_score_raw),
    )
    if editing:
        ok = _write("Updating game", db.update_event, user_id, editing["id"], success="Game updated.", **fields)
    else:
        ok = _write("Adding game", db.add_event, user_id, success="Game added.", **fields)
    if ok:
        st.rerun()


def _render_stat_entry(db: Database, user_id: str, game: dict[str, Any], players: list[dict[str, Any]]) -> None:
    st.markdown(card_title(f"Box score · {game['title']}"), unsafe_allow_html=True)
    if not players:
        st.info(HELP_TEXT["no_players"])
        return
    statistics = _load("Loading statistics", db.list_statistics, user_id, event_id=game["id"], default=None)
    if statistics is None:
        return
    lines = initial_stat_lines(players, statistics, game["id"])
    frame = pd.DataFrame(
        [{"player_id": p["id"], "Player": p["name"], **{f: lines[str(p["id"])][f] for f in STAT_FIELDS}} for p in players]
    ).rename(columns=STAT_LABELS)
    edited = st.data_editor(
        frame,
        key=f"stat_editor_{game['id']}",
        hide_index=True,
        use_container_width=True,
        disabled=["player_id", "Player"],
        column_config={
            "player_id": None,
            **{label: st.column_config.NumberColumn(label, min_value=0, step=1) for label in STAT_LABELS.values()},
        },
    )
    if st.button("Save box score", key=f"save_stats_{game['id']}"):
        reverse = {label: field for field, label in STAT_LABELS.items()}
        try:
            payload = {
                str(row["player_id"]): clean_stat_line({reverse[k]: row[k] for k in reverse})
                for row in edited.to_dict(orient="records")
            }
        except ValidationError as exc:
            _notify_error("Saving statistics", exc)
            return
        if _write(
            "Saving statistics",
            db.save_event_statistics,
            user_id,
            game["id"],
            payload,
            success="Statistics saved.",
        ):
            st.rerun()


def _render_games(db: Database, user_id: str) -> None:
    st.subheader("Games")
    games = _load("Loading games", db.list_events, user_id, event_type=EVENT_TYPE_GAME, descending=True, default=[])
    players = _load("Loading players", db.list_players, user_id, default=[])

    if games:
        for game in games:
            st.markdown(game_line(game), unsafe_allow_html=True)
    else:
        st.info(HELP_TEXT["no_games"])

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    by_label = {_event_label(game): game for game in games}
    selected = st.selectbox("Add or edit a game", options=[NEW_ITEM] + list(by_label), key="game_edit_select")
    editing = by_label.get(selected)
    _render_game_form(db, user_id, editing)

    if editing:
        st.caption(HELP_TEXT["delete_event"])
        confirm = st.checkbox(f"Confirm deletion of {editing['title']}", key=f"confirm_delete_game_{editing['id']}")
        if st.button("Delete game", disabled=not confirm, key="delete_game_btn"):
            if _write("Deleting game", db.delete_event, user_id, editing["id"], success="Game deleted."):
                st.rerun()
        st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
        _render_stat_entry(db, user_id, editing, players)


def _render_event_form(db: Database, user_id: str, editing: dict[str, Any] | None, form_key: str) -> str | None:
    existing_date = parse_event_datetime(editing.get("date")) if editing else None
    with st.form(form_key, clear_on_submit=editing is None):
        title = st.text_input("Title", value=editing["title"] if editing else "")
        type_options = list(EVENT_TYPES)
        event_type = st.selectbox(
            "Type",
            options=type_options,
            index=type_options.index(editing["type"]) if editing else 0,
            format_func=lambda value: EVENT_TYPE_LABELS.get(value, value),
        )
        c1, c2 = st.columns(2, gap="small")
        event_day = c1.date_input("Date", value=existing_date.date() if existing_date else date.today())
        event_time = c2.text_input("Time (HH:MM)", value=existing_date.strftime("%H:%M") if existing_date else "18:00")
        location = st.text_input("Location (optional)", value=(editing or {}).get("location") or "")
        submitted = st.form_submit_button("Update event" if editing else "Create event")

    if not submitted or _show_errors(validate_event_form(title, event_type, event_day)):
        return None
    try:
        when = combine_date_time(event_day, event_time)
    except ValidationError as exc:
        _notify_error("Saving event", exc)
        return None
    try:
        if editing:
            db.update_event(
                user_id,
                editing["id"],
                title,
                event_type,
                when,
                location=location or None,
                opponent=editing.get("opponent"),
                team_score=editing.get("team_score"),
                opponent_score=editing.get("opponent_score"),
            )
            st.toast("Event updated.")
            return str(editing["id"])
        event_id = db.add_event(user_id, title, event_type, when, location=location or None)
        st.toast("Event created.")
        return event_id
    except CourtsideError as exc:
        _notify_error("Saving event", exc)
        return None


def _render_calendar(db: Database, user_id: str) -> None:
    st.subheader("Calendar")
    events = _load("Loading events", db.list_events, user_id, default=[])
    grouped = group_events_by_day(events)

    selected_day = st.date_input("Day", value=date.today(), key="calendar_day")
    day_events = grouped.get(selected_day.isoformat(), [])
    st.markdown(card_title(f"Events on {format_event_date(selected_day.isoformat())}"), unsafe_allow_html=True)
    if not day_events:
        st.caption("Nothing scheduled on this day.")
    for event in day_events:
        parsed = parse_event_datetime(event.get("date"))
        st.markdown(
            f"- {parsed.strftime('%H:%M') if parsed else ''} **{event['title']}** · "
            f"{EVENT_TYPE_LABELS.get(event['type'], event['type'])}"
            + (f" · {event['location']}" if event.get("location") else "")
        )

    with st.expander("All scheduled days", expanded=False):
        if not grouped:
            st.info(HELP_TEXT["no_events"])
        for day_key, items in grouped.items():
            st.markdown(f"**{format_event_date(day_key)}** · " + ", ".join(str(item["title"]) for item in items))

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    by_label = {_event_label(event): event for event in events}
    selected = st.selectbox("Create or edit an event", options=[NEW_ITEM] + list(by_label), key="calendar_edit_select")
    editing = by_label.get(selected)
    if _render_event_form(db, user_id, editing, "calendar_event_form"):
        st.rerun()
    if editing:
        st.caption(HELP_TEXT["delete_event"])
        confirm = st.checkbox(f"Confirm deletion of {editing['title']}", key=f"confirm_delete_event_{editing['id']}")
        if st.button("Delete event", disabled=not confirm, key="delete_event_btn"):
            if _write("Deleting event", db.delete_event, user_id, editing["id"], success="Event deleted."):
                st.rerun()


def _render_attendance(db: Database, user_id: str) -> None:
    st.subheader("Attendance")
    players = _load("Loading players", db.list_players, user_id, default=[])
    events = _load("Loading events", db.list_events, user_id, descending=True, default=[])

    with st.expander("Create a new event", expanded=not events):
        created = _render_event_form(db, user_id, None, "attendance_event_form")
        if created:
            st.session_state["attendance_event_id"] = created
            st.rerun()

    take_tab, history_tab = st.tabs(["Take attendance", "History"])
    with take_tab:
        if not events:
            st.info(HELP_TEXT["no_events"])
        elif not players:
            st.info(HELP_TEXT["no_players"])
        else:
            ids = [str(event["id"]) for event in events]
            labels = {str(event["id"]): _event_label(event) for event in events}
            preferred = st.session_state.get("attendance_event_id")
            event_id = st.selectbox(
                "Event",
                options=ids,
                index=ids.index(preferred) if preferred in ids else 0,
                format_func=lambda value: labels[value],
            )
            records = _load("Loading attendance", db.list_attendance, user_id, event_id=event_id, default=[])
            state = initial_attendance(players, records)
            with st.form(f"attendance_form_{event_id}"):
                marks = {
                    str(player["id"]): st.checkbox(
                        str(player["name"]),
                        value=state[str(player["id"])],
                        key=f"attendance_{event_id}_{player['id']}",
                    )
                    for player in players
                }
                submitted = st.form_submit_button("Save attendance")
            present = sum(1 for value in marks.values() if value)
            st.caption(f"{present} of {len(marks)} players marked present.")
            if submitted and _write(
                "Saving attendance",
                db.save_event_attendance,
                user_id,
                event_id,
                marks,
                success="Attendance saved.",
            ):
                st.session_state["attendance_event_id"] = event_id
                st.rerun()

    with history_tab:
        records = _load("Loading attendance history", db.list_attendance, user_id, default=[])
        history = attendance_history(records, players, events)
        if not history:
            st.info(HELP_TEXT["no_attendance"])
            return
        frame = pd.DataFrame(
            [
                {
                    "Event": item.event_title,
                    "Date": format_event_datetime(item.event_date),
                    "Player": item.player_name,
                    "Status": "Present" if item.present else "Absent",
                }
                for item in history
            ]
        )
        st.dataframe(frame, use_container_width=True, hide_index=True)


def _render_player_statistics(
    players: list[dict[str, Any]],
    games: list[dict[str, Any]],
    statistics: list[dict[str, Any]],
    averages_by_player: dict[str, Any],
) -> None:
    if not players:
        st.info(HELP_TEXT["no_players"])
        return
    ids = [str(player["id"]) for player in players]
    names = {str(player["id"]): str(player["name"]) for player in players}
    player_id = st.selectbox("Player", options=ids, format_func=lambda value: names[value], key="stats_player")
    rows = get_player_series(player_id, statistics, games, players)
    if not rows:
        st.info(HELP_TEXT["no_stats_player"])
        return
    frame = _stats_frame(rows, "event", "Game")
    st.dataframe(_with_totals_row(frame, rows, "Game", "Total"), use_container_width=True, hide_index=True)
    _stat_bar_chart(frame, "Game")

    player = next(p for p in players if str(p["id"]) == player_id)
    c1, c2 = st.columns(2, gap="small")
    c1.download_button(
        label="Download CSV",
        data=_build_export_csv(frame, f"player={names[player_id]}"),
        file_name=f"courtside_{names[player_id].replace(' ', '_').lower()}_stats.csv",
        mime="text/csv",
        use_container_width=True,
    )
    pdf_buffer = BytesIO()
    try:
        generate_player_report_pdf(
            pdf_buffer,
            player,
            averages_by_player.get(player_id),
            rows,
            compute_totals(rows),
        )
    except RuntimeError as exc:
        c2.caption(str(exc))
    else:
        c2.download_button(
            label="Download PDF report",
            data=pdf_buffer.getvalue(),
            file_name=f"courtside_{names[player_id].replace(' ', '_').lower()}_report.pdf",
            mime="application/pdf",
            use_container_width=True,
        )


def _render_game_statistics(
    players: list[dict[str, Any]],
    games: list[dict[str, Any]],
    statistics: list[dict[str, Any]],
) -> None:
    if not games:
        st.info(HELP_TEXT["no_games"])
        return
    ids = [str(game["id"]) for game in games]
    labels = {str(game["id"]): _event_label(game) for game in games}
    event_id = st.selectbox("Game", options=ids, format_func=lambda value: labels[value], key="stats_game")
    rows = get_event_series(event_id, statistics, players, games)
    if not rows:
        st.info(HELP_TEXT["no_stats_game"])
        return
    frame = _stats_frame(rows, "player", "Player")
    st.dataframe(_with_totals_row(frame, rows, "Player", "Team total"), use_container_width=True, hide_index=True)
    _stat_bar_chart(frame, "Player")
    st.download_button(
        label="Download CSV",
        data=_build_export_csv(frame, f"game={labels[event_id]}"),
        file_name="courtside_game_stats.csv",
        mime="text/csv",
    )


def _render_statistics(db: Database, user_id: str) -> None:
    st.subheader("Statistics")
    players = _load("Loading players", db.list_players, user_id, default=[])
    games = _load("Loading games", db.list_events, user_id, event_type=EVENT_TYPE_GAME, descending=True, default=[])
    statistics = _load("Loading statistics", db.list_statistics, user_id, default=[])
    averages_by_player = {avg.player_id: avg for avg in compute_player_averages(players, statistics)}

    by_player, by_game = st.tabs(["By player", "By game"])
    with by_player:
        _render_player_statistics(players, games, statistics, averages_by_player)
    with by_game:
        _render_game_statistics(players, games, statistics)


def _render_averages(db: Database, user_id: str) -> None:
    st.subheader("Averages")
    players = _load("Loading players", db.list_players, user_id, default=[])
    games = _load("Loading games", db.list_events, user_id, event_type=EVENT_TYPE_GAME, default=[])
    statistics = _load("Loading statistics", db.list_statistics, user_id, default=[])

    team = compute_team_averages(players, statistics, games)
    st.markdown('<div class="cs-card-title">Team per-game averages</div>', unsafe_allow_html=True)
    st.markdown(f'<div class="cs-card-subtitle">{HELP_TEXT["team_denominator"]}</div>', unsafe_allow_html=True)
    cols = st.columns(len(STAT_FIELDS) + 1, gap="small")
    for col, field in zip(cols, STAT_FIELDS):
        col.metric(STAT_LABELS[field], fmt_average(getattr(team, field)))
    cols[-1].metric("Games", len(games))
    if not games:
        st.caption(HELP_TEXT["no_games"])

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    averages = compute_player_averages(players, statistics)
    st.markdown('<div class="cs-card-title">Player averages</div>', unsafe_allow_html=True)
    if not averages:
        st.info(HELP_TEXT["no_averages"])
        return
    frame = pd.DataFrame(
        [
            {
                "Player": avg.name,
                **{STAT_LABELS[field]: getattr(avg, field) for field in STAT_FIELDS},
                "Games": avg.games_played,
            }
            for avg in averages
        ]
    )
    st.dataframe(
        frame,
        use_container_width=True,
        hide_index=True,
        column_config={label: st.column_config.NumberColumn(label, format="%.1f") for label in STAT_LABELS.values()},
    )
    _stat_bar_chart(frame, "Player")

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    st.markdown('<div class="cs-card-title">Player progression</div>', unsafe_allow_html=True)
    ids = [avg.player_id for avg in averages]
    names = {avg.player_id: avg.name for avg in averages}
    player_id = st.selectbox("Player", options=ids, format_func=lambda value: names[value], key="averages_player")
    ordered_games = sorted(games, key=lambda g: str(parse_event_datetime(g.get("date")) or g.get("date") or ""))
    order = {str(game["id"]): idx for idx, game in enumerate(ordered_games)}
    player_rows = sorted(
        (row for row in statistics if row.get("player_id") == player_id),
        key=lambda row: order.get(str(row.get("event_id")), len(order)),
    )
    series = get_player_series(player_id, player_rows, games, players)
    trend = _stats_frame(series, "event", "Game")
    long_df = trend.melt(id_vars=["Game"], value_vars=list(STAT_LABELS.values()), var_name="Stat", value_name="Value")
    chart = (
        alt.Chart(long_df)
        .mark_line(point=True, strokeWidth=3)
        .encode(
            x=alt.X("Game:N", sort=None, title=None),
            y=alt.Y("Value:Q", title=None),
            color=alt.Color(
                "Stat:N",
                scale=alt.Scale(domain=list(STAT_LABELS.values()), range=STAT_COLORS),
            ),
            tooltip=[alt.Tooltip("Game:N"), alt.Tooltip("Stat:N"), alt.Tooltip("Value:Q")],
        )
        .properties(height=300)
    )
    st.altair_chart(chart, use_container_width=True)


def _render_settings(db: Database, auth: SessionProvider, session: Session) -> None:
    st.subheader("Settings")
    profile = _load("Loading profile", db.get_profile, session.user_id, default=None) or {}

    st.markdown('<div class="cs-card-title">Profile</div>', unsafe_allow_html=True)
    with st.form("profile_form"):
        st.text_input("Email", value=session.email, disabled=True)
        username = st.text_input("Username", value=profile.get("username") or "")
        avatar_url = st.text_input("Avatar URL (optional)", value=profile.get("avatar_url") or "")
        submitted = st.form_submit_button("Save profile")
    if profile.get("avatar_url"):
        st.image(str(profile["avatar_url"]), width=96)
    if submitted:
        if len(username.strip()) < MIN_USERNAME_LENGTH:
            st.error(f"Username must be at least {MIN_USERNAME_LENGTH} characters.")
        elif _write(
            "Updating profile",
            db.update_profile,
            session.user_id,
            username=username.strip(),
            avatar_url=avatar_url.strip() or None,
            success="Profile updated.",
        ):
            auth.refresh_username()
            st.rerun()

    st.markdown(SECTION_GAP_MD, unsafe_allow_html=True)
    st.markdown('<div class="cs-card-title">Password</div>', unsafe_allow_html=True)
    with st.form("password_form", clear_on_submit=True):
        current = st.text_input("Current password", type="password")
        new = st.text_input("New password", type="password")
        confirm = st.text_input("Confirm new password", type="password")
        changed = st.form_submit_button("Change password")
    if changed:
        try:
            auth.change_password(current, new, confirm)
        except CourtsideError as exc:
            _notify_error("Changing password", exc)
        else:
            st.success("Password updated.")


def _render_selected_section(section: str, db: Database, auth: SessionProvider, session: Session) -> None:
    user_id = session.user_id
    if section == "Dashboard":
        _render_dashboard(db, user_id)
    elif section == "Players":
        _render_players(db, user_id)
    elif section == "Games":
        _render_games(db, user_id)
    elif section == "Calendar":
        _render_calendar(db, user_id)
    elif section == "Attendance":
        _render_attendance(db, user_id)
    elif section == "Statistics":
        _render_statistics(db, user_id)
    elif section == "Averages":
        _render_averages(db, user_id)
    elif section == "Settings":
        _render_settings(db, auth, session)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    st.set_page_config(page_title=APP_TITLE, page_icon="🏀", layout="wide")
    _inject_styles()

    db = _get_database(str(settings.db_path))
    auth = SessionProvider(db, st.session_state)
    session = auth.current_session()
    if session is None:
        _render_auth(auth, settings)
        return

    section = _render_sidebar(auth, session)
    _render_top_header(session, section)
    _render_selected_section(section, db, auth, session)
    st.markdown(f'<div class="cs-disclaimer">{APP_DISCLAIMER}</div>', unsafe_allow_html=True)


if __name__ == "__main__":
    main()
