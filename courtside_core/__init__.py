from .aggregates import (
    compute_player_averages,
    compute_team_averages,
    compute_totals,
    get_event_series,
    get_player_series,
)
from .attendance import attendance_history, attendance_rate, initial_attendance
from .calendar import combine_date_time, events_on, group_events_by_day
from .dashboard import build_dashboard_summary
from .errors import (
    AuthError,
    CourtsideError,
    StoreError,
    StoreReadError,
    StoreWriteError,
    ValidationError,
)
from .formatting import date_key, format_event_date, format_event_datetime, round_half_up
from .models import (
    STAT_FIELDS,
    AttendanceView,
    DashboardSummary,
    PlayerAverage,
    SeriesRow,
    StatTotals,
    TeamAverage,
)
from .results import derive_game_result, event_result
from .stat_entry import coerce_count, initial_stat_lines

__all__ = [
    "STAT_FIELDS",
    "TeamAverage",
    "PlayerAverage",
    "SeriesRow",
    "StatTotals",
    "AttendanceView",
    "DashboardSummary",
    "compute_team_averages",
    "compute_player_averages",
    "get_player_series",
    "get_event_series",
    "compute_totals",
    "derive_game_result",
    "event_result",
    "round_half_up",
    "format_event_date",
    "format_event_datetime",
    "date_key",
    "group_events_by_day",
    "events_on",
    "combine_date_time",
    "initial_attendance",
    "attendance_history",
    "attendance_rate",
    "initial_stat_lines",
    "coerce_count",
    "build_dashboard_summary",
    "CourtsideError",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "ValidationError",
    "AuthError",
]
