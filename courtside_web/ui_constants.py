from __future__ import annotations

from courtside_core.brand import APP_NAME, DISCLAIMER, TAGLINE

APP_TITLE = APP_NAME
APP_SUBTITLE = TAGLINE
APP_DISCLAIMER = DISCLAIMER

SECTION_GAP_MD = '<div style="margin-top:0.45rem;"></div>'

NAV_SCREENS = [
    "Dashboard",
    "Players",
    "Games",
    "Calendar",
    "Attendance",
    "Statistics",
    "Averages",
    "Settings",
]
NAV_ICONS = {
    "Dashboard": "📊",
    "Players": "👥",
    "Games": "🏀",
    "Calendar": "📅",
    "Attendance": "✅",
    "Statistics": "📋",
    "Averages": "📈",
    "Settings": "⚙️",
}

STAT_LABELS = {
    "points": "Points",
    "rebounds": "Rebounds",
    "assists": "Assists",
    "steals": "Steals",
    "blocks": "Blocks",
}
STAT_COLORS = ["#4CAF50", "#FF7D00", "#2196F3", "#9C27B0", "#F44336"]

EVENT_TYPE_LABELS = {"training": "Training", "game": "Game"}
RESULT_LABELS = {"win": "Win", "loss": "Loss", "draw": "Draw"}
POSITIONS = ["", "Point Guard", "Shooting Guard", "Small Forward", "Power Forward", "Center"]

HELP_TEXT = {
    "no_players": "No players yet. Add players in the Players section.",
    "no_games": "No games yet. Add games in the Games section.",
    "no_events": "No events scheduled. Create one from the Calendar or Attendance section.",
    "no_stats_player": "No statistics recorded for this player.",
    "no_stats_game": "No statistics recorded for this game.",
    "no_averages": "No player has a recorded game yet.",
    "no_attendance": "No attendance history. Start recording attendance for an event.",
    "team_denominator": "Team averages divide season totals by the number of games, recorded or not.",
    "delete_player": "Deleting a player also deletes their statistics and attendance records.",
    "delete_event": "Deleting an event also deletes its statistics and attendance records.",
}
