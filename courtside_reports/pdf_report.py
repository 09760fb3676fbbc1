from __future__ import annotations

from pathlib import Path
from typing import IO, Any

from courtside_core.brand import APP_NAME, TAGLINE
from courtside_core.models import STAT_FIELDS, PlayerAverage, SeriesRow, StatTotals


def _fmt(value: float | None) -> str:
    if value is None:
        return "—"
    return f"{value:.1f}"


def _player_line(player: dict[str, Any]) -> str:
    parts = [str(player.get("name") or "-")]
    if player.get("position"):
        parts.append(str(player["position"]))
    if player.get("jersey_number") is not None:
        parts.append(f"#{player['jersey_number']}")
    return " | ".join(parts)


def generate_player_report_pdf(
    target: str | Path | IO[bytes],
    player: dict[str, Any],
    averages: PlayerAverage | None,
    rows: list[SeriesRow],
    totals: StatTotals | None,
) -> None:
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import letter
        from reportlab.pdfgen import canvas
    except Exception as exc:  # pragma: no cover
        raise RuntimeError(
            "ReportLab is required for PDF export. Install with: pip install reportlab"
        ) from exc

    output = str(target) if isinstance(target, (str, Path)) else target
    c = canvas.Canvas(output, pagesize=letter)
    width, height = letter

    left = 42
    y = height - 40

    def line(text: str, size: int = 10, bold: bool = False, color=colors.black, gap: int = 14) -> None:
        nonlocal y
        if y < 50:
            c.showPage()
            y = height - 40
        c.setFillColor(color)
        c.setFont("Helvetica-Bold" if bold else "Helvetica", size)
        c.drawString(left, y, text)
        y -= gap

    line(APP_NAME, size=18, bold=True)
    line(TAGLINE, size=10, color=colors.HexColor("#6B7785"), gap=16)
    line(f"Player: {_player_line(player)}", size=10, gap=18)

    line("Per-game Averages", size=12, bold=True)
    if averages is None:
        line("No games recorded for this player.", size=9, gap=18)
    else:
        line(
            "PTS {0}   REB {1}   AST {2}   STL {3}   BLK {4}   Games {5}".format(
                _fmt(averages.points),
                _fmt(averages.rebounds),
                _fmt(averages.assists),
                _fmt(averages.steals),
                _fmt(averages.blocks),
                averages.games_played,
            ),
            size=9,
            gap=18,
        )

    line("Game Log", size=12, bold=True)
    header = f"{'Game':<28} {'Date':<14} {'PTS':>4} {'REB':>4} {'AST':>4} {'STL':>4} {'BLK':>4}"
    line(header, size=8, bold=True, gap=12)
    if not rows:
        line("No statistics recorded.", size=9)
    for row in rows:
        title = row.event if len(row.event) <= 27 else row.event[:26] + "…"
        counts = " ".join(f"{getattr(row, field):>4}" for field in STAT_FIELDS)
        line(f"{title:<28} {row.date or '—':<14} {counts}", size=8, gap=11)
    if totals is not None:
        counts = " ".join(f"{getattr(totals, field):>4}" for field in STAT_FIELDS)
        line(f"{'Total':<28} {'':<14} {counts}", size=8, bold=True, gap=12)

    c.showPage()
    c.save()
