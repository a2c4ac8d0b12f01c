import json
from html import escape
from typing import List

from backend.app import schemas


def _rows(cells: List[List[str]], colspan: int, empty: str) -> str:
    if not cells:
        return f'<tr><td colspan="{colspan}" class="muted">{escape(empty)}</td></tr>'
    return "\n".join(
        "<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>"
        for row in cells
    )


def fmt_metadata(value) -> str:
    if value is None:
        return ""
    return json.dumps(value, sort_keys=True, default=str)


def render_dashboard(data: schemas.DashboardData) -> str:
    summary = data.summary

    top_rows = _rows(
        [[escape(item.event_type), str(item.event_count)] for item in data.top],
        2,
        "No events yet",
    )
    daily_rows = _rows(
        [[escape(item.day), escape(item.source), str(item.count)] for item in data.daily],
        3,
        "No events yet",
    )
    recent_rows = _rows(
        [
            [
                escape(e.occurred_at.isoformat()),
                escape(e.source),
                escape(e.event_type),
                f"<code>{escape(fmt_metadata(e.metadata))}</code>",
            ]
            for e in data.recent
        ],
        4,
        "No events yet",
    )

    top_event = escape(summary.top_event) if summary.top_event else "&mdash;"

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Event Log Dashboard</title>
  <style>
    body {{ font-family: system-ui, sans-serif; margin: 2rem; background: #0f1420; color: #eaf0ff; }}
    h1 {{ font-size: 1.4rem; margin-bottom: 1rem; }}
    h2 {{ font-size: 1.1rem; margin-top: 2rem; }}
    .cards {{ display: flex; gap: 1rem; flex-wrap: wrap; }}
    .card {{ background: #182033; border-radius: 10px; padding: 1rem 1.25rem; min-width: 10rem; }}
    .card .label {{ color: rgba(234,240,255,.65); font-size: .85rem; }}
    .card .value {{ font-size: 1.6rem; margin-top: .25rem; }}
    table {{ border-collapse: collapse; width: 100%; margin-top: .5rem; }}
    th, td {{ text-align: left; padding: .4rem .6rem; border-bottom: 1px solid rgba(255,255,255,.06); }}
    th {{ color: rgba(234,240,255,.65); font-weight: 500; }}
    .muted {{ color: rgba(234,240,255,.45); }}
    code {{ font-size: .8rem; }}
  </style>
</head>
<body>
  <h1>Event Log Dashboard</h1>

  <div class="cards">
    <div class="card"><div class="label">Total events</div><div class="value" id="total-events">{summary.total_events}</div></div>
    <div class="card"><div class="label">Events today</div><div class="value" id="events-today">{summary.events_today}</div></div>
    <div class="card"><div class="label">Active sources</div><div class="value" id="active-sources">{summary.active_sources}</div></div>
    <div class="card"><div class="label">Top event</div><div class="value" id="top-event">{top_event}</div></div>
  </div>

  <h2>Top event types</h2>
  <table id="top-event-types">
    <thead><tr><th>Event type</th><th>Count</th></tr></thead>
    <tbody>
{top_rows}
    </tbody>
  </table>

  <h2>Daily events by source</h2>
  <table id="daily-stats">
    <thead><tr><th>Day</th><th>Source</th><th>Count</th></tr></thead>
    <tbody>
{daily_rows}
    </tbody>
  </table>

  <h2>Recent events</h2>
  <table id="recent-events">
    <thead><tr><th>Occurred at</th><th>Source</th><th>Event type</th><th>Metadata</th></tr></thead>
    <tbody>
{recent_rows}
    </tbody>
  </table>
</body>
</html>
"""


def render_error(message: str) -> str:
    return f"""<!doctype html>
<html lang="en">
<head><meta charset="utf-8" /><title>Event Log Dashboard</title></head>
<body>
  <h1>Event Log Dashboard</h1>
  <p class="error">{escape(message)}</p>
</body>
</html>
"""
