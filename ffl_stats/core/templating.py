"""Jinja2Templates condiviso dalle pagine HTML, con i filtri di formattazione."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from ffl_stats.analytics.formatting import (
    format_date,
    format_minutes_seconds,
    format_value,
    percent,
    status_label,
    type_label,
)

templates_dir = Path(__file__).resolve().parent.parent / "templates"
templates = Jinja2Templates(directory=str(templates_dir))

templates.env.filters["metric"] = format_value
templates.env.filters["date"] = format_date
templates.env.filters["mmss"] = format_minutes_seconds
templates.env.filters["pct"] = percent
templates.env.filters["type_label"] = type_label
templates.env.filters["status_label"] = status_label
