from __future__ import annotations
from datetime import date, datetime
import json
from typing import Any

RETRY_STATUSES = {500, 502, 503, 504}
SNIPPET_LEN = 200

def format_date(d: date) -> str:
    """MM/DD/YYYY, the only date format the API accepts in queries and forms."""
    return f"{d.month:02d}/{d.day:02d}/{d.year:04d}"

def format_datetime(dt: datetime) -> str:
    """
    MM/DD/YYYY HH:MM:SS (24h).
    Formatted in whatever zone `dt` carries; never converted to server time.
    """
    return f"{format_date(dt)} {dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"

def snippet(payload: Any, size: int = SNIPPET_LEN) -> str:
    """Short printable rendering of a payload for error messages."""
    if isinstance(payload, (bytes, bytearray)):
        text = payload.decode("utf-8", errors="replace")
    elif isinstance(payload, str):
        text = payload
    else:
        try:
            text = json.dumps(payload, default=str)
        except (TypeError, ValueError):
            text = repr(payload)
    return text[:size]
