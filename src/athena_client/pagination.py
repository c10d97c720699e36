"""
Pagination metadata for list endpoints.

The API reports paging as sibling fields of the list itself:

    {"appointments": [...], "next": "/v1/1/appointments/booked?offset=30",
     "previous": "/v1/1/appointments/booked?offset=10", "totalcount": 2}

`fold` turns those raw fields into a `PageCursor` of plain offsets.
"""
from __future__ import annotations
from dataclasses import dataclass
import re
from typing import Any, NamedTuple, Optional

OFFSET_RE = re.compile(r"(?<![A-Za-z0-9_])offset=([^&#;\s]*)")
DIGITS_RE = re.compile(r"[0-9]+")

PAGINATION_KEYS = ("next", "previous", "totalcount")


class RawPagination(NamedTuple):
    next: Any = None
    previous: Any = None
    totalcount: Any = None

    def is_empty(self) -> bool:
        return all(v is None or v == "" for v in self)


@dataclass(frozen=True)
class PageCursor:
    # None means "no such page", never offset 0
    next_offset: Optional[int] = None
    previous_offset: Optional[int] = None
    total_count: Optional[int] = None

    @property
    def has_next(self) -> bool:
        return self.next_offset is not None


def raw_pagination(payload: Any) -> RawPagination:
    """Pull the pagination siblings out of a decoded payload (any shape)."""
    if not isinstance(payload, dict):
        return RawPagination()
    return RawPagination(*(payload.get(k) for k in PAGINATION_KEYS))


def extract_offset(raw: Any) -> Optional[int]:
    """`offset=<digits>` from a URL/query fragment; None if missing or not numeric."""
    if not isinstance(raw, str) or not raw:
        return None
    m = OFFSET_RE.search(raw)
    if m is None or not DIGITS_RE.fullmatch(m.group(1)):
        return None
    return int(m.group(1))


def _total(raw: Any) -> Optional[int]:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and DIGITS_RE.fullmatch(raw.strip()):
        return int(raw.strip())
    return None


def fold(raw_next: Any, raw_previous: Any, raw_totalcount: Any) -> Optional[PageCursor]:
    """
    Normalize raw pagination fields into a PageCursor.
    Returns None when the response carried no pagination at all; each field
    that cannot be parsed degrades to None on its own.
    """
    if RawPagination(raw_next, raw_previous, raw_totalcount).is_empty():
        return None
    return PageCursor(
        next_offset=extract_offset(raw_next),
        previous_offset=extract_offset(raw_previous),
        total_count=_total(raw_totalcount),
    )


def fold_raw(raw: RawPagination) -> Optional[PageCursor]:
    return fold(raw.next, raw.previous, raw.totalcount)
