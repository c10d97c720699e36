"""
Query/form parameter builder.

Option structures declare their parameters as an ordered tuple of `Param`
entries; `build` walks that tuple and emits `(key, value)` string pairs,
leaving out anything unset. `None` always means "unset":

- STRING:   included iff non-empty, verbatim
- FLAG:     included iff True, as "true" (opt-in filters; False is never sent)
- INTEGER:  included iff not None, so 0 can be requested explicitly
- COUNT:    included iff > 0 (limit/offset style, 0 means "server default")
- DATE:     MM/DD/YYYY
- DATETIME: MM/DD/YYYY HH:MM:SS in the value's own zone
- NESTED:   another FilterSet whose pairs are spliced in at this position
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, ClassVar, List, Optional, Sequence, Tuple

from .utils import format_date, format_datetime

Pairs = List[Tuple[str, str]]


class Kind(Enum):
    STRING = "string"
    FLAG = "flag"
    INTEGER = "integer"
    COUNT = "count"
    DATE = "date"
    DATETIME = "datetime"
    NESTED = "nested"


@dataclass(frozen=True)
class Param:
    key: str
    attr: str
    kind: Kind = Kind.STRING


def _check_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key}: expected int, got {type(value).__name__}")
    return value


def encode_value(key: str, value: Any, kind: Kind) -> Optional[str]:
    """String form of one value, or None when the value counts as unset."""
    if value is None:
        return None
    if kind is Kind.STRING:
        s = str(value)
        return s or None
    if kind is Kind.FLAG:
        return "true" if value is True else None
    if kind is Kind.INTEGER:
        return str(_check_int(key, value))
    if kind is Kind.COUNT:
        n = _check_int(key, value)
        return str(n) if n > 0 else None
    if kind is Kind.DATE:
        if not isinstance(value, date):
            raise TypeError(f"{key}: expected date, got {type(value).__name__}")
        return format_date(value)
    if kind is Kind.DATETIME:
        if not isinstance(value, datetime):
            raise TypeError(f"{key}: expected datetime, got {type(value).__name__}")
        return format_datetime(value)
    raise ValueError(f"{key}: kind {kind} has no scalar encoding")


def build(source: Any, params: Sequence[Param]) -> Pairs:
    """Emit pairs for `source` in the declared order of `params`."""
    pairs: Pairs = []
    for p in params:
        value = getattr(source, p.attr)
        if p.kind is Kind.NESTED:
            if value is not None:
                pairs.extend(value.to_params())
            continue
        encoded = encode_value(p.key, value, p.kind)
        if encoded is not None:
            pairs.append((p.key, encoded))
    return pairs


class FilterSet:
    """Mixin for option dataclasses: subclasses list their `PARAMS` in wire order."""

    PARAMS: ClassVar[Tuple[Param, ...]] = ()

    def to_params(self) -> Pairs:
        return build(self, self.PARAMS)


def build_params(opts: Optional[FilterSet]) -> Pairs:
    return [] if opts is None else opts.to_params()


def build_form(opts: Optional[FilterSet]) -> Optional[Pairs]:
    """Like `build_params`, but no options means no body at all (not an empty one)."""
    return None if opts is None else opts.to_params()
