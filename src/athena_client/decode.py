"""
Shape-directed decoding of API payloads into frozen pydantic records.

Three response shapes cover every endpoint:
- BareArray:    `[ {...}, ... ]`  (optionally reduced to its first element)
- SingleObject: `{ ... }`
- Envelope:     `{ "<key>": [ {...}, ... ], "next": ..., "previous": ..., "totalcount": ... }`

Only the shape is enforced. Unknown keys are ignored, missing keys (and
JSON nulls) fall back to the field default.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Generic, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from .errors import ApiDecodeError, EmptyResultError
from .pagination import PageCursor, fold_raw, raw_pagination
from .utils import snippet

T = TypeVar("T", bound=BaseModel)


def parse_record(model: Type[T], data: Any) -> T:
    """Validate one JSON object into `model`; any validation failure is an ApiDecodeError."""
    try:
        return model.model_validate(data)
    except (ValidationError, OverflowError) as e:
        raise ApiDecodeError(f"{model.__name__}: payload does not validate", snippet(data), cause=e) from e


@dataclass(frozen=True)
class BareArray:
    model: type
    single: bool = False


@dataclass(frozen=True)
class SingleObject:
    model: type


@dataclass(frozen=True)
class Envelope:
    model: type
    key: str


Shape = Union[BareArray, SingleObject, Envelope]


@dataclass(frozen=True)
class Page(Generic[T]):
    items: Tuple[T, ...] = ()
    # None: this response type carries no pagination block
    pagination: Optional[PageCursor] = None

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


def _describe(payload: Any) -> str:
    if payload is None:
        return "empty body"
    if isinstance(payload, list):
        return "array"
    if isinstance(payload, dict):
        return "object"
    return type(payload).__name__


def decode(payload: Any, shape: Shape) -> Any:
    """
    Decode `payload` according to `shape`:
      BareArray(single=False) -> tuple of records
      BareArray(single=True)  -> first record; EmptyResultError on `[]`
      SingleObject            -> one record
      Envelope                -> Page(items, pagination)
    """
    if isinstance(shape, BareArray):
        if not isinstance(payload, list):
            raise ApiDecodeError(f"expected array, got {_describe(payload)}", snippet(payload))
        if shape.single:
            if not payload:
                raise EmptyResultError(f"Unexpected length returned: empty {shape.model.__name__} array")
            # More than one element is tolerated; the first wins
            return parse_record(shape.model, payload[0])
        return tuple(parse_record(shape.model, item) for item in payload)

    if isinstance(shape, SingleObject):
        if not isinstance(payload, dict):
            raise ApiDecodeError(f"expected object, got {_describe(payload)}", snippet(payload))
        return parse_record(shape.model, payload)

    if isinstance(shape, Envelope):
        if not isinstance(payload, dict):
            raise ApiDecodeError(f"expected object with {shape.key!r}, got {_describe(payload)}", snippet(payload))
        raw_items = payload.get(shape.key)
        if raw_items is None:
            raw_items = []
        if not isinstance(raw_items, list):
            raise ApiDecodeError(f"expected {shape.key!r} to be an array, got {_describe(raw_items)}", snippet(payload))
        items = tuple(parse_record(shape.model, item) for item in raw_items)
        return Page(items=items, pagination=fold_raw(raw_pagination(payload)))

    raise TypeError(f"unknown shape {shape!r}")
