"""Utility functions for the finance calculator.

This module provides helpers for turning loosely typed input (JSON records,
command-line strings) into the numbers, dates and records used by the
engines. Anything that cannot be parsed raises an ``InvalidRecordError``;
unknown category or range tags raise their dedicated errors.
"""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation, getcontext
from enum import Enum
from numbers import Number
from typing import Any, Iterable, List, Mapping

from .data_models import AllocationConcept, AssetPosition, Category, SeriesPoint
from .errors import InvalidRecordError

getcontext().prec = 28  # increase decimal precision to avoid rounding errors


def decimal_from_number(value: Any, field: str = "value") -> Decimal:
    """Convert an int, float or ``Decimal`` into a ``Decimal``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``.
    Booleans and strings are rejected: parse strings with
    :func:`parse_amount` first.
    """
    if isinstance(value, bool) or not isinstance(value, Number):
        raise InvalidRecordError(f"{field} must be numeric; got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        result = Decimal(str(value))
    if not result.is_finite():
        raise InvalidRecordError(f"{field} must be finite; got {value!r}")
    return result


def require_number(value: Any, field: str = "value") -> float:
    """Return ``value`` as a float, failing fast on non-numeric input."""
    return float(decimal_from_number(value, field))


def parse_amount(value: str) -> float:
    """Parse an amount typed by a user.

    Whitespace is ignored and a comma is accepted as the decimal separator
    (``"1 250,5"`` -> ``1250.5``). Shorthand ``k``/``m`` suffixes are
    expanded (``"2k"`` -> ``2000``).
    """
    cleaned = str(value).strip().lower().replace(" ", "").replace(",", ".")
    factor = Decimal(1)
    if cleaned.endswith("k"):
        factor = Decimal(1_000)
        cleaned = cleaned[:-1]
    elif cleaned.endswith("m"):
        factor = Decimal(1_000_000)
        cleaned = cleaned[:-1]
    try:
        number = Decimal(cleaned)
    except InvalidOperation as exc:
        raise InvalidRecordError(f"Invalid amount: {value}") from exc
    if not number.is_finite():
        raise InvalidRecordError(f"Invalid amount: {value}")
    return float(number * factor)


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 date or timestamp into an aware ``datetime``.

    Naive values are assumed to be UTC; a trailing ``Z`` is accepted.
    """
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidRecordError(f"Invalid date: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _field(record: Mapping[str, Any], name: str) -> Any:
    if name not in record:
        raise InvalidRecordError(f"Record is missing field {name!r}: {dict(record)}")
    return record[name]


def _int_field(record: Mapping[str, Any], name: str) -> int:
    value = _field(record, name)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidRecordError(f"{name} must be an integer; got {value!r}") from exc


def concept_from_dict(record: Mapping[str, Any]) -> AllocationConcept:
    return AllocationConcept(
        id=_int_field(record, "id"),
        category=Category.parse(_field(record, "category")),
        name=str(record.get("name", "")),
        amount=require_number(_field(record, "amount"), "amount"),
        order=int(record.get("order", 0) or 0),
    )


def concepts_from_dicts(records: Iterable[Mapping[str, Any]]) -> List[AllocationConcept]:
    return [concept_from_dict(r) for r in records]


def series_from_dicts(records: Iterable[Mapping[str, Any]]) -> List[SeriesPoint]:
    points: List[SeriesPoint] = []
    for record in records:
        points.append(
            SeriesPoint(
                date=parse_datetime(_field(record, "date")),
                value=require_number(_field(record, "value"), "value"),
                currency=record.get("currency"),
            )
        )
    return points


def positions_from_dicts(records: Iterable[Mapping[str, Any]]) -> List[AssetPosition]:
    positions: List[AssetPosition] = []
    for record in records:
        invested = require_number(_field(record, "invested"), "invested")
        current = record.get("currentValue", record.get("current_value"))
        positions.append(
            AssetPosition(
                id=_int_field(record, "id"),
                name=str(record.get("name", "")),
                invested=invested,
                # Assets without a valuation are worth what was put in.
                current_value=invested if current is None else require_number(current, "current_value"),
            )
        )
    return positions


def to_jsonable(value: Any) -> Any:
    """Convert result records into JSON-serializable structures."""
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    return value
