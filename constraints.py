from __future__ import annotations

import dataclasses as dc
import logging
import math
from datetime import datetime, timezone
from typing import Optional, Tuple, Any, FrozenSet

from schema_nodes import SchemaNode

logger = logging.getLogger(__name__)

STRING_FORMATS = ("email", "url", "uuid", "datetime")

@dc.dataclass(frozen=True)
class StringConstraints:
    min: Optional[int] = None
    max: Optional[int] = None
    pattern: Optional[Any] = None
    formats: FrozenSet[str] = frozenset()

@dc.dataclass(frozen=True)
class NumberConstraints:
    min: Optional[float] = None
    max: Optional[float] = None
    min_inclusive: bool = True
    max_inclusive: bool = True
    integer: bool = False

    def integer_bounds(self) -> Tuple[Optional[int], Optional[int]]:
        """
        Closed integer interval equivalent to the declared bounds.
        Exclusive bounds are shifted inwards by one.
        """
        low = high = None

        if self.min is not None:
            low = math.ceil(self.min)
            if not self.min_inclusive and low == self.min:
                low += 1

        if self.max is not None:
            high = math.floor(self.max)
            if not self.max_inclusive and high == self.max:
                high -= 1

        return low, high

@dc.dataclass(frozen=True)
class SizeConstraints:
    min: Optional[int] = None
    max: Optional[int] = None

    def resolve(self, default_min: int, default_max: int) -> Tuple[int, int]:
        low = self.min if self.min is not None else default_min
        high = self.max if self.max is not None else default_max
        # When the declared minimum exceeds the declared maximum the max wins
        if self.max is None and low > high:
            high = low
        if low > high:
            low = high
        return low, high

@dc.dataclass(frozen=True)
class DateConstraints:
    min: Optional[datetime] = None
    max: Optional[datetime] = None

def string_constraints(node: SchemaNode) -> StringConstraints:

    low = high = None
    pattern = None
    formats = set()

    for c in node.checks:
        if c.kind == "min":
            low = c.value
        elif c.kind == "max":
            high = c.value
        elif c.kind == "length":
            low = high = c.value
        elif c.kind == "regex":
            pattern = c.value
        elif c.kind in STRING_FORMATS:
            formats.add(c.kind)

    return StringConstraints(
        min=low,
        max=high,
        pattern=pattern,
        formats=frozenset(formats),
    )

def number_constraints(node: SchemaNode) -> NumberConstraints:

    fields = {}
    for c in node.checks:
        if c.kind == "min":
            fields["min"] = c.value
            fields["min_inclusive"] = c.inclusive
        elif c.kind == "max":
            fields["max"] = c.value
            fields["max_inclusive"] = c.inclusive
        elif c.kind == "int":
            fields["integer"] = True

    return NumberConstraints(**fields)

def size_constraints(node: SchemaNode) -> SizeConstraints:

    low = high = None
    for c in node.checks:
        if c.kind == "min":
            low = c.value
        elif c.kind == "max":
            high = c.value
        elif c.kind == "length":
            low = high = c.value

    return SizeConstraints(min=low, max=high)

def _as_datetime(kind: str, value: Any) -> Optional[datetime]:

    if isinstance(value, datetime):
        return value

    if isinstance(value, (int, float)) \
        and not isinstance(value, bool) \
            and not math.isnan(value):
        # numeric bounds are epoch milliseconds
        return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)

    logger.warning("Invalid %s date value: %r", kind, value)
    return None

def date_constraints(node: SchemaNode) -> DateConstraints:

    low = high = None
    for c in node.checks:
        if c.kind == "min":
            low = _as_datetime("min", c.value)
        elif c.kind == "max":
            high = _as_datetime("max", c.value)

    # naive bounds are read as UTC when the other bound carries a zone
    if low is not None and high is not None \
            and _is_aware(low) != _is_aware(high):
        low, high = _as_utc(low), _as_utc(high)

    return DateConstraints(min=low, max=high)

def _is_aware(value: datetime) -> bool:
    return value.utcoffset() is not None

def _as_utc(value: datetime) -> datetime:
    if _is_aware(value):
        return value
    return value.replace(tzinfo=timezone.utc)
