from __future__ import annotations

from pathlib import Path
from typing import Union, Any, Sequence
from datetime import date, datetime, time
from enum import Enum
import hashlib
import json
import math
import re

from type import ABSENT, ResolvedPromise

_SEPARATORS = re.compile(r"[_\-\s]")

def safe_mkdir(
        path: Union[str, Path]
) -> Path:

    if isinstance(path, str):
        path = Path(path)

    path.mkdir(
        parents=True,
        exist_ok=True
    )

    return path

def stable_hash(*parts: Any) -> str:

    payload = json.dumps(
        parts,
        separators=(",", ":"),
        sort_keys=True,
        default=str
    )

    return hashlib.sha256(
        payload.encode("utf-8")
        ).hexdigest()[:16]

def normalize_key(name: str) -> str:
    """
    `first_name`, `First-Name` and `firstName` all normalize to `firstname`.
    """
    return _SEPARATORS.sub("", name.lower())

def seed_to_int(seed: Union[int, Sequence[int]]) -> int:

    if isinstance(seed, bool):
        raise TypeError("seed must be an int or a sequence of ints")

    if isinstance(seed, int):
        return seed

    # Fold sequences into a single 64-bit seed, stable across processes
    h = hashlib.sha256(
        ":".join(str(int(part)) for part in seed).encode("utf-8")
    ).digest()

    return int.from_bytes(
        h[:8], "big", signed=False
    )

def to_jsonable(value: Any) -> Any:
    """
    Best-effort conversion of a generated value tree into something
    `json.dumps` accepts. ABSENT members are dropped from mappings.
    """

    if value is ABSENT:
        return None

    if isinstance(value, dict):
        return {
            str(k): to_jsonable(v)
            for k, v in value.items()
            if v is not ABSENT
        }

    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]

    if isinstance(value, (set, frozenset)):
        return sorted(
            (to_jsonable(v) for v in value),
            key=lambda v: json.dumps(v, sort_keys=True, default=str),
        )

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    if isinstance(value, float) and math.isnan(value):
        return None

    if isinstance(value, Enum):
        return to_jsonable(value.value)

    if isinstance(value, ResolvedPromise):
        return to_jsonable(value.value)

    if callable(value):
        return f"<function {getattr(value, '__name__', 'anonymous')}>"

    return value

def start_of_today() -> datetime:
    """Default anchor for date generation: stable for a whole day."""
    return datetime.combine(date.today(), time.min)
