from __future__ import annotations

import dataclasses as dc
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List, Any, Callable, Union, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from random_source import RandomSource
    from schema_nodes import SchemaNode

JSON = Dict[str, Any]
Seed = Union[int, Sequence[int]]
Primitive = Union[str, int, float, bool, datetime]

DEFAULT_MAX_DEPTH = 10
DEFAULT_RECORD_KEYS_LENGTH = 1
DEFAULT_MAP_ENTRIES_LENGTH = 1

class TypeTag(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BIGINT = "bigint"
    BOOLEAN = "boolean"
    DATE = "date"
    OBJECT = "object"
    ARRAY = "array"
    SET = "set"
    MAP = "map"
    RECORD = "record"
    TUPLE = "tuple"
    UNION = "union"
    DISCRIMINATED_UNION = "discriminated_union"
    INTERSECTION = "intersection"
    ENUM = "enum"
    NATIVE_ENUM = "native_enum"
    LITERAL = "literal"
    OPTIONAL = "optional"
    NULLABLE = "nullable"
    DEFAULT = "default"
    BRANDED = "branded"
    EFFECTS = "effects"
    FUNCTION = "function"
    PROMISE = "promise"
    LAZY = "lazy"
    VOID = "void"
    NULL = "null"
    UNDEFINED = "undefined"
    NAN = "nan"
    ANY = "any"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value

class _Absent:
    """
    Marks "no representable value". Distinct from None, which is the
    value synthesized for null nodes.
    """

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"

    def __reduce__(self) -> str:
        return "ABSENT"

ABSENT = _Absent()

class MockError(Exception):
    pass

class UnknownTypeError(MockError):

    def __init__(self, tag: str) -> None:
        super().__init__(f"No synthesizer registered for type '{tag}'.")
        self.tag = tag

@dc.dataclass
class Issue:
    path: List[Union[str, int]]
    message: str

    def __str__(self) -> str:
        location = ".".join(str(p) for p in self.path) or "<root>"
        return f"{location}: {self.message}"

class SchemaValidationError(MockError):

    def __init__(self, issues: List[Issue]) -> None:
        super().__init__(
            "; ".join(str(issue) for issue in issues)
        )
        self.issues = issues

class InvalidInputError(MockError):
    """
    Raised by the factory when the merged attributes no longer
    satisfy the schema.
    """

    def __init__(self, issues: List[Issue]) -> None:
        super().__init__(
            "Invalid input: " + "; ".join(str(issue) for issue in issues)
        )
        self.issues = issues

class SchemaLoadError(MockError):
    pass

@dc.dataclass(frozen=True)
class Outcome:
    """
    Result of synthesizing one node:
        - ok: a value was produced
        - not ok, no error: nothing representable (unknown type)
        - not ok, error: the synthesizer failed and was contained
    """

    ok: bool
    value: Any = ABSENT
    error: Optional[BaseException] = None

    @staticmethod
    def success(value: Any) -> "Outcome":
        return Outcome(ok=True, value=value)

    @staticmethod
    def absent() -> "Outcome":
        return Outcome(ok=False)

    @staticmethod
    def failure(error: BaseException) -> "Outcome":
        return Outcome(ok=False, value=ABSENT, error=error)

class ResolvedPromise:
    """
    An awaitable that is already settled: awaiting it returns the
    wrapped value without suspending.
    """

    def __init__(self, value: Any) -> None:
        self.value = value

    def __await__(self):
        if False:
            yield
        return self.value

    def __repr__(self) -> str:
        return f"ResolvedPromise({self.value!r})"

FakerFunction = Callable[[], Primitive]
MockeryMapper = Callable[[str, Any], Optional[FakerFunction]]
Resolver = Callable[..., Optional[FakerFunction]]
Synthesizer = Callable[["SchemaNode", "GenerationContext"], Any]

@dc.dataclass(frozen=True)
class GenerationContext:
    """
    Everything threaded through one top-level generation call:
        - recursion bookkeeping (current/max depth, current field name)
        - the shared RandomSource
        - caller overrides (string map, mockery mapper, backup mocks)
        - collection sizes for records and maps
    """

    random_source: "RandomSource"
    current_depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    key_name: Optional[str] = None
    string_map: Dict[str, Callable[[], str]] = dc.field(default_factory=dict)
    mockery_mapper: Optional[MockeryMapper] = None
    resolver: Optional[Resolver] = None
    backup_mocks: Dict[str, Synthesizer] = dc.field(default_factory=dict)
    record_keys_length: int = DEFAULT_RECORD_KEYS_LENGTH
    map_entries_length: int = DEFAULT_MAP_ENTRIES_LENGTH
    throw_on_unknown_type: bool = False
    seed: Optional[Seed] = None
    reference_date: Optional[datetime] = None

    def descend(self) -> "GenerationContext":
        return dc.replace(self, current_depth=self.current_depth + 1)

    def for_key(self, key_name: Optional[str]) -> "GenerationContext":
        return dc.replace(self, key_name=key_name)

    @property
    def exhausted(self) -> bool:
        return self.current_depth >= self.max_depth
