from __future__ import annotations

import copy
import dataclasses as dc
import math
import re
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, List, Tuple, Any, Callable, Mapping, Sequence, Union, Type
from urllib.parse import urlparse

from type import (
    ABSENT,
    Issue,
    SchemaValidationError,
    TypeTag,
)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_UUID = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)

@dc.dataclass(frozen=True)
class Check:
    kind: str
    value: Any = None
    inclusive: bool = True

@dc.dataclass(frozen=True, eq=False)
class SchemaNode:
    """
    Read-only description of a value's shape. Builder methods never
    modify a node; they return a new one.
    """

    tag: str
    checks: Tuple[Check, ...] = ()
    shape: Optional[Dict[str, "SchemaNode"]] = None
    inner: Optional["SchemaNode"] = None
    key: Optional["SchemaNode"] = None
    value: Optional["SchemaNode"] = None
    items: Tuple["SchemaNode", ...] = ()
    rest: Optional["SchemaNode"] = None
    values: Tuple[Any, ...] = ()
    literal: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    effect: Optional[Callable[[Any], Any]] = None
    getter: Optional[Callable[[], "SchemaNode"]] = None
    discriminator: Optional[str] = None
    brand_name: Optional[str] = None
    enum_cls: Optional[Type[Enum]] = None
    args: Optional["SchemaNode"] = None
    description: Optional[str] = None

    def __repr__(self) -> str:
        return f"SchemaNode(tag={str(self.tag)!r}, checks={len(self.checks)})"

    def _with_check(
            self,
            kind: str,
            value: Any = None,
            inclusive: bool = True,
    ) -> "SchemaNode":
        return dc.replace(
            self,
            checks=self.checks + (Check(kind, value, inclusive),)
        )

    def check(self, kind: str) -> Optional[Check]:
        """Last declared check of `kind`, if any."""
        found = None
        for c in self.checks:
            if c.kind == kind:
                found = c
        return found

    # Bounds: lengths for strings, sizes for arrays/sets, values for numbers/dates
    def min(self, value: Any, inclusive: bool = True) -> "SchemaNode":
        return self._with_check("min", value, inclusive)

    def max(self, value: Any, inclusive: bool = True) -> "SchemaNode":
        return self._with_check("max", value, inclusive)

    def length(self, value: int) -> "SchemaNode":
        return self._with_check("length", value)

    def nonempty(self) -> "SchemaNode":
        return self.min(1)

    def gt(self, value: Any) -> "SchemaNode":
        return self.min(value, inclusive=False)

    def gte(self, value: Any) -> "SchemaNode":
        return self.min(value)

    def lt(self, value: Any) -> "SchemaNode":
        return self.max(value, inclusive=False)

    def lte(self, value: Any) -> "SchemaNode":
        return self.max(value)

    def positive(self) -> "SchemaNode":
        return self.gt(0)

    def nonnegative(self) -> "SchemaNode":
        return self.gte(0)

    def negative(self) -> "SchemaNode":
        return self.lt(0)

    def int(self) -> "SchemaNode":
        return self._with_check("int")

    def regex(self, pattern: Union[str, "re.Pattern[str]"]) -> "SchemaNode":
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        return self._with_check("regex", pattern)

    def email(self) -> "SchemaNode":
        return self._with_check("email")

    def url(self) -> "SchemaNode":
        return self._with_check("url")

    def uuid(self) -> "SchemaNode":
        return self._with_check("uuid")

    def datetime(self) -> "SchemaNode":
        return self._with_check("datetime")

    # Wrappers
    def optional(self) -> "SchemaNode":
        return SchemaNode(tag=TypeTag.OPTIONAL, inner=self)

    def nullable(self) -> "SchemaNode":
        return SchemaNode(tag=TypeTag.NULLABLE, inner=self)

    def default(self, value: Any) -> "SchemaNode":
        factory = value if callable(value) else (lambda: copy.deepcopy(value))
        return SchemaNode(
            tag=TypeTag.DEFAULT,
            inner=self,
            default_factory=factory
        )

    def brand(self, name: str) -> "SchemaNode":
        return SchemaNode(tag=TypeTag.BRANDED, inner=self, brand_name=name)

    def transform(self, fn: Callable[[Any], Any]) -> "SchemaNode":
        return SchemaNode(tag=TypeTag.EFFECTS, inner=self, effect=fn)

    def with_rest(self, node: "SchemaNode") -> "SchemaNode":
        if self.tag != TypeTag.TUPLE:
            raise TypeError("with_rest() only applies to tuple schemas")
        return dc.replace(self, rest=node)

    def describe(self, text: str) -> "SchemaNode":
        return dc.replace(self, description=text)

    def unwrap(self) -> "SchemaNode":
        if self.inner is None:
            raise TypeError(f"'{self.tag}' schema has nothing to unwrap")
        return self.inner

    def resolve(self) -> "SchemaNode":
        if self.getter is None:
            raise TypeError("resolve() only applies to lazy schemas")
        return self.getter()

    def safe_parse(self, value: Any) -> "ParseResult":
        return safe_parse(self, value)

    def parse(self, value: Any) -> Any:
        return parse(self, value)

def string() -> SchemaNode:
    return SchemaNode(tag=TypeTag.STRING)

def number() -> SchemaNode:
    return SchemaNode(tag=TypeTag.NUMBER)

def bigint() -> SchemaNode:
    return SchemaNode(tag=TypeTag.BIGINT)

def boolean() -> SchemaNode:
    return SchemaNode(tag=TypeTag.BOOLEAN)

def date() -> SchemaNode:
    return SchemaNode(tag=TypeTag.DATE)

def obj(
        shape: Optional[Mapping[str, SchemaNode]] = None,
        **fields: SchemaNode,
) -> SchemaNode:
    merged: Dict[str, SchemaNode] = dict(shape or {})
    merged.update(fields)
    return SchemaNode(tag=TypeTag.OBJECT, shape=merged)

def array(element: SchemaNode) -> SchemaNode:
    return SchemaNode(tag=TypeTag.ARRAY, inner=element)

def set_of(element: SchemaNode) -> SchemaNode:
    return SchemaNode(tag=TypeTag.SET, inner=element)

def map_of(key: SchemaNode, value: SchemaNode) -> SchemaNode:
    return SchemaNode(tag=TypeTag.MAP, key=key, value=value)

def record(
        key: SchemaNode,
        value: Optional[SchemaNode] = None,
) -> SchemaNode:
    # record(value) is shorthand for record(string(), value)
    if value is None:
        key, value = string(), key
    return SchemaNode(tag=TypeTag.RECORD, key=key, value=value)

def tuple_of(
        items: Sequence[SchemaNode],
        rest: Optional[SchemaNode] = None,
) -> SchemaNode:
    return SchemaNode(tag=TypeTag.TUPLE, items=tuple(items), rest=rest)

def union(options: Sequence[SchemaNode]) -> SchemaNode:
    if not options:
        raise ValueError("union() needs at least one option")
    return SchemaNode(tag=TypeTag.UNION, items=tuple(options))

def discriminated_union(
        discriminator: str,
        options: Sequence[SchemaNode],
) -> SchemaNode:
    for option in options:
        if option.tag != TypeTag.OBJECT or discriminator not in (option.shape or {}):
            raise ValueError(
                f"Every option must be an object declaring '{discriminator}'"
            )
    return SchemaNode(
        tag=TypeTag.DISCRIMINATED_UNION,
        items=tuple(options),
        discriminator=discriminator,
    )

def intersection(left: SchemaNode, right: SchemaNode) -> SchemaNode:
    return SchemaNode(tag=TypeTag.INTERSECTION, items=(left, right))

def enum(values: Sequence[Any]) -> SchemaNode:
    if not values:
        raise ValueError("enum() needs at least one member")
    return SchemaNode(tag=TypeTag.ENUM, values=tuple(values))

def native_enum(members: Union[Type[Enum], Mapping[str, Any]]) -> SchemaNode:
    if isinstance(members, Mapping):
        return SchemaNode(
            tag=TypeTag.NATIVE_ENUM,
            values=tuple(members.values())
        )
    return SchemaNode(
        tag=TypeTag.NATIVE_ENUM,
        values=tuple(m.value for m in members),
        enum_cls=members,
    )

def literal(value: Any) -> SchemaNode:
    return SchemaNode(tag=TypeTag.LITERAL, literal=value)

def lazy(getter: Callable[[], SchemaNode]) -> SchemaNode:
    return SchemaNode(tag=TypeTag.LAZY, getter=getter)

def function(
        args: Optional[SchemaNode] = None,
        returns: Optional[SchemaNode] = None,
) -> SchemaNode:
    return SchemaNode(
        tag=TypeTag.FUNCTION,
        args=args if args is not None else tuple_of([]),
        inner=returns if returns is not None else unknown(),
    )

def promise(inner: SchemaNode) -> SchemaNode:
    return SchemaNode(tag=TypeTag.PROMISE, inner=inner)

def void() -> SchemaNode:
    return SchemaNode(tag=TypeTag.VOID)

def null() -> SchemaNode:
    return SchemaNode(tag=TypeTag.NULL)

def undefined() -> SchemaNode:
    return SchemaNode(tag=TypeTag.UNDEFINED)

def nan() -> SchemaNode:
    return SchemaNode(tag=TypeTag.NAN)

def any_() -> SchemaNode:
    return SchemaNode(tag=TypeTag.ANY)

def unknown() -> SchemaNode:
    return SchemaNode(tag=TypeTag.UNKNOWN)

def custom(tag: str, **fields: Any) -> SchemaNode:
    return SchemaNode(tag=tag, **fields)

@dc.dataclass
class ParseResult:
    success: bool
    data: Any = None
    issues: List[Issue] = dc.field(default_factory=list)

def safe_parse(node: SchemaNode, value: Any) -> ParseResult:
    issues = validate(node, value)
    if issues:
        return ParseResult(success=False, issues=issues)
    return ParseResult(success=True, data=value)

def parse(node: SchemaNode, value: Any) -> Any:
    result = safe_parse(node, value)
    if not result.success:
        raise SchemaValidationError(result.issues)
    return result.data

# Tags whose validators accept a missing value on their own
_ACCEPTS_ABSENT = {
    TypeTag.OPTIONAL,
    TypeTag.DEFAULT,
    TypeTag.VOID,
    TypeTag.UNDEFINED,
    TypeTag.ANY,
    TypeTag.UNKNOWN,
    TypeTag.EFFECTS,
    TypeTag.LAZY,
    TypeTag.BRANDED,
    TypeTag.UNION,
    TypeTag.INTERSECTION,
}

def validate(
        node: SchemaNode,
        value: Any,
        path: Optional[List[Union[str, int]]] = None,
) -> List[Issue]:
    """
    Structural check of `value` against `node`. Returns every issue
    found; an empty list means the value conforms.
    """

    path = path or []
    tag = node.tag

    if value is ABSENT and tag not in _ACCEPTS_ABSENT:
        return [Issue(path, "Required")]

    validator = _VALIDATORS.get(tag)
    if validator is None:
        # custom tags carry no structure we can check
        return []

    return validator(node, value, path)

def _type_issue(path: List[Union[str, int]], expected: str, value: Any) -> List[Issue]:
    return [Issue(path, f"Expected {expected}, received {type(value).__name__}")]

def _bound_issues(
        node: SchemaNode,
        measured: Any,
        path: List[Union[str, int]],
        noun: str,
) -> List[Issue]:
    issues: List[Issue] = []
    for c in node.checks:
        try:
            if c.kind == "min":
                ok = measured >= c.value if c.inclusive else measured > c.value
                if not ok:
                    issues.append(Issue(path, f"{noun} must be >= {c.value}"))
            elif c.kind == "max":
                ok = measured <= c.value if c.inclusive else measured < c.value
                if not ok:
                    issues.append(Issue(path, f"{noun} must be <= {c.value}"))
            elif c.kind == "length" and measured != c.value:
                issues.append(Issue(path, f"{noun} must be exactly {c.value}"))
        except TypeError as e:
            issues.append(Issue(path, f"cannot compare {noun}: {e}"))
    return issues

def _is_datetime_string(value: str) -> bool:
    try:
        datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return False
    return True

def _validate_string(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, str):
        return _type_issue(path, "string", value)

    issues = _bound_issues(node, len(value), path, "length")
    for c in node.checks:
        if c.kind == "regex" and not c.value.search(value):
            issues.append(Issue(path, f"does not match /{c.value.pattern}/"))
        elif c.kind == "email" and not _EMAIL.match(value):
            issues.append(Issue(path, "Invalid email"))
        elif c.kind == "uuid" and not _UUID.match(value):
            issues.append(Issue(path, "Invalid uuid"))
        elif c.kind == "url":
            parsed = urlparse(value)
            if not (parsed.scheme and parsed.netloc):
                issues.append(Issue(path, "Invalid url"))
        elif c.kind == "datetime" and not _is_datetime_string(value):
            issues.append(Issue(path, "Invalid datetime"))
    return issues

def _validate_number(node: SchemaNode, value: Any, path) -> List[Issue]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _type_issue(path, "number", value)
    if isinstance(value, float) and math.isnan(value):
        return [Issue(path, "Expected number, received nan")]

    issues = _bound_issues(node, value, path, "value")
    if node.check("int") and not float(value).is_integer():
        issues.append(Issue(path, "Expected integer"))
    return issues

def _validate_bigint(node: SchemaNode, value: Any, path) -> List[Issue]:
    if isinstance(value, bool) or not isinstance(value, int):
        return _type_issue(path, "bigint", value)
    return _bound_issues(node, value, path, "value")

def _validate_boolean(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, bool):
        return _type_issue(path, "boolean", value)
    return []

def _validate_date(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, datetime):
        return _type_issue(path, "date", value)
    return _bound_issues(node, value, path, "date")

def _validate_object(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, dict):
        return _type_issue(path, "object", value)

    issues: List[Issue] = []
    for name, child in (node.shape or {}).items():
        issues.extend(
            validate(child, value.get(name, ABSENT), path + [name])
        )
    return issues

def _validate_array(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, list):
        return _type_issue(path, "array", value)

    issues = _bound_issues(node, len(value), path, "size")
    for i, item in enumerate(value):
        issues.extend(validate(node.inner, item, path + [i]))
    return issues

def _validate_set(node: SchemaNode, value: Any, path) -> List[Issue]:
    # sets of unhashable members are carried as lists of distinct items
    if isinstance(value, list):
        if any(item in value[:i] for i, item in enumerate(value)):
            return [Issue(path, "Set members must be distinct")]
    elif not isinstance(value, (set, frozenset)):
        return _type_issue(path, "set", value)

    issues = _bound_issues(node, len(value), path, "size")
    for item in value:
        issues.extend(validate(node.inner, item, path))
    return issues

def _validate_mapping(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, dict):
        return _type_issue(path, str(node.tag), value)

    issues: List[Issue] = []
    for k, v in value.items():
        issues.extend(validate(node.key, k, path + [str(k)]))
        issues.extend(validate(node.value, v, path + [str(k)]))
    return issues

def _validate_tuple(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not isinstance(value, (list, tuple)):
        return _type_issue(path, "tuple", value)

    fixed = len(node.items)
    if len(value) < fixed or (node.rest is None and len(value) != fixed):
        return [Issue(path, f"Expected {fixed} positional items, received {len(value)}")]

    issues: List[Issue] = []
    for i, item in enumerate(value):
        child = node.items[i] if i < fixed else node.rest
        issues.extend(validate(child, item, path + [i]))
    return issues

def _validate_union(node: SchemaNode, value: Any, path) -> List[Issue]:
    for option in node.items:
        if not validate(option, value, path):
            return []
    return [Issue(path, "Value matches none of the union options")]

def _validate_intersection(node: SchemaNode, value: Any, path) -> List[Issue]:
    issues: List[Issue] = []
    for part in node.items:
        issues.extend(validate(part, value, path))
    return issues

def _validate_members(node: SchemaNode, value: Any, path) -> List[Issue]:
    if isinstance(value, Enum):
        value = value.value
    if value not in node.values:
        return [Issue(path, f"Expected one of {list(node.values)!r}, received {value!r}")]
    return []

def _validate_literal(node: SchemaNode, value: Any, path) -> List[Issue]:
    if value != node.literal or type(value) is not type(node.literal):
        return [Issue(path, f"Expected literal {node.literal!r}, received {value!r}")]
    return []

def _validate_optional(node: SchemaNode, value: Any, path) -> List[Issue]:
    if value is ABSENT:
        return []
    return validate(node.inner, value, path)

def _validate_nullable(node: SchemaNode, value: Any, path) -> List[Issue]:
    if value is None:
        return []
    return validate(node.inner, value, path)

def _validate_passthrough(node: SchemaNode, value: Any, path) -> List[Issue]:
    return validate(node.inner, value, path)

def _validate_lazy(node: SchemaNode, value: Any, path) -> List[Issue]:
    return validate(node.resolve(), value, path)

def _validate_function(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not callable(value):
        return _type_issue(path, "function", value)
    return []

def _validate_promise(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not hasattr(value, "__await__"):
        return _type_issue(path, "promise", value)
    return []

def _validate_absent(node: SchemaNode, value: Any, path) -> List[Issue]:
    if value is not ABSENT:
        return [Issue(path, f"Expected no value, received {value!r}")]
    return []

def _validate_null(node: SchemaNode, value: Any, path) -> List[Issue]:
    if value is not None:
        return _type_issue(path, "null", value)
    return []

def _validate_nan(node: SchemaNode, value: Any, path) -> List[Issue]:
    if not (isinstance(value, float) and math.isnan(value)):
        return _type_issue(path, "nan", value)
    return []

def _validate_anything(node: SchemaNode, value: Any, path) -> List[Issue]:
    return []

_VALIDATORS: Dict[str, Callable[[SchemaNode, Any, List[Union[str, int]]], List[Issue]]] = {
    TypeTag.STRING: _validate_string,
    TypeTag.NUMBER: _validate_number,
    TypeTag.BIGINT: _validate_bigint,
    TypeTag.BOOLEAN: _validate_boolean,
    TypeTag.DATE: _validate_date,
    TypeTag.OBJECT: _validate_object,
    TypeTag.ARRAY: _validate_array,
    TypeTag.SET: _validate_set,
    TypeTag.MAP: _validate_mapping,
    TypeTag.RECORD: _validate_mapping,
    TypeTag.TUPLE: _validate_tuple,
    TypeTag.UNION: _validate_union,
    TypeTag.DISCRIMINATED_UNION: _validate_union,
    TypeTag.INTERSECTION: _validate_intersection,
    TypeTag.ENUM: _validate_members,
    TypeTag.NATIVE_ENUM: _validate_members,
    TypeTag.LITERAL: _validate_literal,
    TypeTag.OPTIONAL: _validate_optional,
    TypeTag.NULLABLE: _validate_nullable,
    TypeTag.DEFAULT: _validate_optional,
    TypeTag.BRANDED: _validate_passthrough,
    TypeTag.EFFECTS: _validate_anything,
    TypeTag.FUNCTION: _validate_function,
    TypeTag.PROMISE: _validate_promise,
    TypeTag.LAZY: _validate_lazy,
    TypeTag.VOID: _validate_absent,
    TypeTag.NULL: _validate_null,
    TypeTag.UNDEFINED: _validate_absent,
    TypeTag.NAN: _validate_nan,
    TypeTag.ANY: _validate_anything,
    TypeTag.UNKNOWN: _validate_anything,
}
