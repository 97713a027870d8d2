from __future__ import annotations

import functools
import logging
from datetime import date, datetime
from typing import Optional, Dict, List, Tuple, Any, Callable, TYPE_CHECKING

from constraints import (
    date_constraints,
    number_constraints,
    size_constraints,
    string_constraints,
)
from field_resolver import find_matching_generator
from random_source import RandomSource
from schema_nodes import SchemaNode
from type import (
    ABSENT,
    FakerFunction,
    GenerationContext,
    ResolvedPromise,
    TypeTag,
)
from utils import normalize_key, start_of_today

if TYPE_CHECKING:
    from data_generator import DataGenerator

logger = logging.getLogger(__name__)

DEFAULT_STRING_LENGTH = (0, 10)
DEFAULT_ARRAY_LENGTH = (0, 10)
DEFAULT_SET_SIZE = (1, 5)
DEFAULT_NUMBER_SPAN = 9999
RECENT_WINDOW_DAYS = 30
# Bound on draws when collecting distinct set elements / map keys
MAX_DISTINCT_ATTEMPTS_FACTOR = 10
MIN_DISTINCT_ATTEMPTS = 10

BuiltinSynthesizer = Callable[["DataGenerator", SchemaNode, GenerationContext], Any]

def depth_controlled(empty: Callable[[], Any]):
    """
    Returns `empty()` instead of recursing once the context has reached
    its maximum depth; otherwise runs the synthesizer one level deeper.
    """

    def decorator(synthesize: BuiltinSynthesizer) -> BuiltinSynthesizer:

        @functools.wraps(synthesize)
        def guarded(
                gen: "DataGenerator",
                node: SchemaNode,
                ctx: GenerationContext,
        ) -> Any:
            if ctx.exhausted:
                return empty()
            return synthesize(gen, node, ctx.descend())

        return guarded

    return decorator

def _reference_date(ctx: GenerationContext) -> datetime:
    if ctx.reference_date is not None:
        return ctx.reference_date
    return start_of_today()

def _stringify(value: Any) -> str:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)

# String generators picked by field name or string format, in priority order
_COLOR = lambda rs, ctx: rs.color()
_STRING_CATEGORIES: Tuple[Tuple[str, Callable[[RandomSource, GenerationContext], str]], ...] = (
    ("email", lambda rs, ctx: rs.email()),
    ("uuid", lambda rs, ctx: rs.uuid()),
    ("uid", lambda rs, ctx: rs.uuid()),
    ("url", lambda rs, ctx: rs.url()),
    ("name", lambda rs, ctx: rs.full_name()),
    ("date", lambda rs, ctx: rs.recent(_reference_date(ctx)).isoformat()),
    ("datetime", lambda rs, ctx: rs.recent(_reference_date(ctx)).isoformat()),
    ("colorhex", _COLOR),
    ("color", _COLOR),
    ("backgroundcolor", _COLOR),
    ("textshadow", _COLOR),
    ("textcolor", _COLOR),
    ("textdecorationcolor", _COLOR),
    ("bordercolor", _COLOR),
    ("bordertopcolor", _COLOR),
    ("borderrightcolor", _COLOR),
    ("borderbottomcolor", _COLOR),
    ("borderleftcolor", _COLOR),
    ("borderblockstartcolor", _COLOR),
    ("borderblockendcolor", _COLOR),
    ("borderinlinestartcolor", _COLOR),
    ("borderinlineendcolor", _COLOR),
    ("columnrulecolor", _COLOR),
    ("outlinecolor", _COLOR),
    ("phonenumber", lambda rs, ctx: rs.phone_number()),
)

def _string_category(
        ctx: GenerationContext,
        formats: frozenset,
) -> Optional[FakerFunction]:

    key = normalize_key(ctx.key_name) if ctx.key_name else None
    for category, make in _STRING_CATEGORIES:
        if category == key or category in formats:
            return functools.partial(make, ctx.random_source, ctx)
    return None

def synth_string(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> str:
    rs = ctx.random_source
    c = string_constraints(node)

    if c.pattern is not None:
        pattern = getattr(c.pattern, "pattern", c.pattern)
        return rs.from_regex(pattern, limit=c.max)

    # Caller supplied generators are used verbatim
    if ctx.key_name and ctx.key_name in ctx.string_map:
        return ctx.string_map[ctx.key_name]()

    low, high = c.min, c.max
    if low is not None and high is not None and low > high:
        low, high = high, low
    if low is None:
        low = DEFAULT_STRING_LENGTH[0]
    if high is None:
        high = max(DEFAULT_STRING_LENGTH[1], low)

    target = rs.integer(low, high)

    generator = _string_category(ctx, c.formats)
    if generator is None and ctx.key_name:
        resolver = ctx.resolver or functools.partial(
            find_matching_generator,
            reference_date=_reference_date(ctx),
        )
        generator = resolver(
            ctx.key_name,
            rs.faker,
            ctx.mockery_mapper,
        )
    if generator is None:
        if target > DEFAULT_STRING_LENGTH[1]:
            generator = rs.word
        else:
            generator = functools.partial(rs.word, target)

    value = _stringify(generator())

    if c.min is not None and len(value) < c.min:
        value += rs.alpha(c.min - len(value))

    # max wins over min: exceeding it is the worse failure
    if c.max is not None:
        value = value[:c.max]

    return value

def synth_number(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    low, high = number_constraints(node).integer_bounds()

    if low is None and high is None:
        low, high = 0, DEFAULT_NUMBER_SPAN
    elif low is None:
        low = min(0, high)
    elif high is None:
        high = max(low, 0) + DEFAULT_NUMBER_SPAN

    if low > high:
        logger.debug("Unsatisfiable number range [%s, %s]", low, high)
        return ABSENT

    return ctx.random_source.integer(low, high)

def synth_boolean(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> bool:
    return ctx.random_source.boolean()

def synth_date(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    rs = ctx.random_source
    c = date_constraints(node)

    if c.min is not None and c.max is not None:
        if c.min > c.max:
            logger.debug("Unsatisfiable date range [%s, %s]", c.min, c.max)
            return ABSENT
        return rs.between(c.min, c.max)

    if c.min is not None:
        return rs.soon(c.min)

    if c.max is not None:
        return rs.recent(c.max)

    return rs.recent(_reference_date(ctx), days=RECENT_WINDOW_DAYS)

@depth_controlled(dict)
def synth_object(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Dict[str, Any]:
    output: Dict[str, Any] = {}
    for name, child in (node.shape or {}).items():
        output[name] = gen.generate(child, ctx.for_key(name))
    return output

@depth_controlled(list)
def synth_array(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> List[Any]:
    low, high = size_constraints(node).resolve(*DEFAULT_ARRAY_LENGTH)
    length = ctx.random_source.integer(low, high)

    return [
        gen.generate(node.inner, ctx)
        for _ in range(length)
    ]

def _attempts(target: int) -> int:
    return max(MIN_DISTINCT_ATTEMPTS, target * MAX_DISTINCT_ATTEMPTS_FACTOR)

@depth_controlled(set)
def synth_set(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    """
    A `set` of distinct elements. Unhashable elements (objects, arrays,
    maps) are compared by equality instead and come back as a `list`.
    """
    low, high = size_constraints(node).resolve(*DEFAULT_SET_SIZE)
    target = ctx.random_source.integer(low, high)

    results: List[Any] = []
    seen: set = set()
    hashable = True
    attempts = _attempts(target)
    while len(results) < target and attempts > 0:
        attempts -= 1
        value = gen.generate(node.inner, ctx)
        try:
            if value in seen:
                continue
            seen.add(value)
        except TypeError:
            hashable = False
            if value in results:
                continue
        results.append(value)

    if len(results) < target:
        logger.debug(
            "Set element domain exhausted: %d of %d distinct values",
            len(results),
            target,
        )

    return set(results) if hashable else results

def _fill_entries(
        gen: "DataGenerator",
        node: SchemaNode,
        ctx: GenerationContext,
        target: int,
) -> Dict[Any, Any]:

    results: Dict[Any, Any] = {}
    attempts = _attempts(target)
    while len(results) < target and attempts > 0:
        attempts -= 1
        key = gen.generate(node.key, ctx)
        results[key] = gen.generate(node.value, ctx)

    if len(results) < target:
        logger.debug(
            "Key domain exhausted: %d of %d distinct keys",
            len(results),
            target,
        )

    return results

@depth_controlled(dict)
def synth_map(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Dict[Any, Any]:
    return _fill_entries(gen, node, ctx, ctx.map_entries_length)

@depth_controlled(dict)
def synth_record(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Dict[Any, Any]:
    return _fill_entries(gen, node, ctx, ctx.record_keys_length)

@depth_controlled(lambda: ABSENT)
def synth_lazy(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    return gen.generate(node.resolve(), ctx)

def synth_tuple(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> tuple:
    results = [gen.generate(item, ctx) for item in node.items]

    if node.rest is not None:
        rest = synth_array(
            gen,
            SchemaNode(tag=TypeTag.ARRAY, inner=node.rest),
            ctx,
        )
        results.extend(rest)

    return tuple(results)

def synth_union(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    option = ctx.random_source.choice(node.items)
    return gen.generate(option, ctx)

def synth_intersection(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    left, right = (gen.generate(part, ctx) for part in node.items)

    if isinstance(left, dict) and isinstance(right, dict):
        return {**left, **right}

    return left if right is ABSENT else right

def synth_enum(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    return ctx.random_source.choice(node.values)

def synth_literal(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    return node.literal

def synth_inner(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    return gen.generate(node.unwrap(), ctx)

def synth_default(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    if ctx.random_source.boolean():
        return node.default_factory()
    return gen.generate(node.inner, ctx)

def synth_effects(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    value = gen.generate(node.inner, ctx)
    if node.effect is None:
        return value
    return node.effect(value)

def synth_function(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Callable[[], Any]:

    def mocked_function() -> Any:
        return gen.generate(node.inner, ctx)

    return mocked_function

def synth_promise(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> ResolvedPromise:
    return ResolvedPromise(gen.generate(node.inner, ctx))

def synth_absent(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> Any:
    return ABSENT

def synth_null(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> None:
    return None

def synth_nan(gen: "DataGenerator", node: SchemaNode, ctx: GenerationContext) -> float:
    return float("nan")
