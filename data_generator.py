from __future__ import annotations

import dataclasses as dc
import logging
from types import MappingProxyType
from typing import Optional, Dict, Any, Mapping

from random_source import RandomSource
from schema_nodes import SchemaNode
from synthesizers import (
    BuiltinSynthesizer,
    synth_absent,
    synth_array,
    synth_boolean,
    synth_date,
    synth_default,
    synth_effects,
    synth_enum,
    synth_function,
    synth_inner,
    synth_intersection,
    synth_lazy,
    synth_literal,
    synth_map,
    synth_nan,
    synth_null,
    synth_number,
    synth_object,
    synth_promise,
    synth_record,
    synth_set,
    synth_string,
    synth_tuple,
    synth_union,
)
from type import (
    Outcome,
    GenerationContext,
    Seed,
    TypeTag,
    UnknownTypeError,
)

logger = logging.getLogger(__name__)

# ANY and UNKNOWN are deliberately absent: they only resolve through backup mocks
REGISTRY: Mapping[str, BuiltinSynthesizer] = MappingProxyType({
    TypeTag.STRING.value: synth_string,
    TypeTag.NUMBER.value: synth_number,
    TypeTag.BIGINT.value: synth_number,
    TypeTag.BOOLEAN.value: synth_boolean,
    TypeTag.DATE.value: synth_date,
    TypeTag.OBJECT.value: synth_object,
    TypeTag.ARRAY.value: synth_array,
    TypeTag.SET.value: synth_set,
    TypeTag.MAP.value: synth_map,
    TypeTag.RECORD.value: synth_record,
    TypeTag.TUPLE.value: synth_tuple,
    TypeTag.UNION.value: synth_union,
    TypeTag.DISCRIMINATED_UNION.value: synth_union,
    TypeTag.INTERSECTION.value: synth_intersection,
    TypeTag.ENUM.value: synth_enum,
    TypeTag.NATIVE_ENUM.value: synth_enum,
    TypeTag.LITERAL.value: synth_literal,
    TypeTag.OPTIONAL.value: synth_inner,
    TypeTag.NULLABLE.value: synth_inner,
    TypeTag.BRANDED.value: synth_inner,
    TypeTag.DEFAULT.value: synth_default,
    TypeTag.EFFECTS.value: synth_effects,
    TypeTag.FUNCTION.value: synth_function,
    TypeTag.PROMISE.value: synth_promise,
    TypeTag.LAZY.value: synth_lazy,
    TypeTag.VOID.value: synth_absent,
    TypeTag.UNDEFINED.value: synth_absent,
    TypeTag.NULL.value: synth_null,
    TypeTag.NAN.value: synth_nan,
})

_CONTEXT_OPTIONS = frozenset(
    f.name for f in dc.fields(GenerationContext)
) - {"random_source", "seed"}

def build_context(
        random_source: Optional[RandomSource] = None,
        seed: Optional[Seed] = None,
        **options: Any,
) -> GenerationContext:
    """
    Fresh context for one top-level call. A new RandomSource is created
    unless the caller hands one in; `seed` re-seeds whichever is used.
    """

    unknown = set(options) - _CONTEXT_OPTIONS
    if unknown:
        raise TypeError(
            f"Unknown generation option(s): {', '.join(sorted(unknown))}"
        )

    source = random_source or RandomSource()
    if seed is not None:
        source.seed(seed)

    if options.get("backup_mocks"):
        options["backup_mocks"] = {
            str(tag): fn for tag, fn in options["backup_mocks"].items()
        }

    for name in ("string_map", "backup_mocks"):
        if options.get(name) is None:
            options.pop(name, None)

    return GenerationContext(
        random_source=source,
        seed=seed,
        **options
    )

class DataGenerator:
    """
    Schema-driven mock synthesis. `generate` is the single recursive entry
    point every synthesizer calls back into for child schemas.
    """

    def __init__(
            self,
            seed: Optional[Seed] = None,
            registry: Mapping[str, BuiltinSynthesizer] = REGISTRY,
            **defaults: Any,
    ) -> None:
        self.seed = seed
        self.registry = registry
        self.defaults = defaults

    def mock(
            self,
            node: SchemaNode,
            **options: Any,
    ) -> Any:

        merged: Dict[str, Any] = {"seed": self.seed, **self.defaults, **options}

        return self.generate(
            node,
            build_context(**merged),
        )

    def generate(
            self,
            node: SchemaNode,
            ctx: GenerationContext,
    ) -> Any:
        outcome = self.generate_outcome(node, ctx)
        return outcome.value

    def generate_outcome(
            self,
            node: SchemaNode,
            ctx: GenerationContext,
    ) -> Outcome:

        tag = str(node.tag)

        # Caller overrides pre-empt the built-in registry
        synthesize = ctx.backup_mocks.get(tag)
        builtin = None if synthesize else self.registry.get(tag)

        if synthesize is None and builtin is None:
            if ctx.throw_on_unknown_type:
                raise UnknownTypeError(tag)

            logger.debug("No synthesizer for type '%s'", tag)
            return Outcome.absent()

        try:
            if synthesize is not None:
                value = synthesize(node, ctx)
            else:
                value = builtin(self, node, ctx)
        except UnknownTypeError:
            raise
        except Exception as e:
            logger.exception(
                "Failed to synthesize a value for type '%s' (field: %s)",
                tag,
                ctx.key_name,
            )
            return Outcome.failure(e)

        return Outcome.success(value)

def generate_mock(
        node: SchemaNode,
        **options: Any,
) -> Any:
    """
    Generate one value for `node`.

    Options: key_name, string_map, mockery_mapper, resolver, backup_mocks,
    record_keys_length, map_entries_length, throw_on_unknown_type, seed,
    random_source, current_depth, max_depth, reference_date.
    """
    return DataGenerator().mock(node, **options)
