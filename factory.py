from __future__ import annotations

from typing import Optional, Dict, List, Any, Callable, Union

from faker import Faker

from data_generator import DataGenerator
from random_source import RandomSource
from schema_nodes import SchemaNode, safe_parse
from type import InvalidInputError, Seed

FakerCallback = Callable[[Faker], Dict[str, Any]]

def _merge(
        base: Any,
        attributes: Dict[str, Any],
) -> Any:

    if not attributes:
        return base

    if not isinstance(base, dict):
        raise TypeError(
            "Attribute overrides require a schema that produces an object"
        )

    return {**base, **attributes}

class Factory:
    """
    Builds validated mocks for one schema.
        - create: mock + overrides, re-validated against the schema
        - raw: mock + overrides, unvalidated
        - state: a new factory with extra default overrides
    One RandomSource lives as long as the factory, so a seeded factory
    yields a reproducible sequence of mocks.
    """

    def __init__(
            self,
            schema: SchemaNode,
            faker_callback: Optional[FakerCallback] = None,
            seed: Optional[Seed] = None,
            **options: Any,
    ) -> None:
        self.schema = schema
        self.faker_callback = faker_callback
        self.seed = seed
        self.options = options
        self.random_source = RandomSource(seed=seed)
        self._generator = DataGenerator(**options)

    def _mock(self) -> Any:

        data = self._generator.mock(
            self.schema,
            random_source=self.random_source,
        )

        extra = self.faker_callback(self.random_source.faker) \
            if self.faker_callback else {}

        return _merge(data, extra)

    def raw(self, attributes: Optional[Dict[str, Any]] = None) -> Any:
        return _merge(self._mock(), attributes or {})

    def create(self, attributes: Optional[Dict[str, Any]] = None) -> Any:

        merged = self.raw(attributes)

        result = safe_parse(self.schema, merged)
        if not result.success:
            raise InvalidInputError(result.issues)

        return result.data

    def create_many(
            self,
            count: int,
            attributes: Optional[Dict[str, Any]] = None,
    ) -> List[Any]:
        return [self.create(attributes) for _ in range(count)]

    def state(
            self,
            attributes: Union[Dict[str, Any], FakerCallback],
    ) -> "Factory":

        previous = self.faker_callback

        def composed(faker: Faker) -> Dict[str, Any]:
            base = previous(faker) if previous else {}
            extra = attributes(faker) if callable(attributes) else attributes
            return {**base, **extra}

        return Factory(
            self.schema,
            composed,
            seed=self.seed,
            **self.options,
        )

def factory(
        schema: SchemaNode,
        faker_callback: Optional[FakerCallback] = None,
        seed: Optional[Seed] = None,
        **options: Any,
) -> Factory:
    return Factory(schema, faker_callback, seed=seed, **options)
