from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Optional, Dict, List, Tuple, Any, Sequence

import exrex
from faker import Faker
from faker.providers.lorem.en_US import Provider as LoremProvider

from type import Seed
from utils import seed_to_int

DEFAULT_LOCALE = "en_US"
ALPHABET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
SECONDS_PER_DAY = 24 * 60 * 60

def _index_words_by_length(words: Sequence[str]) -> Dict[int, Tuple[str, ...]]:
    index: Dict[int, List[str]] = {}
    for word in words:
        index.setdefault(len(word), []).append(word)
    return {k: tuple(v) for k, v in index.items()}

_WORDS_BY_LENGTH = _index_words_by_length(LoremProvider.word_list)

class RandomSource:
    """
    Seedable facade over a private Faker instance. Every random draw made
    while generating a mock goes through here, so one seed fixes the
    whole output.
    """

    def __init__(
            self,
            seed: Optional[Seed] = None,
            faker: Optional[Faker] = None,
            locale: str = DEFAULT_LOCALE,
    ) -> None:
        self.faker = faker or Faker(locale)
        # seed_instance(None) still detaches us from Faker's shared global Random
        self.faker.seed_instance(
            seed_to_int(seed) if seed is not None else None
        )
        self.seed_value = seed

    def seed(self, seed: Seed) -> None:
        self.seed_value = seed
        self.faker.seed_instance(seed_to_int(seed))

    @property
    def rng(self) -> random.Random:
        return self.faker.random

    def integer(self, low: int, high: int) -> int:
        return self.rng.randint(low, high)

    def uniform(self, low: float, high: float) -> float:
        return self.rng.uniform(low, high)

    def boolean(self) -> bool:
        return bool(self.rng.getrandbits(1))

    def choice(self, options: Sequence[Any]) -> Any:
        return options[self.rng.randrange(len(options))]

    def alpha(self, length: int) -> str:
        return "".join(
            self.rng.choice(ALPHABET) for _ in range(max(0, length))
        )

    def word(self, length: Optional[int] = None) -> str:
        if length is None:
            return self.faker.word()
        if length <= 0:
            return ""

        candidates = _WORDS_BY_LENGTH.get(length)
        if candidates:
            return self.choice(candidates)

        return self.faker.lexify("?" * length)

    def uuid(self) -> str:
        return self.faker.uuid4()

    def email(self) -> str:
        return self.faker.email()

    def url(self) -> str:
        return self.faker.url()

    def full_name(self) -> str:
        return self.faker.name()

    def color(self) -> str:
        return self.faker.hex_color()

    def phone_number(self) -> str:
        return self.faker.phone_number()

    def between(self, start: datetime, end: datetime) -> datetime:
        span = (end - start).total_seconds()
        return start + timedelta(seconds=self.uniform(0, span))

    def soon(self, reference: datetime, days: float = 1) -> datetime:
        return reference + timedelta(
            seconds=self.uniform(0, days * SECONDS_PER_DAY)
        )

    def recent(self, reference: datetime, days: float = 1) -> datetime:
        return reference - timedelta(
            seconds=self.uniform(0, days * SECONDS_PER_DAY)
        )

    def from_regex(self, pattern: str, limit: Optional[int] = None) -> str:
        """
        exrex draws from the module-level `random` state, so it is seeded
        from this source for the duration of the call and then restored.
        """

        saved = random.getstate()
        random.seed(self.rng.getrandbits(64))
        try:
            if limit is None:
                return exrex.getone(pattern)
            return exrex.getone(pattern, limit)
        finally:
            random.setstate(saved)
