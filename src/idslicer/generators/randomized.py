"""Randomized ID generator.

Instead of always handing out the lowest free ID, this generator tries
random positions above the lowest free slot of its range. This lowers the
odds of colliding with IDs created out-of-band in the same range (e.g. by
someone editing the ontology by hand at the same time).
"""

from __future__ import annotations

import logging
import random

from idslicer.checkers.existence import ExistenceChecker
from idslicer.core.errors import IDSpaceExhaustedError
from idslicer.core.models import Range
from idslicer.core.registry import Registry
from idslicer.generators.base import IDGenerator, check_bounds, check_format

logger = logging.getLogger(__name__)

# Probe offsets are drawn uniformly from [0, MAX_STEP).
MAX_STEP = 100


class RandomizedIDGenerator(IDGenerator):
    """Mints IDs at random offsets inside ``[lower, upper)``.

    On the first call the lower bound is moved up to the first unused ID.
    Each call then walks forward from there by random steps and returns the
    first candidate that is neither in use nor already returned by this
    instance. IDs this instance returned are remembered, since the checker
    may not see them until they are persisted.
    """

    def __init__(
        self,
        fmt: str,
        lower: int,
        upper: int,
        checker: ExistenceChecker,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        check_bounds(lower, upper)
        self._format = check_format(fmt)
        self._lower = lower
        self._upper = upper
        self._checker = checker
        self._random = rng if rng is not None else random.Random(seed)
        self._lower_established = False
        self._emitted: set[str] = set()

    @classmethod
    def for_range(
        cls,
        registry: Registry,
        rng: Range,
        checker: ExistenceChecker,
        seed: int | None = None,
    ) -> RandomizedIDGenerator:
        """Build a generator over *rng* using the ID format of *registry*."""
        return cls(registry.id_format, rng.lower, rng.upper, checker, seed=seed)

    @property
    def emitted(self) -> frozenset[str]:
        """IDs returned so far by this instance."""
        return frozenset(self._emitted)

    def next_id(self) -> str:
        if not self._lower_established:
            self._establish_lower_bound()

        cursor = self._lower
        while True:
            cursor += self._random.randrange(MAX_STEP)
            if cursor >= self._upper:
                break
            candidate = self._format % cursor
            if candidate not in self._emitted and not self._checker.exists(candidate):
                self._emitted.add(candidate)
                return candidate

        logger.debug(
            "Randomized generator found no ID in [%d..%d) after %d emitted",
            self._lower,
            self._upper,
            len(self._emitted),
        )
        raise IDSpaceExhaustedError("No available ID in range")

    def _establish_lower_bound(self) -> None:
        """Skip the used IDs at the bottom of the range."""
        while self._lower < self._upper:
            if not self._checker.exists(self._format % self._lower):
                self._lower_established = True
                return
            self._lower += 1
