"""Sequential ID generator: scans a range upwards from its lower bound."""

from __future__ import annotations

import logging

from idslicer.checkers.existence import ExistenceChecker
from idslicer.core.errors import IDSpaceExhaustedError
from idslicer.core.models import Range
from idslicer.core.registry import Registry
from idslicer.generators.base import IDGenerator, check_bounds, check_format

logger = logging.getLogger(__name__)


class SequentialIDGenerator(IDGenerator):
    """Returns the lowest unused ID above the last one it returned.

    The cursor only moves forward: successive calls on one instance yield
    strictly increasing IDs, and an ID skipped because it already existed is
    never tested again.

    Parameters
    ----------
    fmt:
        printf-style format with one integer field, e.g. ``"EX_%07d"``.
    lower, upper:
        Bounds of the numeric part, ``lower`` inclusive, ``upper`` exclusive.
    checker:
        Reports IDs that are already in use.
    """

    def __init__(self, fmt: str, lower: int, upper: int, checker: ExistenceChecker) -> None:
        check_bounds(lower, upper)
        self._format = check_format(fmt)
        self._cursor = lower
        self._upper = upper
        self._checker = checker

    @classmethod
    def for_range(
        cls, registry: Registry, rng: Range, checker: ExistenceChecker
    ) -> SequentialIDGenerator:
        """Build a generator over *rng* using the ID format of *registry*."""
        return cls(registry.id_format, rng.lower, rng.upper, checker)

    @property
    def cursor(self) -> int:
        """Next numeric value to be tested."""
        return self._cursor

    def next_id(self) -> str:
        while self._cursor < self._upper:
            candidate = self._format % self._cursor
            self._cursor += 1
            if not self._checker.exists(candidate):
                return candidate
        logger.debug("Sequential generator exhausted at %d", self._upper)
        raise IDSpaceExhaustedError("No available ID in range")
