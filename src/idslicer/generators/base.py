"""Base class for automatic identifier generators."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator

from idslicer.core.errors import IDSpaceExhaustedError, InvalidArgumentError

_CONVERSION_RE = re.compile(r"%(?:%|[-+ #0]*\d*(?:\.\d+)?[a-zA-Z])")


def check_format(fmt: str) -> str:
    """Validate that *fmt* holds exactly one printf-style integer field."""
    fields = [m for m in _CONVERSION_RE.findall(fmt) if m != "%%"]
    if len(fields) != 1 or fields[0][-1] not in "di":
        raise InvalidArgumentError(f"ID format must contain exactly one integer field: {fmt!r}")
    return fmt


def check_bounds(lower: int, upper: int) -> None:
    if lower < 0 or upper <= lower:
        raise InvalidArgumentError("Invalid range")


class IDGenerator(ABC):
    """Mints new identifiers, one per call to :meth:`next_id`.

    Generators are stateful and meant for a single minting session; they
    must not be shared across threads without external locking.
    """

    @abstractmethod
    def next_id(self) -> str:
        """Return a new identifier.

        Raises:
            IDSpaceExhaustedError: If no identifier can be produced.
        """

    def take(self, count: int) -> list[str]:
        """Mint *count* identifiers in a row."""
        return [self.next_id() for _ in range(count)]

    def __iter__(self) -> Iterator[str]:
        """Yield identifiers until the generator is exhausted."""
        while True:
            try:
                yield self.next_id()
            except IDSpaceExhaustedError:
                return
