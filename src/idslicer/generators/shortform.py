"""Short-form rendering of minted IDs."""

from __future__ import annotations

from idslicer.generators.base import IDGenerator


def shorten_id(identifier: str) -> str:
    """Turn ``.../PREFIX_0001234`` into ``PREFIX:0001234``.

    Identifiers without a ``/`` or without a ``_`` after the last ``/`` are
    returned unchanged.
    """
    _, slash, suffix = identifier.rpartition("/")
    if not slash:
        return identifier
    prefix, underscore, local = suffix.partition("_")
    if not underscore:
        return identifier
    return f"{prefix}:{local}"


class ShortFormIDGenerator(IDGenerator):
    """Wraps another generator and shortens the IDs it returns.

    The wrapped generator still sees (and checks) the long-form IDs.
    """

    def __init__(self, inner: IDGenerator) -> None:
        self._inner = inner

    @property
    def inner(self) -> IDGenerator:
        return self._inner

    def next_id(self) -> str:
        return shorten_id(self._inner.next_id())
