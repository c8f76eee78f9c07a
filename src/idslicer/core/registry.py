"""Range registry: non-overlapping ID ranges for one namespace.

A :class:`Registry` owns every :class:`~idslicer.core.models.Range` of an ID
policy. It guarantees that no two ranges overlap, that every range lies
within ``[0, 10**width)``, and that range ids are unique. New ranges are
placed by first-fit: the lowest-addressed gap large enough wins.

Owner lookups are last-write-wins: when two ranges are registered under the
same owner name, name-based lookups return the most recently added one,
while both remain listed by id.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from idslicer.core.errors import (
    DuplicateRangeIdError,
    InvalidArgumentError,
    InvalidRangeError,
    OverlappingRangeError,
    RangeNotFoundError,
)
from idslicer.core.models import Range, unallocated_range

logger = logging.getLogger(__name__)

OBO_PURL = "http://purl.obolibrary.org/obo/"
DEFAULT_WIDTH = 7
MIN_WIDTH = 1
MAX_WIDTH = 9


def check_width(width: int) -> int:
    """Validate the number of digits of an ID namespace."""
    if not MIN_WIDTH <= width <= MAX_WIDTH:
        raise InvalidArgumentError(f"Width value out of bounds: {width}")
    return width


def _check_owner(owner: str) -> None:
    if not owner:
        raise InvalidArgumentError("Range owner must not be empty")


class Registry:
    """The set of ID ranges allocated within one namespace.

    Parameters
    ----------
    name:
        IRI of the ontology the policy is intended for.
    prefix:
        IRI prefix of the identifiers minted from this policy.
    prefix_name:
        Short prefix name (e.g. ``MYONT``), used by the short form of IDs.
    width:
        Number of digits of the numeric part of IDs (1 to 9).
    """

    def __init__(
        self,
        name: str,
        prefix: str,
        prefix_name: str,
        width: int = DEFAULT_WIDTH,
    ) -> None:
        check_width(width)
        self.name = name
        self.prefix = prefix
        self.prefix_name = prefix_name
        self.width = width
        self.max_bound = 10**width
        self._last_id = 0
        self._by_id: dict[int, Range] = {}
        self._by_name: dict[str, Range] = {}

    @classmethod
    def for_obo(cls, project_id: str, width: int = DEFAULT_WIDTH) -> Registry:
        """Create an empty registry for a typical OBO ontology.

        Example: ``Registry.for_obo("myont")`` mints IDs such as
        ``http://purl.obolibrary.org/obo/MYONT_0000001``.
        """
        upper = project_id.upper()
        return cls(
            OBO_PURL + project_id,
            f"{OBO_PURL}{upper}_",
            upper,
            width,
        )

    # -- Properties ------------------------------------------------------------

    @property
    def id_format(self) -> str:
        """printf-style format of the IDs minted from this registry."""
        return self.prefix.replace("%", "%%") + f"%0{self.width}d"

    @property
    def last_id(self) -> int:
        """Highest range id seen so far (explicit or allocated)."""
        return self._last_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Range]:
        return iter(self.ranges_by_id())

    def __contains__(self, range_id: object) -> bool:
        return range_id in self._by_id

    # -- Mutation --------------------------------------------------------------

    def add_explicit(
        self,
        range_id: int,
        owner: str,
        comment: str | None,
        lower: int,
        upper: int,
    ) -> Range:
        """Insert a range whose id and bounds are already known.

        This is what a policy reader uses to rebuild a registry from a file.

        Raises:
            InvalidArgumentError: If *range_id* is negative or *owner* is empty.
            InvalidRangeError: If the bounds are malformed or exceed the namespace.
            DuplicateRangeIdError: If *range_id* is already in use.
            OverlappingRangeError: If the range intersects an existing one.
        """
        if range_id < 0:
            raise InvalidArgumentError(f"Invalid negative range ID: {range_id}")
        _check_owner(owner)
        if lower < 0 or lower >= upper or upper > self.max_bound:
            raise InvalidRangeError(f'Invalid ID range [{lower}..{upper}) for "{owner}"')
        if range_id in self._by_id:
            raise DuplicateRangeIdError(f"Range ID {range_id} already in use")
        for existing in self._by_id.values():
            if existing.overlaps(lower, upper):
                raise OverlappingRangeError(
                    f'Range [{lower}..{upper}) for "{owner}" overlaps with range '
                    f'[{existing.lower}..{existing.upper}) for "{existing.owner}"'
                )

        rng = Range(range_id=range_id, owner=owner, comment=comment, lower=lower, upper=upper)
        self._insert(rng)
        if range_id > self._last_id:
            self._last_id = range_id
        logger.debug("Added range %s", rng)
        return rng

    def add_allocated(self, owner: str, comment: str | None, size: int) -> Range:
        """Allocate a new *size*-wide range for *owner* in the lowest free gap.

        The new range gets the next range id. Nothing is modified if no gap is
        large enough.

        Raises:
            InvalidArgumentError: If *size* is not positive or *owner* is empty.
            RangeNotFoundError: If there is not enough free space.
        """
        _check_owner(owner)
        if size <= 0:
            raise InvalidArgumentError(f"Invalid range size: {size}")
        start = self.find_open_range(size)
        if start is None:
            raise RangeNotFoundError(f"Not enough space for a {size}-wide range")

        rng = Range(
            range_id=self._last_id + 1,
            owner=owner,
            comment=comment,
            lower=start,
            upper=start + size,
        )
        self._insert(rng)
        self._last_id = rng.range_id
        logger.info("Allocated range [%d..%d) for %r", rng.lower, rng.upper, owner)
        return rng

    def _insert(self, rng: Range) -> None:
        self._by_id[rng.range_id] = rng
        self._by_name[rng.owner] = rng

    # -- Queries ---------------------------------------------------------------

    def find_open_range(self, size: int) -> int | None:
        """Return the lowest start of a free *size*-wide interval, or None."""
        if size < 0:
            raise InvalidArgumentError("Invalid negative range width")

        start = 0
        for rng in self.ranges_by_lower_bound():
            end = start + size
            if end <= rng.lower and end <= self.max_bound:
                return start
            start = rng.upper

        if start + size <= self.max_bound:
            return start
        return None

    def ranges_by_id(self) -> list[Range]:
        return sorted(self._by_id.values(), key=lambda r: r.range_id)

    def ranges_by_lower_bound(self) -> list[Range]:
        return sorted(self._by_id.values(), key=lambda r: r.lower)

    def unallocated_ranges(self) -> list[Range]:
        """Return the gaps between allocated ranges, sorted by lower bound."""
        gaps: list[Range] = []
        start = 0
        for rng in self.ranges_by_lower_bound():
            if rng.lower > start:
                gaps.append(unallocated_range(start, rng.lower))
            start = rng.upper
        if start < self.max_bound:
            gaps.append(unallocated_range(start, self.max_bound))
        return gaps

    def find_range(self, owner: str) -> Range | None:
        """Return the range last registered for *owner*, or None."""
        return self._by_name.get(owner)

    def find_any_range(self, owners: Iterable[str]) -> Range | None:
        """Return the range of the first owner in *owners* that has one."""
        for owner in owners:
            rng = self._by_name.get(owner)
            if rng is not None:
                return rng
        return None

    def get_range(self, owner: str) -> Range:
        """Like :meth:`find_range`, but raise RangeNotFoundError on a miss."""
        rng = self._by_name.get(owner)
        if rng is None:
            raise RangeNotFoundError(f"No range '{owner}' found in ID policy", [owner])
        return rng

    def get_any_range(self, owners: Iterable[str]) -> Range:
        """Like :meth:`find_any_range`, but raise RangeNotFoundError on a miss."""
        owners = list(owners)
        rng = self.find_any_range(owners)
        if rng is None:
            raise RangeNotFoundError("No suitable range found in ID policy", owners)
        return rng
