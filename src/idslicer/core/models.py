"""Core domain models for idslicer.

Ranges are immutable pydantic models. The registry that owns them lives in
:mod:`idslicer.core.registry`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

UNALLOCATED_OWNER = "Unallocated"

# ---------------------------------------------------------------------------
# Ranges
# ---------------------------------------------------------------------------


class Range(BaseModel):
    """A half-open interval ``[lower, upper)`` of IDs allocated to one owner."""

    model_config = ConfigDict(frozen=True)

    range_id: int = Field(ge=0)
    owner: str = Field(min_length=1)
    comment: str | None = None
    lower: int
    upper: int

    @property
    def size(self) -> int:
        return self.upper - self.lower

    @property
    def is_unallocated(self) -> bool:
        return self.range_id == 0 and self.owner == UNALLOCATED_OWNER

    def overlaps(self, lower: int, upper: int) -> bool:
        """Return True if ``[lower, upper)`` intersects this range."""
        return not (upper <= self.lower or lower >= self.upper)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, int) and self.lower <= value < self.upper

    def __str__(self) -> str:
        return f"id={self.range_id}, name={self.owner}, bounds=[{self.lower}..{self.upper})"


def unallocated_range(lower: int, upper: int) -> Range:
    """Build the placeholder range used to describe a gap in a registry."""
    return Range(range_id=0, owner=UNALLOCATED_OWNER, lower=lower, upper=upper)


# ---------------------------------------------------------------------------
# Tool configuration
# ---------------------------------------------------------------------------


class ToolConfig(BaseModel):
    """User configuration for the idslicer command-line tools."""

    policy_file: str | None = None
    default_ranges: list[str] = Field(default_factory=lambda: ["idslicer"])
    width: int = 7
    range_size: int = 10000
    min_list_size: int = 10
    random_seed: int | None = None
