"""Identifier generators bound to one ID range."""

from idslicer.generators.base import IDGenerator
from idslicer.generators.randomized import RandomizedIDGenerator
from idslicer.generators.sequential import SequentialIDGenerator
from idslicer.generators.shortform import ShortFormIDGenerator, shorten_id

__all__ = [
    "IDGenerator",
    "RandomizedIDGenerator",
    "SequentialIDGenerator",
    "ShortFormIDGenerator",
    "shorten_id",
]
