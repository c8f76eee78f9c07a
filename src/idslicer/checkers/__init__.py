"""Existence checkers used to avoid minting IDs already in use."""

from idslicer.checkers.existence import (
    CallableExistenceChecker,
    ExistenceChecker,
    NullExistenceChecker,
    OntologyExistenceChecker,
    SetExistenceChecker,
)

__all__ = [
    "CallableExistenceChecker",
    "ExistenceChecker",
    "NullExistenceChecker",
    "OntologyExistenceChecker",
    "SetExistenceChecker",
]
