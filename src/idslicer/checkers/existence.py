"""Existence checkers: "is this identifier already in use?".

Generators only depend on the :class:`ExistenceChecker` protocol, so any
backing store (an in-memory set, an ontology, a remote service) can be
plugged in without touching the generation logic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Protocol, runtime_checkable

import rdflib
from rdflib import OWL, RDF, RDFS, URIRef

logger = logging.getLogger(__name__)


@runtime_checkable
class ExistenceChecker(Protocol):
    """Answers whether a candidate identifier is already in use."""

    def exists(self, identifier: str) -> bool: ...


class NullExistenceChecker:
    """Checker for which no identifier exists."""

    def exists(self, identifier: str) -> bool:  # noqa: ARG002
        return False


class SetExistenceChecker:
    """Checker backed by an in-memory set of identifiers."""

    def __init__(self, identifiers: Iterable[str] = ()) -> None:
        self._identifiers = set(identifiers)

    def add(self, identifier: str) -> None:
        self._identifiers.add(identifier)

    def exists(self, identifier: str) -> bool:
        return identifier in self._identifiers

    def __len__(self) -> int:
        return len(self._identifiers)


class CallableExistenceChecker:
    """Adapts a plain ``str -> bool`` function to the checker protocol."""

    def __init__(self, func: Callable[[str], bool]) -> None:
        self._func = func

    def exists(self, identifier: str) -> bool:
        return bool(self._func(identifier))


# Predicates whose objects are entities used by an axiom. Annotation values
# (labels, seeAlso, comments, ...) are not part of the signature.
_AXIOM_PREDICATES = frozenset(
    {
        RDF.type,
        RDF.first,
        RDFS.subClassOf,
        RDFS.subPropertyOf,
        RDFS.domain,
        RDFS.range,
        OWL.equivalentClass,
        OWL.equivalentProperty,
        OWL.disjointWith,
        OWL.inverseOf,
        OWL.onProperty,
        OWL.onClass,
        OWL.someValuesFrom,
        OWL.allValuesFrom,
        OWL.hasValue,
        OWL.complementOf,
        OWL.propertyChainAxiom,
    }
)


class OntologyExistenceChecker:
    """Checker backed by the signature of an RDF ontology.

    An identifier exists when its IRI is the subject of a triple, or the
    object of an axiom triple (superclass, restriction filler, property
    domain, type of an individual, ...). The graph is read once, at
    construction time.
    """

    def __init__(self, graph: rdflib.Graph) -> None:
        entities = {str(s) for s in graph.subjects() if isinstance(s, URIRef)}
        for _, predicate, obj in graph:
            if predicate in _AXIOM_PREDICATES and isinstance(obj, URIRef):
                entities.add(str(obj))
        self._entities = entities

    @classmethod
    def from_file(cls, path: Path, rdf_format: str | None = None) -> OntologyExistenceChecker:
        """Parse *path* (format guessed from its extension unless given)."""
        graph = rdflib.Graph()
        graph.parse(str(path), format=rdf_format)
        logger.info("Loaded %d triples from ontology %s", len(graph), path)
        return cls(graph)

    def exists(self, identifier: str) -> bool:
        return identifier in self._entities

    def __len__(self) -> int:
        return len(self._entities)
