"""Tests for the existence checkers."""

from __future__ import annotations

import rdflib

from idslicer.checkers import (
    CallableExistenceChecker,
    ExistenceChecker,
    NullExistenceChecker,
    OntologyExistenceChecker,
    SetExistenceChecker,
)

ONTOLOGY_TTL = """\
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix obo: <http://purl.obolibrary.org/obo/> .

obo:myont.owl a owl:Ontology .

obo:MYONT_0000001 a owl:Class ;
    rdfs:label "first class" .

obo:MYONT_0000002 a owl:Class ;
    rdfs:subClassOf obo:MYONT_0000001 .

obo:MYONT_0000010 a owl:ObjectProperty .
"""


REFERENCES_TTL = """\
@prefix owl: <http://www.w3.org/2002/07/owl#> .
@prefix rdfs: <http://www.w3.org/2000/01/rdf-schema#> .
@prefix ex: <https://example.org/ids/> .

ex:A a owl:Class ;
    rdfs:subClassOf ex:B ;
    rdfs:subClassOf [ a owl:Restriction ; owl:onProperty ex:P ; owl:someValuesFrom ex:C ] ;
    rdfs:seeAlso ex:Doc .

ex:Q rdfs:subPropertyOf ex:R ;
    rdfs:domain ex:D .

ex:ind1 a ex:A .
"""


class TestProtocol:
    def test_all_checkers_satisfy_protocol(self):
        graph = rdflib.Graph()
        for checker in (
            NullExistenceChecker(),
            SetExistenceChecker(),
            CallableExistenceChecker(lambda _: True),
            OntologyExistenceChecker(graph),
        ):
            assert isinstance(checker, ExistenceChecker)


class TestSimpleCheckers:
    def test_null_checker(self):
        assert not NullExistenceChecker().exists("anything")

    def test_set_checker(self):
        checker = SetExistenceChecker(["a", "b"])
        assert checker.exists("a")
        assert not checker.exists("c")
        checker.add("c")
        assert checker.exists("c")
        assert len(checker) == 3

    def test_callable_checker(self):
        checker = CallableExistenceChecker(lambda id_: id_.endswith("7"))
        assert checker.exists("EX_0000007")
        assert not checker.exists("EX_0000008")


class TestOntologyChecker:
    def test_from_file(self, tmp_path):
        path = tmp_path / "myont.ttl"
        path.write_text(ONTOLOGY_TTL)

        checker = OntologyExistenceChecker.from_file(path)
        assert checker.exists("http://purl.obolibrary.org/obo/MYONT_0000001")
        assert checker.exists("http://purl.obolibrary.org/obo/MYONT_0000002")
        assert checker.exists("http://purl.obolibrary.org/obo/MYONT_0000010")
        assert not checker.exists("http://purl.obolibrary.org/obo/MYONT_0000003")

    def test_explicit_format(self, tmp_path):
        path = tmp_path / "myont.data"
        path.write_text(ONTOLOGY_TTL)

        checker = OntologyExistenceChecker.from_file(path, rdf_format="turtle")
        assert checker.exists("http://purl.obolibrary.org/obo/MYONT_0000001")

    def test_annotation_values_not_counted(self):
        graph = rdflib.Graph()
        graph.add(
            (
                rdflib.URIRef("http://example.org/A"),
                rdflib.RDFS.seeAlso,
                rdflib.URIRef("http://example.org/B"),
            )
        )
        checker = OntologyExistenceChecker(graph)
        assert checker.exists("http://example.org/A")
        assert not checker.exists("http://example.org/B")
        assert len(checker) == 1

    def test_referenced_entities_count(self, tmp_path):
        path = tmp_path / "refs.ttl"
        path.write_text(REFERENCES_TTL)
        checker = OntologyExistenceChecker.from_file(path)
        for local in ("A", "B", "C", "P", "Q", "D", "R", "ind1"):
            assert checker.exists(f"https://example.org/ids/{local}"), local
        assert not checker.exists("https://example.org/ids/Doc")

    def test_blank_nodes_ignored(self):
        graph = rdflib.Graph()
        graph.add((rdflib.BNode(), rdflib.RDFS.label, rdflib.Literal("anonymous")))
        assert len(OntologyExistenceChecker(graph)) == 0
