"""IRIs of the annotation properties that describe an ID range policy."""

from __future__ import annotations

IDPREFIX_IRI = "http://purl.obolibrary.org/obo/IAO_0000599"
"""IRI prefix of the IDs minted under the policy."""

IDSFOR_IRI = "http://purl.obolibrary.org/obo/IAO_0000598"
"""Prefix name of the policy."""

IDDIGITS_IRI = "http://purl.obolibrary.org/obo/IAO_0000596"
"""Number of digits in the numeric part of IDs."""

ALLOCATEDTO_IRI = "http://purl.obolibrary.org/obo/IAO_0000597"
"""Owner of an ID range."""

RDFS_COMMENT_IRI = "http://www.w3.org/2000/01/rdf-schema#comment"

POLICY_SUFFIX = "-idranges.owl"

# Prefixes every Manchester-syntax document may use without declaring them.
BUILTIN_PREFIXES: dict[str, str] = {
    "rdf:": "http://www.w3.org/1999/02/22-rdf-syntax-ns#",
    "rdfs:": "http://www.w3.org/2000/01/rdf-schema#",
    "xsd:": "http://www.w3.org/2001/XMLSchema#",
    "owl:": "http://www.w3.org/2002/07/owl#",
}
