"""Reader for ID range policy files.

Policy files are OWL ontologies in Manchester syntax, as maintained by OBO
ontologies (``myont-idranges.owl``). Only the constructs such files use are
understood: prefix declarations, ontology annotations, and ``Datatype:``
frames carrying an ``allocatedto`` annotation and an ``xsd:integer`` facet
restriction. Other frames are skipped.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from idslicer.core.errors import IDSlicerError, InvalidPolicyError
from idslicer.core.registry import DEFAULT_WIDTH, Registry
from idslicer.policy.constants import (
    ALLOCATEDTO_IRI,
    BUILTIN_PREFIXES,
    IDDIGITS_IRI,
    IDPREFIX_IRI,
    IDSFOR_IRI,
    POLICY_SUFFIX,
    RDFS_COMMENT_IRI,
)

logger = logging.getLogger(__name__)

_FRAME_KEYWORDS = frozenset(
    {
        "Prefix:",
        "Ontology:",
        "Import:",
        "AnnotationProperty:",
        "Datatype:",
        "Class:",
        "ObjectProperty:",
        "DataProperty:",
        "Individual:",
        "DisjointClasses:",
        "EquivalentClasses:",
        "DisjointProperties:",
        "EquivalentProperties:",
        "SameIndividual:",
        "DifferentIndividuals:",
    }
)

_SECTION_KEYWORDS = frozenset(
    {
        "Annotations:",
        "EquivalentTo:",
        "SubClassOf:",
        "DisjointWith:",
        "DisjointUnionOf:",
        "HasKey:",
        "Domain:",
        "Range:",
        "Characteristics:",
        "SubPropertyOf:",
        "InverseOf:",
        "SubPropertyChain:",
        "Types:",
        "Facts:",
        "SameAs:",
        "DifferentFrom:",
    }
)

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<comment>\#[^\n]*)
    | (?P<iri><[^>\s]*>)
    | (?P<string>"(?:[^"\\]|\\.)*"(?:\^\^(?:<[^>\s]*>|[A-Za-z_][\w\-.]*:[\w\-.]*)|@[A-Za-z\-]+)?)
    | (?P<number>[-+]?\d+)
    | (?P<op>>=|<=|>|<)
    | (?P<punct>[\[\](),])
    | (?P<name>[A-Za-z_:][\w\-.:/]*)
    """,
    re.VERBOSE,
)


@dataclass
class _Token:
    kind: str
    text: str
    line: int

    @property
    def is_keyword(self) -> bool:
        return self.kind == "name" and (
            self.text in _FRAME_KEYWORDS or self.text in _SECTION_KEYWORDS
        )

    @property
    def is_frame(self) -> bool:
        return self.kind == "name" and self.text in _FRAME_KEYWORDS


@dataclass
class _Literal:
    """A literal annotation value (string or integer)."""

    value: str
    is_integer: bool = False


@dataclass
class _Annotation:
    property: str
    value: _Literal | str  # str when the value is an IRI


@dataclass
class _DatatypeFrame:
    iri: str
    annotations: list[_Annotation] = field(default_factory=list)
    restrictions: list[tuple[str, int]] = field(default_factory=list)


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    pos = 0
    line = 1
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        if m is None:
            raise InvalidPolicyError(
                f"Cannot load ID range policy: unexpected character {text[pos]!r} at line {line}"
            )
        kind = m.lastgroup or ""
        if kind not in ("space", "comment"):
            tokens.append(_Token(kind, m.group(), line))
        line += m.group().count("\n")
        pos = m.end()
    return tokens


def _unescape(quoted: str) -> str:
    body = quoted[1 : quoted.rindex('"')]
    return re.sub(r"\\(.)", r"\1", body)


class _Parser:
    """Recursive-descent parser over the token stream of one document."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0
        self.prefixes: dict[str, str] = dict(BUILTIN_PREFIXES)
        self.ontology_iri: str | None = None
        self.annotations: list[_Annotation] = []
        self.datatypes: list[_DatatypeFrame] = []

    # -- Token helpers -------------------------------------------------------

    def _peek(self) -> _Token | None:
        return self._tokens[self._pos] if self._pos < len(self._tokens) else None

    def _next(self) -> _Token:
        tok = self._peek()
        if tok is None:
            raise InvalidPolicyError("Cannot load ID range policy: unexpected end of file")
        self._pos += 1
        return tok

    def _expect(self, kind: str, text: str | None = None) -> _Token:
        tok = self._next()
        if tok.kind != kind or (text is not None and tok.text != text):
            expected = text or kind
            raise InvalidPolicyError(
                f"Cannot load ID range policy: expected {expected} at line {tok.line}, "
                f"got {tok.text!r}"
            )
        return tok

    def _at_keyword(self) -> bool:
        tok = self._peek()
        return tok is None or tok.is_keyword

    def _skip_to_frame(self) -> None:
        while (tok := self._peek()) is not None and not tok.is_frame:
            self._pos += 1

    def _skip_to_keyword(self) -> None:
        while not self._at_keyword():
            self._pos += 1

    def expand(self, tok: _Token) -> str:
        """Expand an IRI or CURIE token into a full IRI."""
        if tok.kind == "iri":
            return tok.text[1:-1]
        prefix, sep, local = tok.text.partition(":")
        if not sep:
            raise InvalidPolicyError(f"Invalid IRI {tok.text!r} at line {tok.line}")
        try:
            return self.prefixes[prefix + ":"] + local
        except KeyError:
            raise InvalidPolicyError(
                f"Undeclared prefix {prefix + ':'!r} at line {tok.line}"
            ) from None

    # -- Grammar -------------------------------------------------------------

    def parse(self) -> None:
        while (tok := self._peek()) is not None:
            if tok.text == "Prefix:":
                self._parse_prefix()
            elif tok.text == "Ontology:":
                self._parse_ontology()
            elif tok.text == "Datatype:":
                self._parse_datatype()
            elif tok.is_frame:
                self._pos += 1
                self._skip_to_frame()
            else:
                raise InvalidPolicyError(
                    f"Cannot load ID range policy: unexpected {tok.text!r} at line {tok.line}"
                )

    def _parse_prefix(self) -> None:
        self._next()
        name = self._expect("name")
        if not name.text.endswith(":") or name.text.count(":") != 1:
            raise InvalidPolicyError(f"Invalid prefix name {name.text!r} at line {name.line}")
        iri = self._expect("iri")
        self.prefixes[name.text] = iri.text[1:-1]

    def _parse_ontology(self) -> None:
        self._next()
        tok = self._peek()
        if tok is not None and tok.kind == "iri":
            self.ontology_iri = self.expand(self._next())
            # Optional version IRI.
            tok = self._peek()
            if tok is not None and tok.kind == "iri":
                self._next()

        while (tok := self._peek()) is not None and not tok.is_frame:
            if tok.text == "Annotations:":
                self._next()
                self.annotations.extend(self._parse_annotation_list())
            else:
                self._next()
                self._skip_to_keyword()

    def _parse_annotation_list(self) -> list[_Annotation]:
        annotations: list[_Annotation] = []
        while True:
            # Nested annotations on annotations are not relevant to policies.
            while (tok := self._peek()) is not None and tok.text == "Annotations:":
                self._next()
                self._parse_annotation_list()
            prop = self._next()
            if prop.kind not in ("name", "iri") or prop.is_keyword:
                raise InvalidPolicyError(
                    f"Invalid annotation property {prop.text!r} at line {prop.line}"
                )
            annotations.append(_Annotation(self.expand(prop), self._parse_annotation_value()))
            tok = self._peek()
            if tok is None or tok.text != ",":
                return annotations
            self._next()

    def _parse_annotation_value(self) -> _Literal | str:
        tok = self._next()
        if tok.kind == "string":
            literal = _Literal(_unescape(tok.text))
            if tok.text.endswith(("xsd:integer", "XMLSchema#integer>")):
                literal.is_integer = True
            return literal
        if tok.kind == "number":
            return _Literal(tok.text, is_integer=True)
        if tok.kind in ("name", "iri") and not tok.is_keyword:
            return self.expand(tok)
        raise InvalidPolicyError(f"Invalid annotation value {tok.text!r} at line {tok.line}")

    def _parse_datatype(self) -> None:
        self._next()
        frame = _DatatypeFrame(self.expand(self._next()))
        while (tok := self._peek()) is not None and not tok.is_frame:
            self._next()
            if tok.text == "Annotations:":
                frame.annotations.extend(self._parse_annotation_list())
            elif tok.text == "EquivalentTo:":
                frame.restrictions.extend(self._parse_restriction())
                self._skip_to_keyword()
            else:
                self._skip_to_keyword()
        self.datatypes.append(frame)

    def _parse_restriction(self) -> list[tuple[str, int]]:
        tok = self._peek()
        if tok is None or tok.kind != "name" or tok.is_keyword:
            return []
        self._next()
        tok = self._peek()
        if tok is None or tok.text != "[":
            return []
        self._next()
        facets: list[tuple[str, int]] = []
        while True:
            op = self._expect("op")
            value = self._next()
            if value.kind == "number":
                number = value.text
            elif value.kind == "string":
                number = _unescape(value.text)
            else:
                raise InvalidPolicyError(f"Invalid facet value {value.text!r} at line {value.line}")
            try:
                facets.append((op.text, int(number)))
            except ValueError:
                raise InvalidPolicyError(
                    f"Invalid facet value {value.text!r} at line {value.line}"
                ) from None
            sep = self._expect("punct")
            if sep.text == "]":
                return facets
            if sep.text != ",":
                raise InvalidPolicyError(f"Unexpected {sep.text!r} at line {sep.line}")


def _bounds(restrictions: list[tuple[str, int]]) -> tuple[int, int]:
    lower = upper = -1
    for op, value in restrictions:
        if op == ">=":
            lower = value
        elif op == ">":
            lower = value + 1
        elif op == "<":
            upper = value
        elif op == "<=":
            upper = value + 1
    return lower, upper


class PolicyReader:
    """Builds a :class:`~idslicer.core.registry.Registry` from a policy file."""

    def read(self, path: Path | str) -> Registry:
        """Read and parse the policy in *path*.

        Raises:
            OSError: If the file cannot be read.
            InvalidPolicyError: If the file does not hold a valid policy.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        registry = self.parse(text)
        logger.info("Loaded ID policy %s with %d ranges from %s", registry.name, len(registry), path)
        return registry

    def parse(self, text: str) -> Registry:
        """Parse a policy from its Manchester-syntax *text*."""
        parser = _Parser(_tokenize(text))
        parser.parse()

        name = self._policy_name(parser.ontology_iri)
        prefix: str | None = None
        prefix_name: str | None = None
        width = DEFAULT_WIDTH
        for annot in parser.annotations:
            if not isinstance(annot.value, _Literal):
                continue
            if annot.property == IDPREFIX_IRI:
                prefix = annot.value.value
            elif annot.property == IDSFOR_IRI:
                prefix_name = annot.value.value
            elif annot.property == IDDIGITS_IRI:
                try:
                    width = int(annot.value.value)
                except ValueError:
                    raise InvalidPolicyError(f"Invalid ID width: {annot.value.value}") from None

        if prefix is None:
            raise InvalidPolicyError("Missing IRI prefix")
        if prefix_name is None:
            raise InvalidPolicyError("Missing prefix name")

        try:
            registry = Registry(name, prefix, prefix_name, width)
            for frame in parser.datatypes:
                self._add_range(registry, frame)
        except InvalidPolicyError:
            raise
        except IDSlicerError as e:
            raise InvalidPolicyError(str(e)) from e
        return registry

    @staticmethod
    def _policy_name(ontology_iri: str | None) -> str:
        if ontology_iri is None:
            raise InvalidPolicyError("Missing policy name")
        base, slash, _ = ontology_iri.rpartition("/")
        if not ontology_iri.endswith(POLICY_SUFFIX) or not slash:
            raise InvalidPolicyError(f"Invalid policy name: {ontology_iri}")
        return base

    @staticmethod
    def _add_range(registry: Registry, frame: _DatatypeFrame) -> None:
        owner: str | None = None
        comment: str | None = None
        for annot in frame.annotations:
            if not isinstance(annot.value, _Literal):
                continue
            if annot.property == ALLOCATEDTO_IRI:
                owner = annot.value.value
            elif annot.property == RDFS_COMMENT_IRI:
                comment = annot.value.value

        if owner is None:
            return

        _, slash, local = frame.iri.rpartition("/")
        if not slash or not (local.isascii() and local.isdigit()):
            raise InvalidPolicyError(f"Invalid range ID: {frame.iri}")
        range_id = int(local)

        lower, upper = _bounds(frame.restrictions)
        if lower >= 0:
            registry.add_explicit(range_id, owner, comment, lower, upper)
