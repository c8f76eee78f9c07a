"""Writer for ID range policy files.

Policy files are meant to be read and edited by humans, so the Manchester
syntax is emitted directly rather than through a generic OWL serializer.
Output is deterministic: ranges are written in ascending range-id order.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import TextIO

from idslicer.core.registry import Registry
from idslicer.policy.constants import (
    ALLOCATEDTO_IRI,
    IDDIGITS_IRI,
    IDPREFIX_IRI,
    IDSFOR_IRI,
    POLICY_SUFFIX,
    RDFS_COMMENT_IRI,
)

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def policy_iri(registry: Registry) -> str:
    """IRI of the policy document, e.g. ``.../obo/myont/myont-idranges.owl``."""
    return f"{registry.name}/{registry.prefix_name.lower()}{POLICY_SUFFIX}"


class PolicyWriter:
    """Serializes a :class:`~idslicer.core.registry.Registry` to Manchester syntax."""

    def render(self, registry: Registry) -> str:
        """Return the policy document for *registry* as a string."""
        out = io.StringIO()
        self._write_to(registry, out)
        return out.getvalue()

    def write(self, registry: Registry, target: Path | str | TextIO) -> None:
        """Write *registry* to a file path or an open text stream.

        Files are replaced atomically: the document is written to a temporary
        file in the same directory, then moved over the target.
        """
        if not isinstance(target, (str, Path)):
            self._write_to(registry, target)
            target.flush()
            return

        path = Path(target)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.parent / f"{path.name}.tmp"
        content = self.render(registry)
        fd = os.open(str(tmp_path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o644)
        try:
            os.write(fd, content.encode("utf-8"))
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_path, path)
        logger.info("Wrote ID policy with %d ranges to %s", len(registry), path)

    def _write_to(self, registry: Registry, out: TextIO) -> None:
        prefixes = [
            ("idrange", f"{registry.name}/idrange/"),
            ("allocatedto", ALLOCATEDTO_IRI),
            ("iddigits", IDDIGITS_IRI),
            ("idprefix", IDPREFIX_IRI),
            ("idsfor", IDSFOR_IRI),
            ("comment", RDFS_COMMENT_IRI),
        ]
        for name, iri in prefixes:
            out.write(f"Prefix: {name}: <{iri}>\n")

        out.write("\n")
        out.write(f"Ontology: <{policy_iri(registry)}>\n")
        out.write("\n")
        out.write("Annotations:\n")
        out.write(f"    idprefix: {_quote(registry.prefix)},\n")
        out.write(f"    iddigits: {registry.width},\n")
        out.write(f"    idsfor: {_quote(registry.prefix_name)}\n")
        out.write("\n")
        out.write(
            "\n\n".join(
                f"AnnotationProperty: {name}:"
                for name in ("allocatedto", "idprefix", "iddigits", "idsfor", "comment")
            )
        )
        out.write("\n")

        for rng in registry.ranges_by_id():
            has_comment = rng.comment is not None
            out.write(f"\nDatatype: idrange:{rng.range_id}\n")
            out.write("    Annotations:\n")
            out.write(f"        allocatedto: {_quote(rng.owner)}{',' if has_comment else ''}\n")
            if has_comment:
                out.write(f"        comment: {_quote(rng.comment)}\n")
            out.write("    EquivalentTo:\n")
            out.write(f"        xsd:integer[>= {rng.lower}, < {rng.upper}]\n")
