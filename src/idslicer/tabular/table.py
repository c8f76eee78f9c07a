"""Delimited tables (TSV/CSV) into which generated IDs are injected.

A table is a block of ``#`` comment lines followed by a header row and data
rows. Comments are kept as-is and written back in front of the header.
All cells are read as strings, and empty cells stay empty strings. Header
names are kept as written, duplicates included.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import TextIO

import pandas as pd

from idslicer.core.errors import InvalidArgumentError
from idslicer.generators.base import IDGenerator

logger = logging.getLogger(__name__)

# Number of header characters inspected to guess the separator.
SNIFF_LENGTH = 64


class SeparatorMode(StrEnum):
    auto = "auto"
    tab = "tab"
    comma = "comma"
    colon = "colon"
    semicolon = "semicolon"

    @property
    def char(self) -> str | None:
        return _SEPARATOR_CHARS.get(self)


_SEPARATOR_CHARS = {
    SeparatorMode.tab: "\t",
    SeparatorMode.comma: ",",
    SeparatorMode.colon: ":",
    SeparatorMode.semicolon: ";",
}


@dataclass
class Table:
    """Comments, header and rows of a delimited file."""

    frame: pd.DataFrame
    separator: str
    comments: list[str] = field(default_factory=list)

    @property
    def header(self) -> list[str]:
        return [str(c) for c in self.frame.columns]

    def __len__(self) -> int:
        return len(self.frame)


def detect_separator(text: str) -> str:
    """Return the first tab or comma in the start of *text*; tab by default."""
    for char in text[:SNIFF_LENGTH]:
        if char in "\t,":
            return char
    return "\t"


def _split_comments(text: str) -> tuple[list[str], str]:
    comments: list[str] = []
    lines = text.splitlines(keepends=True)
    i = 0
    while i < len(lines) and lines[i].startswith("#"):
        comments.append(lines[i][1:].rstrip("\r\n"))
        i += 1
    return comments, "".join(lines[i:])


def parse_table(text: str, separator: str | None = None) -> Table:
    """Parse the content of a delimited file.

    Raises:
        InvalidArgumentError: If there is no header row.
    """
    comments, body = _split_comments(text)
    sep = separator or detect_separator(body)
    try:
        frame = pd.read_csv(
            io.StringIO(body),
            sep=sep,
            header=None,
            dtype=str,
            keep_default_na=False,
            na_filter=False,
        )
    except pd.errors.EmptyDataError:
        raise InvalidArgumentError("Missing header row") from None

    # The header row is read as data so repeated names are kept verbatim.
    frame = frame.fillna("")
    header = list(frame.iloc[0])
    frame = frame.iloc[1:].reset_index(drop=True)
    frame.columns = header
    logger.debug("Read table with %d rows, %d columns, separator %r", len(frame), len(frame.columns), sep)
    return Table(frame=frame, separator=sep, comments=comments)


def read_table(source: Path | str | TextIO, separator: str | None = None) -> Table:
    """Read a delimited table from a path or an open text stream."""
    if isinstance(source, (str, Path)):
        text = Path(source).read_text(encoding="utf-8")
    else:
        text = source.read()
    return parse_table(text, separator)


def write_table(table: Table, target: Path | str | TextIO, separator: str | None = None) -> None:
    """Write *table* (comments first) to a path or an open text stream."""
    sep = separator or table.separator
    out = io.StringIO()
    for comment in table.comments:
        out.write(f"#{comment}\n")
    table.frame.to_csv(out, sep=sep, index=False, lineterminator="\n")

    if isinstance(target, (str, Path)):
        Path(target).write_text(out.getvalue(), encoding="utf-8")
    else:
        target.write(out.getvalue())
        target.flush()


def resolve_column(table: Table, column: str | None) -> int:
    """Map a 1-based column index or a header name to a 0-based index.

    With no *column*, the first column is used.

    Raises:
        InvalidArgumentError: If the column does not exist.
    """
    if column is None:
        index = 0
    elif column.isdigit():
        index = int(column) - 1
    else:
        try:
            index = table.header.index(column)
        except ValueError:
            index = -1

    if index < 0 or index >= len(table.header):
        raise InvalidArgumentError(f"Invalid column name or index: {column}")
    return index


def inject_ids(table: Table, column: int, generator: IDGenerator, overwrite: bool = True) -> int:
    """Fill *column* of every data row with a new ID.

    With ``overwrite=False``, only empty cells are filled. Returns the number
    of IDs injected.

    Raises:
        IDSpaceExhaustedError: If the generator runs out of IDs.
    """
    injected = 0
    for row in range(len(table.frame)):
        if overwrite or table.frame.iat[row, column] == "":
            table.frame.iat[row, column] = generator.next_id()
            injected += 1
    logger.info("Injected %d IDs into column %r", injected, table.header[column])
    return injected
