"""Injection of generated IDs into delimited tables."""

from idslicer.tabular.table import (
    SeparatorMode,
    Table,
    detect_separator,
    inject_ids,
    parse_table,
    read_table,
    resolve_column,
    write_table,
)

__all__ = [
    "SeparatorMode",
    "Table",
    "detect_separator",
    "inject_ids",
    "parse_table",
    "read_table",
    "resolve_column",
    "write_table",
]
