"""The ``tsv`` command: fill a table column with newly minted IDs."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from idslicer.checkers.existence import (
    ExistenceChecker,
    NullExistenceChecker,
    OntologyExistenceChecker,
)
from idslicer.cli.common import fail
from idslicer.core.errors import IDSlicerError, IDSpaceExhaustedError
from idslicer.core.models import ToolConfig
from idslicer.core.registry import check_width
from idslicer.generators.base import IDGenerator
from idslicer.generators.randomized import RandomizedIDGenerator
from idslicer.generators.sequential import SequentialIDGenerator
from idslicer.generators.shortform import ShortFormIDGenerator
from idslicer.policy.helper import get_range
from idslicer.tabular.table import (
    SeparatorMode,
    inject_ids,
    read_table,
    resolve_column,
    write_table,
)

logger = logging.getLogger(__name__)

# Size of the ID space used with --prefix when no --max-id is given.
DEFAULT_SPAN = 1000


@dataclass
class TSVOptions:
    table_file: str = "-"
    input_sep: str = "auto"
    output: str = "-"
    output_sep: str = "auto"
    prefix: str | None = None
    width: int | None = None
    min_id: int | None = None
    max_id: int | None = None
    policy_file: Path | None = None
    range_user: str | None = None
    shorten_id: bool = False
    randomized: bool = False
    seed: int | None = None
    column: str | None = None
    overwrite: bool = True
    ontology: Path | None = None


def run_tsv(config: ToolConfig, opts: TSVOptions) -> None:
    """Read the table, inject IDs, and write the result."""
    try:
        if opts.table_file == "-":
            table = read_table(sys.stdin, SeparatorMode(opts.input_sep.lower()).char)
        else:
            table = read_table(Path(opts.table_file), SeparatorMode(opts.input_sep.lower()).char)
    except (OSError, IDSlicerError) as e:
        fail(f"Cannot read {opts.table_file}: {e}")

    try:
        column = resolve_column(table, opts.column)
    except IDSlicerError as e:
        fail(str(e))

    generator = build_generator(config, opts, build_checker(opts))
    try:
        inject_ids(table, column, generator, overwrite=opts.overwrite)
    except IDSpaceExhaustedError as e:
        fail(f"Cannot generate ID: {e}")

    output_sep = SeparatorMode(opts.output_sep.lower()).char
    try:
        if opts.output == "-":
            write_table(table, sys.stdout, output_sep)
        else:
            write_table(table, Path(opts.output), output_sep)
    except OSError as e:
        fail(f"Cannot write to {opts.output}: {e}")


def build_checker(opts: TSVOptions) -> ExistenceChecker:
    """Existence checker from --ontology, or one that knows no ID."""
    if opts.ontology is None:
        return NullExistenceChecker()
    try:
        return OntologyExistenceChecker.from_file(opts.ontology)
    except Exception as e:  # noqa: BLE001
        fail(f"Cannot read ontology {opts.ontology}: {e}")


def build_generator(config: ToolConfig, opts: TSVOptions, checker: ExistenceChecker) -> IDGenerator:
    """Generator for either an explicit --prefix/--min-id span or a policy range."""
    if opts.prefix is not None:
        if opts.min_id is None:
            fail("Missing --min-id option, required with --prefix")
        try:
            width = check_width(opts.width if opts.width is not None else config.width)
        except IDSlicerError as e:
            fail(str(e))
        fmt = f"{opts.prefix.replace('%', '%%')}%0{width}d"
        lower = opts.min_id
        upper = opts.max_id if opts.max_id is not None else lower + DEFAULT_SPAN
    else:
        policy_file = opts.policy_file or config.policy_file
        try:
            registry, rng = get_range(opts.range_user, config.default_ranges, policy_file)
        except (OSError, IDSlicerError) as e:
            fail(f"Cannot use ID policy file: {e}")
        logger.info("Using range %s", rng)
        fmt, lower, upper = registry.id_format, rng.lower, rng.upper

    seed = opts.seed if opts.seed is not None else config.random_seed
    try:
        if opts.randomized:
            generator: IDGenerator = RandomizedIDGenerator(fmt, lower, upper, checker, seed=seed)
        else:
            generator = SequentialIDGenerator(fmt, lower, upper, checker)
    except IDSlicerError as e:
        fail(str(e))

    return ShortFormIDGenerator(generator) if opts.shorten_id else generator
