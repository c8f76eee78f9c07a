"""The ``policy`` command: list, allocate and save ID ranges."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import click

from idslicer.cli.common import fail
from idslicer.core.errors import IDSlicerError, InvalidPolicyError
from idslicer.core.models import Range, ToolConfig
from idslicer.core.registry import Registry
from idslicer.policy.reader import PolicyReader
from idslicer.policy.writer import PolicyWriter


@dataclass
class PolicyOptions:
    policy_file: Path
    project_id: str | None = None
    output: Path | None = None
    save: bool = False
    new_range: str | None = None
    size: int = 10000
    comment: str | None = None
    show_list: bool = False
    show_unallocated: bool = False
    min_size: int = 10

    @property
    def output_file(self) -> Path:
        return self.output if self.output is not None else self.policy_file


def run_policy(config: ToolConfig, opts: PolicyOptions) -> None:
    """Run the policy command with already-parsed options."""
    registry = _load(config, opts)
    write = opts.save or opts.output is not None or opts.project_id is not None

    if opts.new_range is not None:
        try:
            rng = registry.add_allocated(opts.new_range, opts.comment, opts.size)
        except IDSlicerError as e:
            fail(f"Cannot allocate range: {e}")
        click.echo(f'Allocated range [{rng.lower}..{rng.upper}) for user "{rng.owner}"', err=True)
        write = True

    if opts.show_list:
        for rng in list_ranges(registry, opts.show_unallocated, opts.min_size):
            click.echo(format_range(rng))

    if write:
        try:
            PolicyWriter().write(registry, opts.output_file)
        except OSError as e:
            fail(f"Cannot write policy file: {e}")


def _load(config: ToolConfig, opts: PolicyOptions) -> Registry:
    if opts.project_id is not None:
        if opts.policy_file.exists():
            fail(f"Refusing to overwrite existing policy file {opts.policy_file}")
        try:
            return Registry.for_obo(opts.project_id, config.width)
        except IDSlicerError as e:
            fail(str(e))

    try:
        return PolicyReader().read(opts.policy_file)
    except OSError as e:
        fail(f"Cannot read policy file: {e}")
    except InvalidPolicyError as e:
        fail(f"Invalid ID range policy: {e}")


def list_ranges(registry: Registry, show_unallocated: bool, min_size: int) -> list[Range]:
    """Ranges sorted by lower bound, optionally with the gaps between them."""
    ranges = registry.ranges_by_lower_bound()
    if show_unallocated:
        ranges.extend(registry.unallocated_ranges())
        ranges.sort(key=lambda r: r.lower)
    return [r for r in ranges if r.size >= min_size]


def format_range(rng: Range) -> str:
    return f"{rng.owner}: [{rng.lower}..{rng.upper})"
