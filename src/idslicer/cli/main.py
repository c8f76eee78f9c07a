"""idslicer CLI entry point."""

from __future__ import annotations

from pathlib import Path

import click

_SEPARATORS = click.Choice(["auto", "tab", "comma", "colon", "semicolon"], case_sensitive=False)


@click.group()
@click.version_option(package_name="idslicer")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: ./idslicer.yaml if present).",
)
@click.option("--json-logs", is_flag=True, default=False, help="Output logs as JSON.")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Log level.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, json_logs: bool, log_level: str) -> None:
    """idslicer: allocate ID ranges and mint identifiers from them."""
    import yaml
    from pydantic import ValidationError

    from idslicer.cli.common import fail
    from idslicer.core.config import load_tool_config
    from idslicer.core.logging import configure_logging

    configure_logging(json_output=json_logs, level=log_level)
    try:
        ctx.obj = load_tool_config(config_path)
    except (ValidationError, yaml.YAMLError, OSError) as e:
        fail(f"Invalid configuration: {e}")


@cli.command()
@click.argument("policy_file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--init",
    "project_id",
    metavar="PROJECT",
    default=None,
    help="Start a new, empty OBO policy for PROJECT instead of reading FILE.",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the policy to FILE (implies --save). Default is the input file.",
)
@click.option(
    "-s",
    "--save",
    is_flag=True,
    default=False,
    help="Write the policy back. Implied by --output and by any edit.",
)
@click.option("--add-range", "new_range", metavar="USER", help="Allocate a new range to USER.")
@click.option("--size", type=int, default=None, help="Size of the range to allocate.")
@click.option("--comment", default=None, help="Comment for the new range.")
@click.option("-l", "--list", "show_list", is_flag=True, default=False, help="List the ranges.")
@click.option(
    "--show-unallocated",
    is_flag=True,
    default=False,
    help="When listing, also show unallocated ranges.",
)
@click.option(
    "--min-size",
    type=int,
    default=None,
    help="When listing, skip ranges smaller than N (0 shows everything).",
)
@click.pass_obj
def policy(
    config,
    policy_file: Path,
    project_id: str | None,
    output: Path | None,
    save: bool,
    new_range: str | None,
    size: int | None,
    comment: str | None,
    show_list: bool,
    show_unallocated: bool,
    min_size: int | None,
) -> None:
    """Inspect or edit the ID range policy in POLICY_FILE."""
    from idslicer.cli.policy_cmd import PolicyOptions, run_policy

    run_policy(
        config,
        PolicyOptions(
            policy_file=policy_file,
            project_id=project_id,
            output=output,
            save=save,
            new_range=new_range,
            size=size if size is not None else config.range_size,
            comment=comment,
            show_list=show_list,
            show_unallocated=show_unallocated,
            min_size=min_size if min_size is not None else config.min_list_size,
        ),
    )


@cli.command()
@click.argument("table_file", default="-", type=click.Path(dir_okay=False, allow_dash=True))
@click.option("--input-sep", type=_SEPARATORS, default="auto", help="Column separator of the input.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, allow_dash=True),
    default="-",
    help="Write the result to FILE instead of standard output.",
)
@click.option(
    "--output-sep",
    type=_SEPARATORS,
    default="auto",
    help="Column separator of the output (default: same as input).",
)
@click.option("-p", "--prefix", default=None, help="Prefix of the IDs to generate.")
@click.option("-w", "--width", type=int, default=None, help="Number of digits in generated IDs.")
@click.option("-m", "--min-id", type=int, default=None, help="Smallest ID to generate.")
@click.option(
    "-M",
    "--max-id",
    type=int,
    default=None,
    help="Upper bound (exclusive) of generated IDs (default: --min-id + 1000).",
)
@click.option(
    "-P",
    "--policy",
    "policy_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Use the ID policy in FILE.",
)
@click.option("-r", "--range", "range_user", default=None, help="Use the range allocated to USER.")
@click.option("-s", "--shorten-id", is_flag=True, default=False, help="Generate short-form IDs.")
@click.option("--random", "randomized", is_flag=True, default=False, help="Pick IDs at random.")
@click.option("--seed", type=int, default=None, help="Seed for --random.")
@click.option("-c", "--column", default=None, help="Name or 1-based index of the ID column.")
@click.option(
    "--overwrite/--no-overwrite",
    default=True,
    help="Replace existing values (default) or only fill empty cells.",
)
@click.option(
    "--ontology",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Ontology whose entities are treated as already-used IDs.",
)
@click.pass_obj
def tsv(config, **options) -> None:
    """Inject generated IDs into a column of TABLE_FILE."""
    from idslicer.cli.tsv_cmd import TSVOptions, run_tsv

    run_tsv(config, TSVOptions(**options))
