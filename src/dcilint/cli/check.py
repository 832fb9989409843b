"""dcilint check command - run the convention checks."""

import json
from pathlib import Path

import click

from dcilint.config.loader import load_config
from dcilint.core.errors import ConfigError, ParseError
from dcilint.core.logging import configure_logging
from dcilint.lint.models import FileResult, LintResult
from dcilint.lint.ops import DciOps


def _format_file(result: FileResult) -> list[str]:
    if result.status == "error":
        return [f"{result.path}: error: {result.error_detail}"]
    return [
        f"{d.path}:{d.line}:{d.column or 0}: {d.severity.value}: {d.message} [{d.code}]"
        for d in result.diagnostics
    ]


def _summary(result: LintResult) -> str:
    errors = sum(len(f.errors) for f in result.files)
    warnings = sum(len(f.warnings) for f in result.files)
    contexts = result.total_contexts
    return (
        f"{contexts} context{'s' if contexts != 1 else ''} checked, "
        f"{errors} error{'s' if errors != 1 else ''}, "
        f"{warnings} warning{'s' if warnings != 1 else ''}"
    )


@click.command()
@click.argument(
    "paths", nargs=-1, required=True, type=click.Path(exists=True, path_type=Path)
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option(
    "--vis-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Export each Context graph as <ContextName>.json into this directory",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Config file (default: .dcilint.yaml in the current directory)",
)
@click.pass_context
def check_command(
    ctx: click.Context,
    paths: tuple[Path, ...],
    as_json: bool,
    vis_dir: Path | None,
    config_path: Path | None,
) -> None:
    """Check DCI conventions in PHP files.

    PATHS are files or directories (searched recursively for *.php).
    """
    try:
        config = load_config(config_path=config_path)
    except ConfigError as e:
        raise click.ClickException(e.message) from e

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    if not verbose:
        configure_logging(config=config.logging)

    try:
        result = DciOps(config.dci, vis_data_dir=vis_dir).check(paths)
    except ParseError as e:
        raise click.ClickException(e.message) from e

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for file_result in result.files:
            for line in _format_file(file_result):
                click.echo(line)
        click.echo(_summary(result))

    if result.has_errors:
        ctx.exit(1)
