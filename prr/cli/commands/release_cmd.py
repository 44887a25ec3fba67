from __future__ import annotations

import typer

from prr.cli.context import CLIContext
from prr.cli.commands._helpers import exit_release_error
from prr.core.result import Err
from prr.services.release.service import dump_result, prepare_release_pr


def run_release(
    ctx: CLIContext,
    *,
    dry_run: bool,
    json_output: bool,
    fetch: bool,
    overwrite_description: bool,
) -> None:
    """Create or update the release PR; ``--json`` implies no writes."""
    result = prepare_release_pr(
        cwd=ctx.cwd,
        env=ctx.env,
        console=ctx.console,
        dry_run=dry_run or json_output,
        fetch=fetch,
        overwrite_description=overwrite_description,
    )
    if isinstance(result, Err):
        exit_release_error(result.error, console=ctx.console)

    outcome = result.value
    if json_output:
        typer.echo(dump_result(outcome))
        return

    if outcome.status == "dry_run":
        typer.echo(outcome.title)
        typer.echo("")
        typer.echo(outcome.body)
