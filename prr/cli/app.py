from __future__ import annotations

import typer

from prr import __version__
from prr.cli.commands.config_cmd import config_app
from prr.cli.commands.merge_cmd import merge
from prr.cli.commands.release_cmd import run_release
from prr.cli.context import build_context


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Create or update a release pull request listing the PRs merged since the last release.",
)

app.command()(merge)
app.add_typer(config_app, name="config")


@app.callback(invoke_without_command=True)
def _main(  # pyright: ignore[reportUnusedFunction]
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
    dry_run: bool = typer.Option(False, "--dry-run", "-n", help="Show the result, do not write."),
    json_output: bool = typer.Option(False, "--json", help="Dump release data as JSON."),
    no_fetch: bool = typer.Option(False, "--no-fetch", help="Do not run git fetch first."),
    overwrite_description: bool = typer.Option(
        False,
        "--overwrite-description",
        help="Replace the release PR body instead of merging into it.",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print trace output."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    if ctx.invoked_subcommand is not None:
        return

    run_release(
        build_context(verbose=verbose),
        dry_run=dry_run,
        json_output=json_output,
        fetch=not no_fetch,
        overwrite_description=overwrite_description,
    )


def main() -> None:
    app()
