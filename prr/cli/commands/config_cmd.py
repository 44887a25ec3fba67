from __future__ import annotations

import typer

from prr.cli.commands._helpers import exit_release_error
from prr.cli.context import build_context
from prr.core.errors import ErrorCode
from prr.core.result import Err
from prr.services.release.config import config_value, set_config_value
from prr.services.release.service import resolve_context

config_app = typer.Typer(add_completion=False, no_args_is_help=True)


@config_app.command("get")
def get(key: str = typer.Argument(..., help="e.g. branch.production, mention, labels")) -> None:
    """Print a setting as prr resolves it."""
    ctx = build_context()
    resolved = resolve_context(cwd=ctx.cwd, env=ctx.env, console=ctx.console)
    if isinstance(resolved, Err):
        exit_release_error(resolved.error, console=ctx.console)

    rc = resolved.value
    value = config_value(key, repo=rc.repo, toplevel=rc.toplevel, remote=rc.remote, env=ctx.env)
    if isinstance(value, Err):
        ctx.console.error(value.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    if value.value is None:
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    typer.echo(value.value)


@config_app.command("set")
def set_(
    key: str = typer.Argument(..., help="Setting name"),
    value: str = typer.Argument(..., help="New value"),
) -> None:
    """Store a setting in the global git config (host aware)."""
    ctx = build_context()
    resolved = resolve_context(cwd=ctx.cwd, env=ctx.env, console=ctx.console)
    if isinstance(resolved, Err):
        exit_release_error(resolved.error, console=ctx.console)

    rc = resolved.value
    result = set_config_value(key, value, repo=rc.repo, remote=rc.remote)
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    ctx.console.success(f"{key} saved")
