from __future__ import annotations

from pathlib import Path

import typer

from prr.checklist.reconcile import try_merge_bodies
from prr.cli.context import build_context
from prr.core.errors import ErrorCode
from prr.core.result import Err


def _read(path: Path) -> str:
    if str(path) == "-":
        return typer.get_text_stream("stdin").read()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        typer.echo(f"error: failed to read {path}: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))


def merge(
    old: Path = typer.Argument(..., help="Current release PR body ('-' for stdin)."),
    new: Path = typer.Argument(..., help="Freshly generated body."),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write here, not stdout."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace every diff event."),
) -> None:
    """Merge a regenerated checklist into an existing body, keeping checked items."""
    ctx = build_context(verbose=verbose)

    result = try_merge_bodies(_read(old), _read(new), console=ctx.console)
    if isinstance(result, Err):
        ctx.console.error(result.error.message)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if output is None:
        typer.echo(result.value, nl=False)
        return

    try:
        output.write_text(result.value, encoding="utf-8")
    except OSError as e:
        ctx.console.error(f"failed to write {output}: {e}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
