from __future__ import annotations

from typing import NoReturn

import typer

from prr.core.errors import ErrorCode
from prr.output.console import ConsoleProtocol, Style
from prr.services.release.errors import ReleaseError


def release_error_code(error: ReleaseError) -> ErrorCode:
    if error.kind in {"not_a_repo", "gh_missing", "gh_auth_required"}:
        return ErrorCode.ENV_ERROR
    if error.kind == "api_failed":
        return ErrorCode.NETWORK_ERROR
    if error.kind == "template_failed":
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_release_error(error: ReleaseError, *, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error)))
