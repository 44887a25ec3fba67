from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from prr.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    env: Mapping[str, str]
    console: ConsoleProtocol


def is_verbose(env: Mapping[str, str], *, flag: bool) -> bool:
    return flag or bool(env.get("DEBUG"))


def build_context(*, verbose: bool = False) -> CLIContext:
    env = dict(os.environ)
    return CLIContext(
        cwd=Path.cwd(),
        env=env,
        console=RichConsole(verbose=is_verbose(env, flag=verbose)),
    )
