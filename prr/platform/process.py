"""Running git and gh.

prr never talks to GitHub or the repository directly: ``Repository`` shells
out to ``git -C <path>`` and the release service shells out to ``gh api``.
Both go through ``run``, which captures the output and turns any failure
(non-zero exit, timeout, missing executable) into a ``ProcessError`` value.

Usage:
    result = run(["git", "config", "remote.origin.url"], cwd=Path("."))
    match result:
        case Ok(stdout):
            print(stdout.strip())
        case Err(error):
            print(f"{error}: {error.stderr}")
"""

from __future__ import annotations

import os
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from prr.core.result import Err, Ok, Result

__all__ = ["ProcessError", "run", "merged_env"]


@dataclass(frozen=True, slots=True)
class ProcessError:
    """A git or gh invocation that did not succeed.

    ``returncode`` is -1 when the process never finished (not installed, or
    killed after ``timeout``). git reports "key not found" as exit 1 with an
    empty ``stderr``; callers rely on that distinction.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        # Only the head of the command: gh write calls carry PR bodies.
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        return f"{cmd_str} failed (exit {self.returncode})"


def merged_env(extra: Mapping[str, str] | None) -> dict[str, str] | None:
    """The current environment plus ``extra`` (``GH_TOKEN``, ``GH_HOST``).

    None when there is nothing to add, so the child inherits the environment.
    """
    if not extra:
        return None
    env = dict(os.environ)
    env.update(extra)
    return env


def _not_run(cmd: list[str], stderr: str, stdout: str = "") -> Err[ProcessError]:
    return Err(ProcessError(command=tuple(cmd), returncode=-1, stdout=stdout, stderr=stderr))


def run(
    cmd: list[str],
    cwd: Path,
    env: dict[str, str] | None = None,
    *,
    timeout: float | None = None,
) -> Result[str, ProcessError]:
    """Run ``cmd`` in ``cwd`` and return its stdout.

    Output is decoded as text. git calls pass a 30s timeout (3 minutes for
    fetch) and gh calls 60s; ``None`` waits forever.
    """
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd),
            env=env,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        partial = e.stdout if isinstance(e.stdout, str) else ""
        return _not_run(cmd, f"Command timed out after {timeout}s", partial)
    except OSError as e:
        return _not_run(cmd, str(e))

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )
    return Ok(proc.stdout)
