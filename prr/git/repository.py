"""Git repository access.

Thin wrapper over the ``git`` executable; every method returns a Result so
callers decide how failures are reported.

Usage:
    repo = Repository(Path.cwd())
    match repo.remote_url():
        case Ok(url):
            print(url)
        case Err(e):
            print(f"Error: {e.message}")
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from prr.core.result import Err, Ok, Result
from prr.output.console import ConsoleProtocol
from prr.platform.process import ProcessError
from prr.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_MERGE_SUBJECT_RE = re.compile(r"^Merge pull request #(\d+) ")
_SQUASH_SUBJECT_RE = re.compile(r"\(#(\d+)\)$")

__all__ = [
    "GitError",
    "Repository",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git command that failed
        message: Error message
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


class Repository:
    """A local git checkout.

    Attributes:
        path: Any directory inside the working tree
    """

    def __init__(self, path: Path, *, console: ConsoleProtocol | None = None) -> None:
        self.path = path
        self._console = console

    def toplevel(self) -> Result[Path, GitError]:
        """Absolute path of the working tree root."""
        result = self._run(["rev-parse", "--show-toplevel"])
        match result:
            case Err(e):
                return Err(self._error("rev-parse --show-toplevel", e, "not a git repository"))
            case Ok(stdout):
                return Ok(Path(stdout.strip()))

    def remote_url(self, remote: str = "origin") -> Result[str, GitError]:
        result = self.config_get(f"remote.{remote}.url")
        match result:
            case Err(e):
                return Err(e)
            case Ok(None):
                return Err(
                    GitError(
                        command=f"config remote.{remote}.url",
                        message=f"remote '{remote}' is not configured",
                    )
                )
            case Ok(url):
                return Ok(url)

    def config_get(self, key: str, *, file: Path | None = None) -> Result[str | None, GitError]:
        """Read a config value.

        Returns Ok(None) when the key (or the file) does not exist; git exits
        with status 1 in that case.
        """
        args = ["config"]
        if file is not None:
            args += ["-f", str(file)]
        args.append(key)

        result = self._run(args)
        match result:
            case Err(e) if e.returncode == 1 and not e.stderr.strip():
                return Ok(None)
            case Err(e):
                if file is not None and not file.exists():
                    return Ok(None)
                return Err(self._error(f"config {key}", e, "git config failed"))
            case Ok(stdout):
                value = stdout.strip()
                return Ok(value or None)

    def config_set_global(self, key: str, value: str) -> Result[None, GitError]:
        result = self._run(["config", "--global", key, value])
        match result:
            case Err(e):
                return Err(self._error(f"config --global {key}", e, "git config failed"))
            case Ok(_):
                return Ok(None)

    def fetch(self, remote: str = "origin") -> Result[str, GitError]:
        result = self._run(["fetch", remote])
        match result:
            case Err(e):
                return Err(self._error("fetch", e, "fetch failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def merged_pr_numbers(
        self, *, base: str, head: str, squashed: bool = False
    ) -> Result[list[int], GitError]:
        """PR numbers merged into ``head`` that ``base`` does not contain yet.

        Merge commits are recognised by GitHub's ``Merge pull request #N``
        subject. With ``squashed``, commit subjects ending in ``(#N)`` count
        too. Numbers are returned oldest first, without duplicates.
        """
        args = ["log", "--pretty=format:%s", "--reverse", f"{base}..{head}"]
        if not squashed:
            args.insert(1, "--merges")

        result = self._run(args)
        if isinstance(result, Err):
            return Err(self._error(f"log {base}..{head}", result.error, "git log failed"))

        numbers: list[int] = []
        for subject in result.value.splitlines():
            m = _MERGE_SUBJECT_RE.match(subject)
            if m is None and squashed:
                m = _SQUASH_SUBJECT_RE.search(subject.strip())
            if m is None:
                continue
            number = int(m.group(1))
            if number not in numbers:
                numbers.append(number)
        return Ok(numbers)

    def _error(self, command: str, e: ProcessError, fallback: str) -> GitError:
        return GitError(
            command=command,
            message=e.stderr.strip() or fallback,
            returncode=e.returncode,
        )

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = _GIT_NETWORK_TIMEOUT_SECONDS if command == "fetch" else _GIT_TIMEOUT_SECONDS
        if self._console is not None:
            self._console.debug(f"Executing `git {' '.join(args)}`")
        return run_process(["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout)
