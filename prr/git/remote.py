"""Resolve a git remote URL into the GitHub host, repository and scheme."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from prr.core.result import Err, Ok, Result
from prr.git.repository import GitError

__all__ = ["GITHUB_HOST", "RemoteInfo", "parse_remote"]

GITHUB_HOST = "github.com"

_HAS_SCHEME_RE = re.compile(r"^\w+://")


@dataclass(frozen=True, slots=True)
class RemoteInfo:
    """Where the repository lives.

    Attributes:
        host: GitHub Enterprise host name, None for github.com.
        repository: ``owner/name`` slug.
        scheme: ``http`` for plain-http remotes, ``https`` otherwise.
    """

    host: str | None
    repository: str
    scheme: str = "https"

    @property
    def web_host(self) -> str:
        return self.host or GITHUB_HOST

    @property
    def web_url(self) -> str:
        return f"{self.scheme}://{self.web_host}/{self.repository}"

    def pull_request_url(self, number: int) -> str:
        return f"{self.web_url}/pull/{number}"


def parse_remote(url: str) -> Result[RemoteInfo, GitError]:
    """Parse ``remote.origin.url``.

    scp-like remotes (``git@host:owner/repo.git``) are read as
    ``ssh://git@host/owner/repo.git``.
    """
    remote = url.strip()
    if not _HAS_SCHEME_RE.match(remote):
        remote = "ssh://" + remote.replace(":", "/", 1)

    try:
        parts = urlsplit(remote)
        hostname = parts.hostname
    except ValueError as e:
        return Err(GitError(command="config remote.origin.url", message=f"invalid remote: {e}"))

    repository = parts.path.lstrip("/").removesuffix(".git")
    if not hostname or not repository:
        return Err(
            GitError(command="config remote.origin.url", message=f"unsupported remote: {url}")
        )

    return Ok(
        RemoteInfo(
            host=None if hostname == GITHUB_HOST else hostname,
            repository=repository,
            scheme="http" if parts.scheme == "http" else "https",
        )
    )
