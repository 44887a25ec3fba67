"""Git operations.

Usage:
    from prr.git import Repository, parse_remote

    repo = Repository(Path.cwd())
    match repo.remote_url():
        case Ok(url):
            remote = parse_remote(url)
"""

from prr.git.remote import GITHUB_HOST, RemoteInfo, parse_remote
from prr.git.repository import GitError, Repository

__all__ = [
    "GITHUB_HOST",
    "GitError",
    "RemoteInfo",
    "Repository",
    "parse_remote",
]
