"""Release configuration.

Each setting is looked up, in order, in:

1. the environment variable ``GIT_PR_RELEASE_<KEY>`` (dots and dashes become
   underscores, e.g. ``GIT_PR_RELEASE_BRANCH_PRODUCTION``);
2. the repository file ``.git-pr-release`` under ``[pr-release]``;
3. git config ``pr-release.<host>.<key>`` (no host segment for github.com).

Example ``.git-pr-release``::

    [pr-release "branch"]
        production = main
        staging = develop
    [pr-release]
        labels = release, deploy
        mention = author
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from prr.core.result import Err, Ok, Result
from prr.git.remote import RemoteInfo
from prr.git.repository import Repository
from prr.services.release.model import MENTION_TYPES, MentionType

__all__ = [
    "CONFIG_FILE",
    "ConfigError",
    "ReleaseConfig",
    "config_value",
    "load_release_config",
    "set_config_value",
]

CONFIG_FILE = ".git-pr-release"
CONFIG_SECTION = "pr-release"

DEFAULT_PRODUCTION_BRANCH = "master"
DEFAULT_STAGING_BRANCH = "staging"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when a setting cannot be read or is invalid."""

    message: str
    key: str | None = None


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for one run.

    Attributes:
        production_branch: Base branch of the release PR.
        staging_branch: Head branch of the release PR.
        template: Template path relative to the repository root, if any.
        labels: Labels added to the release PR.
        mention: Who is mentioned on checklist lines.
        token: GitHub token handed to gh; gh's own auth is used when None.
        squashed: Also pick up squash-merged PRs (subjects ending in ``(#N)``).
    """

    production_branch: str = DEFAULT_PRODUCTION_BRANCH
    staging_branch: str = DEFAULT_STAGING_BRANCH
    template: str | None = None
    labels: tuple[str, ...] = ()
    mention: MentionType = "default"
    token: str | None = None
    squashed: bool = False


def env_var_name(key: str) -> str:
    return "GIT_PR_RELEASE_" + key.upper().replace(".", "_").replace("-", "_")


def _host_aware_key(host: str | None, key: str) -> str:
    return ".".join(part for part in (CONFIG_SECTION, host, key) if part)


def config_value(
    key: str,
    *,
    repo: Repository,
    toplevel: Path,
    remote: RemoteInfo,
    env: Mapping[str, str],
) -> Result[str | None, ConfigError]:
    """Look a single setting up (environment, repo file, git config)."""
    from_env = env.get(env_var_name(key), "").strip()
    if from_env:
        return Ok(from_env)

    from_file = repo.config_get(f"{CONFIG_SECTION}.{key}", file=toplevel / CONFIG_FILE)
    if isinstance(from_file, Err):
        return Err(ConfigError(f"failed to read {CONFIG_FILE}: {from_file.error.message}", key))
    if from_file.value is not None:
        return Ok(from_file.value)

    from_git = repo.config_get(_host_aware_key(remote.host, key))
    if isinstance(from_git, Err):
        return Err(ConfigError(f"failed to read git config: {from_git.error.message}", key))
    return Ok(from_git.value)


def set_config_value(
    key: str, value: str, *, repo: Repository, remote: RemoteInfo
) -> Result[None, ConfigError]:
    """Store a setting in the user's global git config."""
    result = repo.config_set_global(_host_aware_key(remote.host, key), value)
    if isinstance(result, Err):
        return Err(ConfigError(result.error.message, key))
    return Ok(None)


def _parse_bool(key: str, raw: str | None) -> Result[bool, ConfigError]:
    if raw is None:
        return Ok(False)
    v = raw.strip().lower()
    if v in _TRUE_VALUES:
        return Ok(True)
    if v in _FALSE_VALUES:
        return Ok(False)
    return Err(ConfigError(f"invalid boolean for {key}: {raw}", key))


def _parse_labels(raw: str | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    return tuple(label.strip() for label in raw.split(",") if label.strip())


def load_release_config(
    *,
    repo: Repository,
    toplevel: Path,
    remote: RemoteInfo,
    env: Mapping[str, str],
) -> Result[ReleaseConfig, ConfigError]:
    values: dict[str, str | None] = {}
    for key in (
        "branch.production",
        "branch.staging",
        "template",
        "labels",
        "mention",
        "token",
        "squashed",
    ):
        result = config_value(key, repo=repo, toplevel=toplevel, remote=remote, env=env)
        if isinstance(result, Err):
            return result
        values[key] = result.value

    mention = values["mention"] or "default"
    if mention not in MENTION_TYPES:
        return Err(
            ConfigError(
                f"invalid mention: {mention} (expected one of: {', '.join(MENTION_TYPES)})",
                "mention",
            )
        )

    squashed = _parse_bool("squashed", values["squashed"])
    if isinstance(squashed, Err):
        return squashed

    return Ok(
        ReleaseConfig(
            production_branch=values["branch.production"] or DEFAULT_PRODUCTION_BRANCH,
            staging_branch=values["branch.staging"] or DEFAULT_STAGING_BRANCH,
            template=values["template"],
            labels=_parse_labels(values["labels"]),
            mention="author" if mention == "author" else "default",
            token=values["token"],
            squashed=squashed.value,
        )
    )
