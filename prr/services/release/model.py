from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from prr.core.structured import StrDict

MentionType = Literal["default", "author"]
MENTION_TYPES: tuple[MentionType, ...] = ("default", "author")


def _empty_data() -> StrDict:
    return {}


@dataclass(frozen=True, slots=True)
class PullRequestSummary:
    """A pull request as far as the release body is concerned."""

    number: int
    title: str
    url: str
    author: str | None = None
    assignee: str | None = None
    body: str = ""
    # Raw API payload, exposed to templates and --json output.
    data: StrDict = field(default_factory=_empty_data, compare=False)


@dataclass(frozen=True, slots=True)
class ChangedFile:
    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    data: StrDict = field(default_factory=_empty_data, compare=False)


@dataclass(frozen=True, slots=True)
class DummyPullRequest:
    """Stands in for the release PR before it has been created."""

    number: str = "???"
    title: str = "THIS IS DUMMY PULL REQUEST"
    url: str = "http://github.com/DUMMY/DUMMY/issues/?"
    author: str | None = None
    assignee: str | None = None
    body: str = ""
    data: StrDict = field(default_factory=_empty_data, compare=False)


DUMMY_RELEASE_PR = DummyPullRequest()
