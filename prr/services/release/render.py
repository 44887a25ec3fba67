"""Release PR title/body rendering.

The rendered text's first line is the PR title; the remaining lines are the
body. Custom templates are Jinja2 files that receive:

- ``release_pull_request``: the existing release PR (or a dummy)
- ``merged_pull_requests`` / ``pull_requests``: PRs to release
- ``changed_files``: files changed by the release PR
- ``now``: timezone-aware ``datetime``
- ``checklist_item(pr)``: the ``- [ ] #N title @mention`` line for a PR
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from jinja2 import Environment, StrictUndefined, TemplateError

from prr.core.result import Err, Ok, Result
from prr.services.release.errors import ReleaseError
from prr.services.release.model import (
    ChangedFile,
    DummyPullRequest,
    MentionType,
    PullRequestSummary,
)

__all__ = [
    "DEFAULT_TEMPLATE",
    "RenderedRelease",
    "checklist_item",
    "load_template",
    "mention_for",
    "render_release",
]

DEFAULT_TEMPLATE = """\
Release {{ now.strftime("%Y-%m-%d %H:%M:%S %z") }}
{% for pr in pull_requests %}
{{ checklist_item(pr) }}
{% endfor %}
"""


@dataclass(frozen=True, slots=True)
class RenderedRelease:
    title: str
    body: str


def mention_for(pr: PullRequestSummary | DummyPullRequest, mention: MentionType) -> str | None:
    """Login to mention on a checklist line.

    ``author`` always mentions the author; ``default`` prefers the assignee.
    """
    if mention == "author":
        return pr.author
    return pr.assignee or pr.author


def checklist_item(
    pr: PullRequestSummary | DummyPullRequest, *, mention: MentionType = "default"
) -> str:
    line = f"- [ ] #{pr.number} {pr.title}"
    login = mention_for(pr, mention)
    if login:
        line += f" @{login}"
    return line


def load_template(toplevel: Path, template: str | None) -> Result[str, ReleaseError]:
    """Read the configured template (relative to the repo root) or the default."""
    if template is None:
        return Ok(DEFAULT_TEMPLATE)

    path = toplevel / template
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(
            ReleaseError(
                kind="template_failed",
                message=f"failed to read template: {e}",
                hint=str(path),
            )
        )


def _environment() -> Environment:
    return Environment(
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_release(
    *,
    template: str,
    release_pr: PullRequestSummary | DummyPullRequest,
    merged_prs: Sequence[PullRequestSummary],
    changed_files: Sequence[ChangedFile],
    mention: MentionType,
    now: datetime | None = None,
) -> Result[RenderedRelease, ReleaseError]:
    def item(pr: PullRequestSummary | DummyPullRequest) -> str:
        return checklist_item(pr, mention=mention)

    try:
        content = (
            _environment()
            .from_string(template)
            .render(
                release_pull_request=release_pr,
                target_pull_request=release_pr,
                merged_pull_requests=list(merged_prs),
                pull_requests=list(merged_prs),
                changed_files=list(changed_files),
                now=now or datetime.now().astimezone(),
                checklist_item=item,
            )
        )
    except TemplateError as e:
        return Err(
            ReleaseError(
                kind="template_failed",
                message=f"failed to render template: {e}",
            )
        )

    title, _, body = content.partition("\n")
    return Ok(RenderedRelease(title=title.strip(), body=body))
