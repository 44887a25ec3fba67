from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from prr.checklist.reconcile import try_merge_bodies
from prr.core.result import Err, Ok, Result
from prr.git.remote import RemoteInfo, parse_remote
from prr.git.repository import Repository
from prr.output.console import ConsoleProtocol, Style
from prr.services.release.config import ReleaseConfig, load_release_config
from prr.services.release.errors import ReleaseError
from prr.services.release.gh import (
    GhContext,
    add_labels,
    create_pull_request,
    ensure_gh_auth,
    ensure_gh_available,
    find_release_pull_request,
    get_pull_request,
    pull_request_files,
    update_pull_request,
)
from prr.services.release.model import DUMMY_RELEASE_PR, ChangedFile, PullRequestSummary
from prr.services.release.render import RenderedRelease, load_template, render_release

OutcomeStatus = Literal["created", "updated", "dry_run", "nothing_to_release"]


@dataclass(frozen=True, slots=True)
class ReleaseContext:
    repo: Repository
    toplevel: Path
    remote: RemoteInfo
    config: ReleaseConfig
    gh: GhContext


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    status: OutcomeStatus
    release_pr: PullRequestSummary | None = None
    merged_prs: tuple[PullRequestSummary, ...] = ()
    changed_files: tuple[ChangedFile, ...] = ()
    title: str = ""
    body: str = ""


def resolve_context(
    *, cwd: Path, env: Mapping[str, str], console: ConsoleProtocol
) -> Result[ReleaseContext, ReleaseError]:
    """Locate the repository, its GitHub remote and the release settings."""
    repo = Repository(cwd, console=console)

    toplevel = repo.toplevel()
    if isinstance(toplevel, Err):
        return Err(ReleaseError(kind="not_a_repo", message=toplevel.error.message, hint=str(cwd)))

    url = repo.remote_url()
    if isinstance(url, Err):
        return Err(ReleaseError(kind="not_a_repo", message=url.error.message))

    remote = parse_remote(url.value)
    if isinstance(remote, Err):
        return Err(ReleaseError(kind="invalid_config", message=remote.error.message))

    cfg = load_release_config(repo=repo, toplevel=toplevel.value, remote=remote.value, env=env)
    if isinstance(cfg, Err):
        return Err(
            ReleaseError(kind="invalid_config", message=cfg.error.message, hint=cfg.error.key)
        )

    return Ok(
        ReleaseContext(
            repo=repo,
            toplevel=toplevel.value,
            remote=remote.value,
            config=cfg.value,
            gh=GhContext(cwd=toplevel.value, remote=remote.value, token=cfg.value.token),
        )
    )


def _collect_merged_prs(
    ctx: ReleaseContext, *, console: ConsoleProtocol
) -> Result[list[PullRequestSummary], ReleaseError]:
    cfg = ctx.config
    numbers = ctx.repo.merged_pr_numbers(
        base=f"origin/{cfg.production_branch}",
        head=f"origin/{cfg.staging_branch}",
        squashed=cfg.squashed,
    )
    if isinstance(numbers, Err):
        return Err(ReleaseError(kind="invalid_input", message=numbers.error.message))

    prs: list[PullRequestSummary] = []
    for number in numbers.value:
        pr = get_pull_request(ctx.gh, number)
        if isinstance(pr, Err):
            return pr
        console.debug(f"To be released: #{pr.value.number} {pr.value.title}")
        prs.append(pr.value)
    return Ok(prs)


def _render(
    ctx: ReleaseContext,
    *,
    release_pr: PullRequestSummary | None,
    merged_prs: list[PullRequestSummary],
    changed_files: list[ChangedFile],
) -> Result[RenderedRelease, ReleaseError]:
    template = load_template(ctx.toplevel, ctx.config.template)
    if isinstance(template, Err):
        return template
    return render_release(
        template=template.value,
        release_pr=release_pr or DUMMY_RELEASE_PR,
        merged_prs=merged_prs,
        changed_files=changed_files,
        mention=ctx.config.mention,
    )


def compose_body(
    *,
    release_pr: PullRequestSummary | None,
    rendered: RenderedRelease,
    overwrite_description: bool,
    console: ConsoleProtocol,
) -> Result[str, ReleaseError]:
    """Body to write: the rendered one, merged into the existing PR body."""
    if release_pr is None or overwrite_description:
        return Ok(rendered.body)

    merged = try_merge_bodies(release_pr.body, rendered.body, console=console)
    if isinstance(merged, Err):
        return Err(
            ReleaseError(
                kind="merge_failed",
                message=f"failed to merge release PR body: {merged.error.message}",
                hint=f"#{release_pr.number} was left untouched",
            )
        )
    return Ok(merged.value)


def prepare_release_pr(
    *,
    cwd: Path,
    env: Mapping[str, str],
    console: ConsoleProtocol,
    dry_run: bool,
    fetch: bool = True,
    overwrite_description: bool = False,
) -> Result[ReleaseOutcome, ReleaseError]:
    """Create or update the release PR from staging into production."""
    ok = ensure_gh_available()
    if isinstance(ok, Err):
        return ok

    resolved = resolve_context(cwd=cwd, env=env, console=console)
    if isinstance(resolved, Err):
        return resolved
    ctx = resolved.value
    cfg = ctx.config

    ok = ensure_gh_auth(ctx.gh)
    if isinstance(ok, Err):
        return ok

    if fetch:
        fetched = ctx.repo.fetch()
        if isinstance(fetched, Err):
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"git fetch failed: {fetched.error.message}",
                )
            )

    console.info(f"Repository: {ctx.remote.web_url}")
    console.info(f"Production branch: {cfg.production_branch}")
    console.info(f"Staging branch: {cfg.staging_branch}")

    merged_prs = _collect_merged_prs(ctx, console=console)
    if isinstance(merged_prs, Err):
        return merged_prs
    if not merged_prs.value:
        console.warning("No pull requests to be released")
        return Ok(ReleaseOutcome(status="nothing_to_release"))

    release_pr = find_release_pull_request(
        ctx.gh, base=cfg.production_branch, head=cfg.staging_branch
    )
    if isinstance(release_pr, Err):
        return release_pr
    if release_pr.value is not None:
        console.info(f"Updating release PR #{release_pr.value.number}")
    else:
        console.info("No existing release PR; creating a new one")

    changed_files = pull_request_files(ctx.gh, release_pr.value)
    if isinstance(changed_files, Err):
        return changed_files

    rendered = _render(
        ctx,
        release_pr=release_pr.value,
        merged_prs=merged_prs.value,
        changed_files=changed_files.value,
    )
    if isinstance(rendered, Err):
        return rendered

    body = compose_body(
        release_pr=release_pr.value,
        rendered=rendered.value,
        overwrite_description=overwrite_description,
        console=console,
    )
    if isinstance(body, Err):
        return body

    outcome = ReleaseOutcome(
        status="dry_run",
        release_pr=release_pr.value,
        merged_prs=tuple(merged_prs.value),
        changed_files=tuple(changed_files.value),
        title=rendered.value.title,
        body=body.value,
    )
    if dry_run:
        console.print("Dry-run. Not updating PR", Style.DIM)
        return Ok(outcome)

    if release_pr.value is None:
        written = _create(ctx, outcome, console=console)
    else:
        written = update_pull_request(
            ctx.gh,
            release_pr.value.number,
            title=outcome.title,
            body=outcome.body,
            console=console,
        )
    if isinstance(written, Err):
        return written

    labeled = add_labels(ctx.gh, written.value.number, cfg.labels, console=console)
    if isinstance(labeled, Err):
        return labeled

    console.success(f"Pull request updated: {ctx.remote.pull_request_url(written.value.number)}")
    return Ok(
        ReleaseOutcome(
            status="created" if release_pr.value is None else "updated",
            release_pr=written.value,
            merged_prs=outcome.merged_prs,
            changed_files=outcome.changed_files,
            title=written.value.title,
            body=written.value.body,
        )
    )


def _create(
    ctx: ReleaseContext, outcome: ReleaseOutcome, *, console: ConsoleProtocol
) -> Result[PullRequestSummary, ReleaseError]:
    """Open the PR, then re-render now that the template can see it."""
    created = create_pull_request(
        ctx.gh,
        base=ctx.config.production_branch,
        head=ctx.config.staging_branch,
        title=outcome.title,
        body=outcome.body,
        console=console,
    )
    if isinstance(created, Err):
        return created

    rerendered = _render(
        ctx,
        release_pr=created.value,
        merged_prs=list(outcome.merged_prs),
        changed_files=list(outcome.changed_files),
    )
    if isinstance(rerendered, Err):
        return rerendered
    if rerendered.value.title == outcome.title and rerendered.value.body == outcome.body:
        return created

    return update_pull_request(
        ctx.gh,
        created.value.number,
        title=rerendered.value.title,
        body=rerendered.value.body,
        console=console,
    )


def dump_result(outcome: ReleaseOutcome) -> str:
    """JSON document describing the release PR, merged PRs and changed files."""
    release_pr = outcome.release_pr.data if outcome.release_pr is not None else {}
    doc = {
        "release_pull_request": {"data": release_pr},
        "merged_pull_requests": [{"data": pr.data} for pr in outcome.merged_prs],
        "changed_files": [f.data for f in outcome.changed_files],
    }
    return json.dumps(doc)
