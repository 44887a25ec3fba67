from __future__ import annotations

import json
import shutil
from dataclasses import dataclass
from pathlib import Path
from time import sleep

from prr.core.result import Err, Ok, Result
from prr.core.structured import StrDict, as_obj_list, as_str_dict, get_int, get_login, get_str
from prr.git.remote import RemoteInfo
from prr.output.console import ConsoleProtocol
from prr.platform.process import ProcessError, merged_env
from prr.platform.process import run as run_process
from prr.services.release.errors import ReleaseError, ReleaseErrorKind
from prr.services.release.model import ChangedFile, PullRequestSummary
from prr.services.release.timeouts import (
    GH_READ_RETRY_ATTEMPTS,
    GH_READ_RETRY_DELAY_SECONDS,
    GH_TIMEOUT_SECONDS,
)

_FILES_PER_PAGE = 100


@dataclass(frozen=True, slots=True)
class GhContext:
    """Everything a gh call needs: where to run, which repo, which token."""

    cwd: Path
    remote: RemoteInfo
    token: str | None = None

    @property
    def repo(self) -> str:
        return self.remote.repository

    @property
    def env(self) -> dict[str, str] | None:
        extra: dict[str, str] = {}
        if self.token:
            extra["GH_TOKEN"] = self.token
        if self.remote.host:
            extra["GH_HOST"] = self.remote.host
        return merged_env(extra)

    def api_cmd(self, endpoint: str, *args: str) -> list[str]:
        cmd = ["gh", "api"]
        if self.remote.host:
            cmd += ["--hostname", self.remote.host]
        return [*cmd, endpoint, *args]


def _is_transient_gh_error(error: ProcessError) -> bool:
    text = f"{error.stderr}\n{error.stdout}".lower()
    markers = (
        "timed out",
        "timeout",
        "connection reset",
        "connection refused",
        "temporarily unavailable",
        "service unavailable",
        "bad gateway",
        "gateway timeout",
        "network is unreachable",
        "http 429",
        "http 500",
        "http 502",
        "http 503",
        "http 504",
    )
    return any(marker in text for marker in markers)


def run_gh_read(
    ctx: GhContext,
    cmd: list[str],
    *,
    kind: ReleaseErrorKind,
    message: str,
    hint: str | None = None,
    retry_attempts: int = GH_READ_RETRY_ATTEMPTS,
) -> Result[str, ReleaseError]:
    attempts = max(1, retry_attempts)
    for attempt in range(attempts):
        result = run_process(cmd, cwd=ctx.cwd, env=ctx.env, timeout=GH_TIMEOUT_SECONDS)
        if isinstance(result, Ok):
            return result

        error = result.error
        if attempt < attempts - 1 and _is_transient_gh_error(error):
            sleep(GH_READ_RETRY_DELAY_SECONDS * (attempt + 1))
            continue

        return Err(ReleaseError(kind=kind, message=message, hint=error.stderr.strip() or hint))

    return Err(ReleaseError(kind=kind, message=message, hint=hint))


def _parse_json(payload: str, *, endpoint: str) -> Result[object, ReleaseError]:
    try:
        obj: object = json.loads(payload)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="api_failed",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )
    return Ok(obj)


def ensure_gh_available() -> Result[None, ReleaseError]:
    if shutil.which("gh") is None:
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(ctx: GhContext) -> Result[None, ReleaseError]:
    if ctx.token:
        return Ok(None)

    cmd = ["gh", "auth", "status"]
    if ctx.remote.host:
        cmd += ["--hostname", ctx.remote.host]
    result = run_process(cmd, cwd=ctx.cwd, env=ctx.env, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login (or set GIT_PR_RELEASE_TOKEN)",
            )
        )
    return Ok(None)


def gh_api_json(ctx: GhContext, endpoint: str) -> Result[object, ReleaseError]:
    result = run_gh_read(
        ctx,
        ctx.api_cmd(endpoint),
        kind="api_failed",
        message=f"gh api failed: {endpoint}",
        hint=endpoint,
    )
    if isinstance(result, Err):
        return result
    return _parse_json(result.value, endpoint=endpoint)


def gh_api_write(
    ctx: GhContext,
    endpoint: str,
    *,
    method: str,
    fields: list[tuple[str, str]],
    console: ConsoleProtocol,
) -> Result[object, ReleaseError]:
    """Send a write request. Writes are never retried."""
    args = ["--method", method]
    for key, value in fields:
        args += ["-f", f"{key}={value}"]
    cmd = ctx.api_cmd(endpoint, *args)

    console.debug(f"gh api --method {method} {endpoint}")
    result = run_process(cmd, cwd=ctx.cwd, env=ctx.env, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="api_failed",
                message=f"gh api {method} failed: {endpoint}",
                hint=result.error.stderr.strip() or str(result.error),
            )
        )
    return _parse_json(result.value, endpoint=endpoint)


def pull_request_from_payload(obj: object) -> PullRequestSummary | None:
    data = as_str_dict(obj)
    if data is None:
        return None

    number = get_int(data, "number")
    title = data.get("title")
    if number is None or not isinstance(title, str):
        return None

    body = data.get("body")
    return PullRequestSummary(
        number=number,
        title=title,
        url=get_str(data, "html_url") or "",
        author=get_login(data, "user"),
        assignee=get_login(data, "assignee"),
        body=body if isinstance(body, str) else "",
        data=data,
    )


def _changed_file_from_payload(data: StrDict) -> ChangedFile | None:
    filename = get_str(data, "filename")
    if filename is None:
        return None
    return ChangedFile(
        filename=filename,
        status=get_str(data, "status") or "modified",
        additions=get_int(data, "additions") or 0,
        deletions=get_int(data, "deletions") or 0,
        data=data,
    )


def get_pull_request(ctx: GhContext, number: int) -> Result[PullRequestSummary, ReleaseError]:
    endpoint = f"repos/{ctx.repo}/pulls/{number}"
    obj = gh_api_json(ctx, endpoint)
    if isinstance(obj, Err):
        return obj

    pr = pull_request_from_payload(obj.value)
    if pr is None:
        return Err(
            ReleaseError(kind="api_failed", message=f"unexpected pull request payload: #{number}")
        )
    return Ok(pr)


def find_release_pull_request(
    ctx: GhContext, *, base: str, head: str
) -> Result[PullRequestSummary | None, ReleaseError]:
    """The open PR from ``head`` into ``base``, if there is one."""
    owner = ctx.repo.split("/", 1)[0]
    endpoint = f"repos/{ctx.repo}/pulls?state=open&base={base}&head={owner}:{head}"
    obj = gh_api_json(ctx, endpoint)
    if isinstance(obj, Err):
        return obj

    raw = as_obj_list(obj.value)
    if raw is None:
        return Err(ReleaseError(kind="api_failed", message="unexpected pull request list payload"))

    for item in raw:
        pr = pull_request_from_payload(item)
        if pr is not None:
            return Ok(pr)
    return Ok(None)


def pull_request_files(
    ctx: GhContext, pr: PullRequestSummary | None
) -> Result[list[ChangedFile], ReleaseError]:
    if pr is None:
        return Ok([])

    out: list[ChangedFile] = []
    page = 1
    while True:
        endpoint = (
            f"repos/{ctx.repo}/pulls/{pr.number}/files?per_page={_FILES_PER_PAGE}&page={page}"
        )
        obj = gh_api_json(ctx, endpoint)
        if isinstance(obj, Err):
            return obj

        raw = as_obj_list(obj.value)
        if raw is None:
            return Err(
                ReleaseError(kind="api_failed", message=f"unexpected files payload: #{pr.number}")
            )

        for item in raw:
            data = as_str_dict(item)
            if data is None:
                continue
            changed = _changed_file_from_payload(data)
            if changed is not None:
                out.append(changed)

        if len(raw) < _FILES_PER_PAGE:
            return Ok(out)
        page += 1


def create_pull_request(
    ctx: GhContext,
    *,
    base: str,
    head: str,
    title: str,
    body: str,
    console: ConsoleProtocol,
) -> Result[PullRequestSummary, ReleaseError]:
    obj = gh_api_write(
        ctx,
        f"repos/{ctx.repo}/pulls",
        method="POST",
        fields=[("base", base), ("head", head), ("title", title), ("body", body)],
        console=console,
    )
    if isinstance(obj, Err):
        return obj

    pr = pull_request_from_payload(obj.value)
    if pr is None:
        return Err(ReleaseError(kind="api_failed", message="unexpected gh pr create payload"))
    return Ok(pr)


def update_pull_request(
    ctx: GhContext,
    number: int,
    *,
    title: str,
    body: str,
    console: ConsoleProtocol,
) -> Result[PullRequestSummary, ReleaseError]:
    obj = gh_api_write(
        ctx,
        f"repos/{ctx.repo}/pulls/{number}",
        method="PATCH",
        fields=[("title", title), ("body", body)],
        console=console,
    )
    if isinstance(obj, Err):
        return obj

    pr = pull_request_from_payload(obj.value)
    if pr is None:
        return Err(ReleaseError(kind="api_failed", message=f"unexpected update payload: #{number}"))
    return Ok(pr)


def add_labels(
    ctx: GhContext,
    number: int,
    labels: tuple[str, ...],
    *,
    console: ConsoleProtocol,
) -> Result[None, ReleaseError]:
    if not labels:
        return Ok(None)

    result = gh_api_write(
        ctx,
        f"repos/{ctx.repo}/issues/{number}/labels",
        method="POST",
        fields=[("labels[]", label) for label in labels],
        console=console,
    )
    if isinstance(result, Err):
        return result
    return Ok(None)
