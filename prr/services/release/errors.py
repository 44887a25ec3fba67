from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "not_a_repo",
    "gh_missing",
    "gh_auth_required",
    "invalid_config",
    "invalid_input",
    "api_failed",
    "template_failed",
    "merge_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None
