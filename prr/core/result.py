"""Result type for explicit error handling.

Operations that talk to git, gh or the filesystem return ``Ok(value)`` or
``Err(error)`` instead of raising, so callers decide at the CLI boundary how a
failure is reported.

Usage:
    match repo.remote_url():
        case Ok(url):
            print(url)
        case Err(error):
            print(f"git failed: {error.message}")
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failed result.

    Attributes:
        error: The error payload.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


type Result[T, E] = Ok[T] | Err[E]
