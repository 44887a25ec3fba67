"""Merge a regenerated release PR body into the existing one.

The merge runs in two stages:

1. Structural merge (``reconcile``): the existing body, with every checkbox
   forced to unchecked, is aligned line by line against the new body and
   each alignment event is resolved into output lines.
2. Status carry-over (``reapply``): items that were checked in the existing
   body are checked again wherever they survived the structural merge.

Usage:
    merged = merge_bodies(release_pr_body, rendered_body)
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, replace

from prr.checklist.align import Aligner, AlignmentEvent, Delete, Insert, Match, Replace, align
from prr.checklist.extract import extract, normalize, parse_line, split_lines
from prr.core.result import Err, Ok, Result
from prr.output.console import ConsoleProtocol

__all__ = [
    "MergeFailed",
    "merge_bodies",
    "reapply",
    "reconcile",
    "resolve_event",
    "try_merge_bodies",
]

_UNCHECKED_ITEM_RE = re.compile(r"^- \[ \]")


@dataclass(frozen=True, slots=True)
class MergeFailed:
    """The alignment step raised; nothing was merged."""

    message: str


def _is_unchecked_item(line: str) -> bool:
    return _UNCHECKED_ITEM_RE.match(line) is not None


def _same_item(old: str, new: str) -> bool:
    """True when two unchecked checklist lines stand for the same item.

    A line with an identifier never stands for one without, so a new PR
    paired with a hand-written to-do keeps its own line.
    """
    return parse_line(old).identifier == parse_line(new).identifier


def resolve_event(event: AlignmentEvent) -> list[str]:
    """Output lines contributed by a single alignment event."""
    match event:
        case Match(new=new) | Insert(new=new):
            return [new]
        case Delete(old=old):
            return [old]
        case Replace(old=old, new=new):
            key = normalize(new)
            if _is_unchecked_item(old) and _is_unchecked_item(key) and _same_item(old, key):
                return [old]
            return [old, new]
    raise TypeError(f"unknown alignment event: {event!r}")


def _with_new_lines(
    events: Iterable[AlignmentEvent], new_lines: Sequence[str]
) -> Iterator[AlignmentEvent]:
    """Swap the normalized new-side lines back for the original text."""
    j = 0
    for event in events:
        match event:
            case Match() | Insert() | Replace():
                yield replace(event, new=new_lines[j])
                j += 1
            case _:
                yield event


def _trace(console: ConsoleProtocol | None, event: AlignmentEvent, lines: list[str]) -> None:
    if console is None:
        return
    console.debug(f"diff: {event!r}")
    match event:
        case Replace() if len(lines) == 1:
            console.debug(f"Found checklist diff; use old one: {lines[0]}")
        case Delete():
            console.debug(f"Use old line: {lines[0]}")
        case _:
            for line in lines:
                console.debug(f"Use line as is: {line}")


def reconcile(
    normalized_old: str,
    new_body: str,
    *,
    aligner: Aligner = align,
    console: ConsoleProtocol | None = None,
) -> str:
    """Structurally merge ``new_body`` into a normalized old body.

    ``normalized_old`` must have all checklist markers unchecked (see
    ``extract``) so that a check-state change alone never shows up as a
    difference.
    """
    new_lines = split_lines(new_body)
    events = aligner(split_lines(normalized_old), [normalize(line) for line in new_lines])

    out: list[str] = []
    for event in _with_new_lines(events, new_lines):
        lines = resolve_event(event)
        _trace(console, event, lines)
        out.extend(lines)
    return "\n".join(out)


def reapply(
    merged_body: str,
    states: Mapping[str, bool],
    *,
    console: ConsoleProtocol | None = None,
) -> str:
    """Check every unchecked line whose identifier was checked before.

    Every occurrence is updated. ``#1`` never touches ``#12``.
    """
    for identifier, checked in states.items():
        if not checked:
            continue
        if console is not None:
            console.debug(f"Update pull-request checkbox #{identifier} to x.")
        pattern = re.compile(rf"^- \[ \] #{identifier}(?!\d)", re.MULTILINE)
        merged_body = pattern.sub(f"- [x] #{identifier}", merged_body)
    return merged_body


def merge_bodies(
    old_body: str,
    new_body: str,
    *,
    aligner: Aligner = align,
    console: ConsoleProtocol | None = None,
) -> str:
    """Merge a freshly rendered body into the existing release PR body."""
    extracted = extract(old_body)
    if console is not None:
        for identifier, checked in extracted.states.items():
            mark = "x" if checked else " "
            console.debug(f"Found pull-request checkbox #{identifier} is {mark}.")
    merged = reconcile(extracted.normalized, new_body, aligner=aligner, console=console)
    return reapply(merged, extracted.states, console=console)


def try_merge_bodies(
    old_body: str,
    new_body: str,
    *,
    aligner: Aligner = align,
    console: ConsoleProtocol | None = None,
) -> Result[str, MergeFailed]:
    """``merge_bodies`` with aligner failures reported as ``MergeFailed``."""
    try:
        merged = merge_bodies(old_body, new_body, aligner=aligner, console=console)
    except Exception as e:  # noqa: BLE001
        return Err(MergeFailed(message=f"{type(e).__name__}: {e}"))
    return Ok(merged)
