"""Checklist line recognition and checked-state extraction.

A checklist line looks like ``- [ ] #123 Title @someone`` (unchecked) or
``- [x] #123 Title`` (checked). Only the prefix up to the digits is
significant; the rest of the line is free text.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

__all__ = [
    "CheckedStateMap",
    "ChecklistLine",
    "ExtractedChecklist",
    "extract",
    "normalize",
    "parse_line",
    "split_lines",
]

CHECKLIST_ITEM_RE = re.compile(r"^- \[(?P<mark>[ x])\] #(?P<number>\d+)", re.MULTILINE)
LINE_SEPARATOR_RE = re.compile(r"\r?\n")

type CheckedStateMap = Mapping[str, bool]


@dataclass(frozen=True, slots=True)
class ChecklistLine:
    """View of a single line of a PR body.

    Attributes:
        raw: The line text, unmodified.
        identifier: Digits after ``#`` for checklist lines, None otherwise.
        checked: True for ``- [x]`` lines.
    """

    raw: str
    identifier: str | None = None
    checked: bool = False

    @property
    def is_item(self) -> bool:
        return self.identifier is not None


@dataclass(frozen=True, slots=True)
class ExtractedChecklist:
    """Result of scanning an existing body.

    Attributes:
        states: identifier -> checked, read-only.
        normalized: The input with every checklist marker forced to ``[ ]``.
    """

    states: CheckedStateMap
    normalized: str


def split_lines(body: str) -> list[str]:
    """Split a body on ``\\n`` or ``\\r\\n``.

    An empty body has no lines. A trailing newline yields a trailing empty
    line so that joining with ``\\n`` restores it.
    """
    if body == "":
        return []
    return LINE_SEPARATOR_RE.split(body)


def parse_line(line: str) -> ChecklistLine:
    m = CHECKLIST_ITEM_RE.match(line)
    if m is None:
        return ChecklistLine(raw=line)
    return ChecklistLine(raw=line, identifier=m.group("number"), checked=m.group("mark") == "x")


def normalize(text: str) -> str:
    """Force every checklist marker in ``text`` to the unchecked form."""
    return CHECKLIST_ITEM_RE.sub(r"- [ ] #\g<number>", text)


def extract(old_body: str) -> ExtractedChecklist:
    """Collect checked states from ``old_body`` and normalize its markers.

    Later occurrences of an identifier overwrite earlier ones. Lines that are
    not checklist items are ignored for the map and kept verbatim.
    """
    states: dict[str, bool] = {}
    for line in split_lines(old_body):
        item = parse_line(line)
        if item.identifier is not None:
            states[item.identifier] = item.checked

    return ExtractedChecklist(states=MappingProxyType(states), normalized=normalize(old_body))
