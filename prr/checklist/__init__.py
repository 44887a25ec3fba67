"""Release PR checklist reconciliation.

Usage:
    from prr.checklist import merge_bodies

    body = merge_bodies(existing_body, rendered_body)
"""

from prr.checklist.align import (
    Aligner,
    AlignmentEvent,
    Delete,
    Insert,
    Match,
    Replace,
    align,
)
from prr.checklist.extract import (
    CheckedStateMap,
    ChecklistLine,
    ExtractedChecklist,
    extract,
    parse_line,
    split_lines,
)
from prr.checklist.reconcile import (
    MergeFailed,
    merge_bodies,
    reapply,
    reconcile,
    try_merge_bodies,
)

__all__ = [
    # align
    "Aligner",
    "AlignmentEvent",
    "Delete",
    "Insert",
    "Match",
    "Replace",
    "align",
    # extract
    "CheckedStateMap",
    "ChecklistLine",
    "ExtractedChecklist",
    "extract",
    "parse_line",
    "split_lines",
    # reconcile
    "MergeFailed",
    "merge_bodies",
    "reapply",
    "reconcile",
    "try_merge_bodies",
]
