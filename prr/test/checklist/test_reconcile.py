"""Tests for prr.checklist.reconcile."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from prr.checklist.align import AlignmentEvent, Delete, Insert, Match, Replace
from prr.checklist.extract import extract
from prr.checklist.reconcile import (
    MergeFailed,
    merge_bodies,
    reapply,
    reconcile,
    resolve_event,
    try_merge_bodies,
)
from prr.core.result import Err, Ok
from prr.output.console import MockConsole, Style


# =============================================================================
# Event resolution
# =============================================================================


class TestResolveEvent:
    def test_match_uses_new_line(self) -> None:
        assert resolve_event(Match("a", "a")) == ["a"]

    def test_insert_uses_new_line(self) -> None:
        assert resolve_event(Insert("- [ ] #9 new")) == ["- [ ] #9 new"]

    def test_delete_keeps_old_line(self) -> None:
        assert resolve_event(Delete("manual note")) == ["manual note"]

    def test_replace_same_item_old_wins(self) -> None:
        event = Replace("- [ ] #4 Old title (see ops doc)", "- [ ] #4 New title @bob")
        assert resolve_event(event) == ["- [ ] #4 Old title (see ops doc)"]

    def test_replace_checked_new_side_is_still_an_item(self) -> None:
        event = Replace("- [ ] #4 Old title", "- [x] #4 New title")
        assert resolve_event(event) == ["- [ ] #4 Old title"]

    def test_replace_different_items_keeps_both(self) -> None:
        event = Replace("- [ ] #2 B", "- [ ] #3 C")
        assert resolve_event(event) == ["- [ ] #2 B", "- [ ] #3 C"]

    def test_replace_item_without_identifier_keeps_both(self) -> None:
        event = Replace("- [ ] confirm rollout plan", "- [ ] #5 Real")
        assert resolve_event(event) == ["- [ ] confirm rollout plan", "- [ ] #5 Real"]

    def test_replace_items_without_identifiers_old_wins(self) -> None:
        event = Replace("- [ ] ping QA", "- [ ] ping QA team")
        assert resolve_event(event) == ["- [ ] ping QA"]


    @pytest.mark.parametrize(
        ("old", "new"),
        [
            ("Notes: v1", "Notes: v2"),
            ("- [ ] #1 A", "Deployed to staging"),
            ("Deployed to staging", "- [ ] #1 A"),
        ],
    )
    def test_replace_with_non_item_keeps_both_old_first(self, old: str, new: str) -> None:
        assert resolve_event(Replace(old, new)) == [old, new]


# =============================================================================
# reconcile / reapply
# =============================================================================


class TestReconcile:
    def test_reconcile_body_with_itself(self) -> None:
        body = "Release notes\n- [x] #1 A @alice\n- [ ] #2 B\n\nfooter\n"
        assert reconcile(extract(body).normalized, body) == body

    def test_empty_old_body_yields_new_body(self) -> None:
        new = "- [ ] #1 A\n- [ ] #2 B"
        assert reconcile("", new) == new

    def test_empty_new_body_keeps_old_lines(self) -> None:
        assert reconcile("- [ ] #1 A\nnote", "") == "- [ ] #1 A\nnote"

    def test_crlf_old_body_joined_with_lf(self) -> None:
        assert reconcile("- [ ] #1 A\r\n- [ ] #2 B", "- [ ] #1 A\n- [ ] #2 B") == (
            "- [ ] #1 A\n- [ ] #2 B"
        )

    def test_uses_injected_aligner(self) -> None:
        seen: list[tuple[list[str], list[str]]] = []

        def aligner(old: Sequence[str], new: Sequence[str]) -> list[AlignmentEvent]:
            seen.append((list(old), list(new)))
            return [Delete(old[0]), Insert(new[0])]

        assert reconcile("- [ ] #1 A", "- [x] #2 B", aligner=aligner) == "- [ ] #1 A\n- [x] #2 B"
        # the new side is aligned on its normalized form
        assert seen == [(["- [ ] #1 A"], ["- [ ] #2 B"])]

    def test_traces_events(self) -> None:
        console = MockConsole()
        reconcile("- [ ] #1 A", "- [ ] #1 A renamed", console=console)
        assert console.count(Style.DEBUG) >= 2
        assert console.find("Found checklist diff; use old one: - [ ] #1 A")


class TestReapply:
    def test_checks_previously_checked_items(self) -> None:
        body = "- [ ] #1 A\n- [ ] #2 B"
        assert reapply(body, {"1": True, "2": False}) == "- [x] #1 A\n- [ ] #2 B"

    def test_updates_every_occurrence(self) -> None:
        body = "- [ ] #3 C\nnote\n- [ ] #3 C again"
        assert reapply(body, {"3": True}) == "- [x] #3 C\nnote\n- [x] #3 C again"

    def test_does_not_touch_longer_identifiers(self) -> None:
        body = "- [ ] #1 A\n- [ ] #12 L"
        assert reapply(body, {"1": True}) == "- [x] #1 A\n- [ ] #12 L"

    def test_missing_identifier_is_ignored(self) -> None:
        assert reapply("- [ ] #1 A", {"9": True}) == "- [ ] #1 A"

    def test_does_not_touch_indented_lines(self) -> None:
        assert reapply("  - [ ] #1 A", {"1": True}) == "  - [ ] #1 A"


# =============================================================================
# merge_bodies: end-to-end behaviour
# =============================================================================


class TestMergeBodies:
    def test_documented_scenario(self) -> None:
        old = "- [x] #1 A\n- [ ] #2 B\n"
        new = "- [ ] #1 A\n- [ ] #3 C\n"
        assert merge_bodies(old, new) == "- [x] #1 A\n- [ ] #2 B\n- [ ] #3 C\n"

    def test_checked_state_survives_regeneration(self) -> None:
        old = "- [ ] #6 six\n- [x] #7 foo\n"
        new = "- [ ] #6 six\n- [ ] #7 foo\n- [ ] #8 eight\n"
        merged = merge_bodies(old, new)
        assert "- [x] #7 foo" in merged.splitlines()
        assert merged == "- [ ] #6 six\n- [x] #7 foo\n- [ ] #8 eight\n"

    def test_checked_state_survives_title_change(self) -> None:
        old = "- [x] #7 foo @alice\n"
        new = "- [ ] #7 foo (renamed) @alice\n"
        assert merge_bodies(old, new) == "- [x] #7 foo @alice\n"

    def test_new_only_entry_appears(self) -> None:
        old = "- [ ] #1 A\n- [x] #2 B\n"
        new = "- [ ] #1 A\n- [ ] #2 B\n- [ ] #9 N\n"
        assert "- [ ] #9 N" in merge_bodies(old, new).splitlines()

    def test_new_entry_next_to_manual_todo_appears(self) -> None:
        old = "- [x] #1 A\n- [ ] confirm rollout plan\n"
        new = "- [ ] #1 A\n- [ ] #9 N\n"
        assert merge_bodies(old, new) == "- [x] #1 A\n- [ ] confirm rollout plan\n- [ ] #9 N\n"

    def test_new_entry_replacing_only_manual_todo_appears(self) -> None:
        merged = merge_bodies("- [ ] confirm rollout plan\n", "- [ ] #9 N\n")
        assert merged == "- [ ] confirm rollout plan\n- [ ] #9 N\n"

    def test_old_only_entry_is_retained(self) -> None:
        old = "- [ ] #3 C\n- [x] #4 D\n"
        new = "- [ ] #4 D\n- [ ] #5 E\n"
        merged = merge_bodies(old, new)
        assert merged == "- [ ] #3 C\n- [x] #4 D\n- [ ] #5 E\n"

    def test_non_checklist_lines_are_kept_old_first(self) -> None:
        old = "Deploy notes: v1\n- [x] #1 A\n"
        new = "Deploy notes: v2\n- [ ] #1 A\n"
        merged = merge_bodies(old, new)
        assert merged == "Deploy notes: v1\nDeploy notes: v2\n- [x] #1 A\n"

    def test_manual_lines_are_kept(self) -> None:
        old = "- [x] #1 A\n  - verified on staging by ops\n- [ ] #2 B\n"
        new = "- [ ] #1 A\n- [ ] #2 B\n"
        assert merge_bodies(old, new) == old

    def test_identical_bodies_with_checked_line(self) -> None:
        body = "- [ ] #1 A\n- [x] #2 B\n- [ ] #3 C"
        assert merge_bodies(body, body) == body

    def test_empty_old_body(self) -> None:
        new = "- [ ] #1 A @alice\n- [ ] #2 B\n"
        assert merge_bodies("", new) == new

    def test_github_crlf_body(self) -> None:
        old = "- [x] #1 A\r\n- [ ] #2 B"
        new = "- [ ] #1 A\n- [ ] #2 B\n- [ ] #3 C"
        assert merge_bodies(old, new) == "- [x] #1 A\n- [ ] #2 B\n- [ ] #3 C"

    def test_repeated_runs_are_stable(self) -> None:
        old = "- [x] #1 A\n- [ ] #2 B\n"
        new = "- [ ] #1 A\n- [ ] #2 B\n- [ ] #3 C\n"
        once = merge_bodies(old, new)
        assert merge_bodies(once, new) == once


# =============================================================================
# try_merge_bodies
# =============================================================================


class TestTryMergeBodies:
    def test_ok(self) -> None:
        result = try_merge_bodies("- [x] #1 A", "- [ ] #1 A")
        assert result == Ok("- [x] #1 A")

    def test_aligner_failure_is_reported(self) -> None:
        def broken(old: Sequence[str], new: Sequence[str]) -> list[AlignmentEvent]:
            raise RuntimeError("boom")

        result = try_merge_bodies("a", "b", aligner=broken)
        assert isinstance(result, Err)
        assert result.error == MergeFailed(message="RuntimeError: boom")

    def test_inconsistent_aligner_output_is_reported(self) -> None:
        def too_many_inserts(old: Sequence[str], new: Sequence[str]) -> list[AlignmentEvent]:
            return [Insert("x"), Insert("y")]

        result = try_merge_bodies("", "only one line", aligner=too_many_inserts)
        assert isinstance(result, Err)
        assert result.error.message.startswith("IndexError")
