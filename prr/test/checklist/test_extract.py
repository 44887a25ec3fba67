"""Tests for prr.checklist.extract."""

from __future__ import annotations

import pytest

from prr.checklist.extract import ChecklistLine, extract, normalize, parse_line, split_lines


class TestSplitLines:
    def test_empty_body_has_no_lines(self) -> None:
        assert split_lines("") == []

    def test_trailing_newline_keeps_empty_last_line(self) -> None:
        assert split_lines("a\nb\n") == ["a", "b", ""]

    def test_crlf(self) -> None:
        assert split_lines("a\r\nb") == ["a", "b"]

    def test_bare_carriage_return_is_not_a_separator(self) -> None:
        assert split_lines("a\rb\r\nc") == ["a\rb", "c"]


class TestParseLine:
    def test_unchecked_item(self) -> None:
        item = parse_line("- [ ] #12 Fix the thing @alice")
        assert item == ChecklistLine(raw="- [ ] #12 Fix the thing @alice", identifier="12")
        assert item.is_item
        assert item.checked is False

    def test_checked_item(self) -> None:
        item = parse_line("- [x] #7 Done")
        assert item.identifier == "7"
        assert item.checked is True

    @pytest.mark.parametrize(
        "line",
        [
            "Release 2024-01-01",
            "",
            "- [X] #1 upper-case X is not a check mark",
            "  - [ ] #1 indented",
            "- [ ] #??? THIS IS DUMMY PULL REQUEST",
            "* [ ] #1 other bullet",
            "- [ ] 1 missing hash",
        ],
    )
    def test_non_items(self, line: str) -> None:
        item = parse_line(line)
        assert item.identifier is None
        assert item.is_item is False
        assert item.raw == line


class TestExtract:
    def test_collects_states(self) -> None:
        extracted = extract("- [x] #1 A\n- [ ] #2 B\n")
        assert dict(extracted.states) == {"1": True, "2": False}

    def test_normalizes_markers_only(self) -> None:
        extracted = extract("- [x] #1 A [x]\n- [ ] #2 B\n")
        assert extracted.normalized == "- [ ] #1 A [x]\n- [ ] #2 B\n"

    def test_keeps_non_item_lines_verbatim(self) -> None:
        body = "Header\r\n- [x] #3 C\r\nfooter - [x] #4"
        extracted = extract(body)
        assert extracted.normalized == "Header\r\n- [ ] #3 C\r\nfooter - [x] #4"
        assert dict(extracted.states) == {"3": True}

    def test_last_occurrence_wins(self) -> None:
        extracted = extract("- [x] #5 first\n- [ ] #5 second\n")
        assert extracted.states["5"] is False

    def test_no_items(self) -> None:
        extracted = extract("just text\n")
        assert dict(extracted.states) == {}
        assert extracted.normalized == "just text\n"

    def test_empty_body(self) -> None:
        extracted = extract("")
        assert dict(extracted.states) == {}
        assert extracted.normalized == ""

    def test_states_are_read_only(self) -> None:
        extracted = extract("- [x] #1 A")
        with pytest.raises(TypeError):
            extracted.states["1"] = False  # type: ignore[index]


def test_normalize_is_idempotent() -> None:
    body = "- [x] #1 A\n- [ ] #2 B\nnote"
    assert normalize(normalize(body)) == normalize(body) == "- [ ] #1 A\n- [ ] #2 B\nnote"
