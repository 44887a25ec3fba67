from __future__ import annotations

from pathlib import Path

from typer.testing import CliRunner

from prr.cli.app import app

runner = CliRunner()

OLD = "Release 2024-05-01\n- [x] #1 Add search @alice\nQA: ok\n"
NEW = "Release 2024-05-02\n- [ ] #1 Add search @alice\n- [ ] #2 Fix cart @bob\n"
MERGED = "Release 2024-05-01\nRelease 2024-05-02\n- [x] #1 Add search @alice\nQA: ok\n- [ ] #2 Fix cart @bob\n"


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_merge_to_stdout(tmp_path: Path) -> None:
    old = _write(tmp_path, "old.md", "- [x] #1 A\n")
    new = _write(tmp_path, "new.md", "- [ ] #1 A\n- [ ] #2 B\n")

    result = runner.invoke(app, ["merge", str(old), str(new)])
    assert result.exit_code == 0
    assert result.stdout == "- [x] #1 A\n- [ ] #2 B\n"


def test_merge_keeps_free_text_and_checks(tmp_path: Path) -> None:
    old = _write(tmp_path, "old.md", OLD)
    new = _write(tmp_path, "new.md", NEW)

    result = runner.invoke(app, ["merge", str(old), str(new)])
    assert result.exit_code == 0
    assert result.stdout == MERGED


def test_merge_reads_old_body_from_stdin(tmp_path: Path) -> None:
    new = _write(tmp_path, "new.md", "- [ ] #1 A\n")

    result = runner.invoke(app, ["merge", "-", str(new)], input="- [x] #1 A\n")
    assert result.exit_code == 0
    assert result.stdout == "- [x] #1 A\n"


def test_merge_to_output_file(tmp_path: Path) -> None:
    old = _write(tmp_path, "old.md", "- [x] #1 A\n")
    new = _write(tmp_path, "new.md", "- [ ] #1 A\n")
    out = tmp_path / "merged.md"

    result = runner.invoke(app, ["merge", str(old), str(new), "-o", str(out)])
    assert result.exit_code == 0
    assert result.stdout == ""
    assert out.read_text(encoding="utf-8") == "- [x] #1 A\n"


def test_merge_missing_input(tmp_path: Path) -> None:
    new = _write(tmp_path, "new.md", "- [ ] #1 A\n")

    result = runner.invoke(app, ["merge", str(tmp_path / "nope.md"), str(new)])
    assert result.exit_code == 5
