from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from cli import main, tokenize


@pytest.mark.parametrize("line,expected", [
    ("", []),
    ("   ", []),
    ("show", ["show"]),
    ("  add   buy   milk  ", ["add", "buy milk"]),
    ("update 3 new text", ["update", "3 new text"]),
])
def test_tokenize(line: str, expected: list) -> None:
    assert tokenize(line) == expected


def test_interactive_session(tasks_path: Path) -> None:
    runner = CliRunner()
    session = "add buy milk\nshow\n\ndone 1\nshow\nexit\nadd never reached\n"
    result = runner.invoke(main, ["--file", str(tasks_path)], input=session)

    assert result.exit_code == 0, result.output
    assert "Added task 1: buy milk" in result.output
    assert "[ ] 1 buy milk" in result.output
    assert "[x] 1 buy milk" in result.output
    assert "Goodbye." in result.output
    assert "never reached" not in result.output

    data = json.loads(tasks_path.read_text(encoding="utf-8"))
    assert data["tasks"] == [{"id": 1, "description": "buy milk", "completed": True}]


def test_end_of_input_leaves_cleanly(tasks_path: Path) -> None:
    result = CliRunner().invoke(main, ["--file", str(tasks_path)], input="add a\n")
    assert result.exit_code == 0
    assert "Goodbye." in result.output
    assert tasks_path.exists()


def test_one_shot_commands(tasks_path: Path) -> None:
    runner = CliRunner()
    assert runner.invoke(main, ["-f", str(tasks_path), "add", "call", "the", "bank"]).exit_code == 0
    shown = runner.invoke(main, ["-f", str(tasks_path), "show"])
    assert shown.exit_code == 0
    assert shown.output.strip() == "[ ] 1 call the bank"


def test_one_shot_failure_exits_nonzero(tasks_path: Path) -> None:
    result = CliRunner().invoke(main, ["-f", str(tasks_path), "delete", "-1"])
    assert result.exit_code == 1
    assert "Invalid id: '-1'" in result.output
    assert not tasks_path.exists()


def test_ids_survive_restart(tasks_path: Path) -> None:
    runner = CliRunner()
    args = ["-f", str(tasks_path)]
    runner.invoke(main, [*args, "add", "first"])
    runner.invoke(main, [*args, "add", "second"])
    runner.invoke(main, [*args, "delete", "2"])
    result = runner.invoke(main, [*args, "add", "third"])
    assert "Added task 3: third" in result.output


def test_tasks_file_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    target = tmp_path / "env-tasks.json"
    monkeypatch.setenv("TODO_FILE", str(target))
    result = CliRunner().invoke(main, ["add", "from env"])
    assert result.exit_code == 0
    assert json.loads(target.read_text(encoding="utf-8"))["tasks"][0]["description"] == "from env"


def test_option_like_words_belong_to_the_description(tasks_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["-f", str(tasks_path), "add", "pass", "-f", "flag", "to", "tar"])
    assert result.exit_code == 0, result.output
    assert "Added task 1: pass -f flag to tar" in result.output
    data = json.loads(tasks_path.read_text(encoding="utf-8"))
    assert data["tasks"][0]["description"] == "pass -f flag to tar"
    assert not Path("flag").exists()


def test_log_file_receives_debug_lines(tasks_path: Path, tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "todo.log"
    result = CliRunner().invoke(main, ["-f", str(tasks_path), "--log-file", str(log_file), "add", "x"])
    assert result.exit_code == 0, result.output
    content = log_file.read_text(encoding="utf-8")
    assert "DEBUG storage: Saved 1 tasks to" in content
    assert "DEBUG" not in result.output


def test_undecodable_input_line_is_skipped(tasks_path: Path) -> None:
    result = CliRunner().invoke(main, ["-f", str(tasks_path)], input=b"\xff\xfe\n")
    assert result.exit_code == 0, result.output
    assert "Input is not valid text" in result.output
    assert "Goodbye." in result.output
