import json
import logging
import shlex
import shutil
import subprocess
import sys
from pathlib import Path

import pytest

from interface import tasks_app
from interface.tasks_app import build_parser, main


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TCR_TASKS_CONFIG", str(tmp_path / "config.yaml"))
    monkeypatch.delenv("TCR_TASKS_TEST_COMMAND", raising=False)
    monkeypatch.delenv("TCR_TASKS_LOG_FILE", raising=False)
    yield
    logging.getLogger("tcr_tasks").handlers.clear()


def _write_tasks(path: Path) -> None:
    path.write_text("# Tasks\n\n- [ ] Write spec\n- [x] Set up repo\n", encoding="utf-8")


def test_parser_defaults_to_tui():
    args = build_parser().parse_args([])
    assert args.command is None
    assert args.func is tasks_app.cmd_tui


def test_export_json_to_explicit_output(tmp_path: Path):
    task_file = tmp_path / "tasks.md"
    _write_tasks(task_file)
    out = tmp_path / "snapshot.json"

    code = main(["--file", str(task_file), "export", "--format", "json", "--output", str(out)])

    assert code == 0
    assert json.loads(out.read_text(encoding="utf-8")) == [
        {"id": 1, "description": "Write spec", "status": "pending"},
        {"id": 2, "description": "Set up repo", "status": "done"},
    ]


def test_export_all_writes_next_to_task_file(tmp_path: Path, capsys):
    task_file = tmp_path / "tasks.md"
    _write_tasks(task_file)
    assert main(["--file", str(task_file), "export"]) == 0
    assert (tmp_path / "tasks.json").exists()
    assert (tmp_path / "tasks.export.md").exists()
    printed = capsys.readouterr().out.splitlines()
    assert len(printed) == 2


def test_export_output_needs_single_format(tmp_path: Path, capsys):
    task_file = tmp_path / "tasks.md"
    _write_tasks(task_file)
    assert main(["--file", str(task_file), "export", "--output", str(tmp_path / "x")]) == 2
    assert "--output" in capsys.readouterr().err


def test_unparseable_task_file_exits_with_1(tmp_path: Path, capsys):
    task_file = tmp_path / "tasks.md"
    task_file.write_text("- [?] broken\n", encoding="utf-8")
    assert main(["--file", str(task_file), "export"]) == 1
    err = capsys.readouterr().err
    assert "tasks.md:1" in err
    assert not (tmp_path / "tasks.json").exists()


def test_open_session_uses_configured_command(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("TCR_TASKS_TEST_COMMAND", "tox -q")
    args = build_parser().parse_args(["--file", str(tmp_path / "tasks.md")])
    session = tasks_app.open_session(args)
    assert session.tcr.command == "tox -q"
    assert session.background_tcr
    assert session.tasks() == []

    args = build_parser().parse_args(["--file", str(tmp_path / "tasks.md"), "--test-command", "make test"])
    assert tasks_app.open_session(args).tcr.command == "make test"


def test_log_file_handler_only_when_requested(tmp_path: Path, monkeypatch):
    log_file = tmp_path / "tcr.log"
    monkeypatch.setenv("TCR_TASKS_LOG_FILE", str(log_file))
    tasks_app.setup_logging(headless=False)
    logging.getLogger("tcr_tasks.session").warning("hello log")
    for handler in logging.getLogger("tcr_tasks").handlers:
        handler.flush()
    assert "hello log" in log_file.read_text(encoding="utf-8")

    monkeypatch.delenv("TCR_TASKS_LOG_FILE")
    tasks_app.setup_logging(headless=False)
    handlers = logging.getLogger("tcr_tasks").handlers
    assert [type(h) for h in handlers] == [logging.NullHandler]


@pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")
class TestTcrCommand:
    def _repo(self, tmp_path: Path) -> Path:
        for args in (
            ["init", "-q"],
            ["config", "user.email", "tcr@example.com"],
            ["config", "user.name", "TCR Tests"],
            ["config", "commit.gpgsign", "false"],
        ):
            subprocess.run(["git", *args], cwd=tmp_path, check=True, capture_output=True)
        (tmp_path / "README.md").write_text("demo\n", encoding="utf-8")
        subprocess.run(["git", "add", "-A"], cwd=tmp_path, check=True, capture_output=True)
        subprocess.run(["git", "commit", "-q", "-m", "init"], cwd=tmp_path, check=True, capture_output=True)
        return tmp_path

    def _command(self, code: int) -> str:
        return f"{shlex.quote(sys.executable)} -c \"import sys; sys.exit({code})\""

    def test_pass_commits_and_returns_0(self, tmp_path: Path):
        repo = self._repo(tmp_path)
        _write_tasks(repo / "tasks.md")
        code = main(["--file", str(repo / "tasks.md"), "--test-command", self._command(0), "tcr", "-m", "TCR: green"])
        assert code == 0
        log = subprocess.run(["git", "log", "-1", "--format=%s"], cwd=repo, check=True, capture_output=True, text=True)
        assert log.stdout.strip() == "TCR: green"

    def test_fail_reverts_and_returns_1(self, tmp_path: Path):
        repo = self._repo(tmp_path)
        _write_tasks(repo / "tasks.md")
        code = main(["--file", str(repo / "tasks.md"), "--test-command", self._command(3), "tcr"])
        assert code == 1
        # never committed, so the revert removes the untracked task file
        assert not (repo / "tasks.md").exists()

    def test_spawn_error_returns_2(self, tmp_path: Path, capsys):
        repo = self._repo(tmp_path)
        code = main(["--file", str(repo / "tasks.md"), "--test-command", "no-such-binary-xyz", "tcr"])
        assert code == 2
        assert "TCR error" in capsys.readouterr().err
