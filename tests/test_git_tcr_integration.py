"""End-to-end TCR runs against a throwaway git repository."""

import shlex
import shutil
import subprocess
import sys
import threading
from pathlib import Path

import pytest

from core import ProcessSpawnError, Status, VcsError
from application.tcr import TcrAction, TcrOrchestrator
from infrastructure.file_repository import FileTaskRepository
from infrastructure.git_vcs import GitVersionControl
from infrastructure.process_runner import SubprocessTestRunner
from interface.session import EditSession

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

PASS = f"{shlex.quote(sys.executable)} -c \"import sys; sys.exit(0)\""
FAIL = f"{shlex.quote(sys.executable)} -c \"import sys; sys.exit(1)\""


def _git(repo: Path, *args: str) -> str:
    return subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True).stdout


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    _git(tmp_path, "init", "-q")
    _git(tmp_path, "config", "user.email", "tcr@example.com")
    _git(tmp_path, "config", "user.name", "TCR Tests")
    _git(tmp_path, "config", "commit.gpgsign", "false")
    (tmp_path / "README.md").write_text("demo\n", encoding="utf-8")
    _git(tmp_path, "add", "-A")
    _git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


def _session(repo: Path, command: str) -> EditSession:
    repository = FileTaskRepository(repo / "tasks.md")
    tcr = TcrOrchestrator(
        repository,
        SubprocessTestRunner(cwd=repo),
        GitVersionControl(repo),
        command,
    )
    return EditSession(repository.load(), repository, tcr)


def test_passing_run_commits_saved_task_file(repo: Path):
    session = _session(repo, PASS)
    session.handle_key("a")
    for ch in "Write spec":
        session.handle_key(ch)
    session.handle_key("enter")
    session.handle_key("t")

    record = session.last_tcr_record
    assert record.action_taken is TcrAction.COMMITTED
    assert _git(repo, "log", "-1", "--format=%s").strip() == "TCR: Write spec"
    assert _git(repo, "show", "HEAD:tasks.md") == (repo / "tasks.md").read_text(encoding="utf-8")
    assert _git(repo, "status", "--porcelain") == ""


def test_failing_run_restores_committed_state(repo: Path):
    session = _session(repo, PASS)
    session.handle_key("a")
    for ch in "Keep me":
        session.handle_key(ch)
    session.handle_key("enter")
    session.handle_key("t")
    committed = (repo / "tasks.md").read_text(encoding="utf-8")
    head = _git(repo, "rev-parse", "HEAD")

    session.tcr.set_command(FAIL)
    session.handle_key("space")
    session.handle_key("a")
    for ch in "Throwaway":
        session.handle_key(ch)
    session.handle_key("enter")
    (repo / "scratch.py").write_text("print('wip')\n", encoding="utf-8")
    session.handle_key("t")

    assert session.last_tcr_record.action_taken is TcrAction.REVERTED
    assert session.last_tcr_record.exit_status == 1
    assert (repo / "tasks.md").read_text(encoding="utf-8") == committed
    assert not (repo / "scratch.py").exists()
    assert _git(repo, "rev-parse", "HEAD") == head
    assert [(t.description, t.status) for t in session.tasks()] == [("Keep me", Status.PENDING)]
    assert not session.dirty


def test_commit_with_nothing_staged_is_still_a_commit(repo: Path):
    tcr = TcrOrchestrator(FileTaskRepository(repo / "tasks.md"), SubprocessTestRunner(cwd=repo), GitVersionControl(repo), PASS)
    repository = FileTaskRepository(repo / "tasks.md")
    store = repository.load()
    store.add("one")
    tcr.run(store)
    head = _git(repo, "rev-parse", "HEAD")

    record = tcr.run(store)
    assert record.action_taken is TcrAction.COMMITTED
    assert _git(repo, "rev-parse", "HEAD") == head


def test_missing_executable_is_a_spawn_error(repo: Path):
    runner = SubprocessTestRunner(cwd=repo)
    with pytest.raises(ProcessSpawnError):
        runner.run("definitely-not-a-real-test-binary --flag")
    with pytest.raises(ProcessSpawnError):
        runner.run("   ")
    with pytest.raises(ProcessSpawnError):
        runner.run("pytest 'unterminated")


def test_runner_keeps_output_tail(repo: Path):
    runner = SubprocessTestRunner(cwd=repo)
    code = runner.run(f"{shlex.quote(sys.executable)} -c \"print('hello from tests')\"")
    assert code == 0
    assert "hello from tests" in runner.last_output


def test_vcs_outside_repository_fails(tmp_path: Path):
    vcs = GitVersionControl(tmp_path)
    with pytest.raises(VcsError) as exc:
        vcs.revert_all()
    assert exc.value.fatal
    with pytest.raises(VcsError):
        vcs.commit("nothing")


def test_revert_from_subdirectory_cleans_whole_repository(repo: Path):
    docs = repo / "docs"
    docs.mkdir()
    repository = FileTaskRepository(docs / "tasks.md")
    tcr = TcrOrchestrator(repository, SubprocessTestRunner(cwd=docs), GitVersionControl(docs), PASS)
    store = repository.load()
    store.add("nested")
    tcr.run(store)
    assert _git(repo, "show", "HEAD:docs/tasks.md").startswith("---")

    (repo / "wip.py").write_text("print('wip')\n", encoding="utf-8")
    (docs / "notes.txt").write_text("draft\n", encoding="utf-8")
    (repo / "README.md").write_text("changed\n", encoding="utf-8")
    tcr.set_command(FAIL)
    record = tcr.run(store)

    assert record.action_taken is TcrAction.REVERTED
    assert not (repo / "wip.py").exists()
    assert not (docs / "notes.txt").exists()
    assert (repo / "README.md").read_text(encoding="utf-8") == "demo\n"
    assert _git(repo, "status", "--porcelain") == ""


def test_work_tree_is_repository_top_level(repo: Path):
    nested = repo / "a" / "b"
    nested.mkdir(parents=True)
    assert GitVersionControl(nested).work_tree == repo.resolve()


def test_background_revert_applies_after_posted_result(repo: Path):
    pending = []
    delivered = threading.Event()

    def post(fn):
        pending.append(fn)
        delivered.set()

    repository = FileTaskRepository(repo / "tasks.md")
    noisy_fail = f"{shlex.quote(sys.executable)} -c \"import sys; print('boom'); sys.exit(3)\""
    tcr = TcrOrchestrator(repository, SubprocessTestRunner(cwd=repo), GitVersionControl(repo), PASS)
    session = EditSession(repository.load(), repository, tcr, background_tcr=True, post=post)
    session.handle_key("a")
    for ch in "Committed":
        session.handle_key(ch)
    session.handle_key("enter")
    session.handle_key("t")
    assert delivered.wait(30)
    pending.pop()()
    assert session.notice.key == "MSG_TCR_COMMITTED"

    delivered.clear()
    tcr.set_command(noisy_fail)
    session.handle_key("space")
    session.handle_key("t")
    assert delivered.wait(30)
    session.handle_key("space")
    assert session.notice.key == "MSG_TCR_BUSY"
    pending.pop()()

    assert session.notice.key == "MSG_TCR_REVERTED_OUTPUT"
    assert "boom" in session.test_output
    assert [(t.description, t.status) for t in session.tasks()] == [("Committed", Status.PENDING)]
    assert _git(repo, "status", "--porcelain") == ""
