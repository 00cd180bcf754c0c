"""git-backed commit/revert pair used by the TCR loop."""

import logging
import subprocess
from pathlib import Path
from typing import Optional

from core import VcsError

logger = logging.getLogger("tcr_tasks.vcs")


class GitVersionControl:
    """Commit scope is the whole working tree (`git add -A`).

    Revert discards every uncommitted change: tracked files go back to HEAD
    and untracked files are removed (ignored files are kept). Both act on the
    repository's top level, whichever subdirectory `repo_dir` points at.
    """

    def __init__(self, repo_dir: Optional[Path] = None, git: str = "git"):
        self.repo_dir = Path(repo_dir or ".").resolve()
        self.git = git
        self._work_tree: Optional[Path] = None

    @property
    def work_tree(self) -> Path:
        """Top level of the repository containing `repo_dir`, resolved once."""
        if self._work_tree is None:
            top = self._git(self.repo_dir, "rev-parse", "--show-toplevel").stdout.strip()
            self._work_tree = Path(top)
        return self._work_tree

    def _git(self, cwd: Path, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                [self.git, *args],
                cwd=cwd,
                check=check,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as exc:
            err_text = (exc.stderr or exc.stdout or "").strip()[:200] or str(exc)
            raise VcsError(f"git {args[0]} failed: {err_text}") from exc
        except OSError as exc:
            raise VcsError(f"Cannot run {self.git}: {exc}") from exc

    def _run(self, *args: str, check: bool = True) -> subprocess.CompletedProcess:
        return self._git(self.work_tree, *args, check=check)

    def commit(self, message: str) -> None:
        self._run("add", "-A")
        staged = self._run("diff", "--cached", "--quiet", check=False)
        if staged.returncode == 0:
            logger.info("nothing to commit")
            return
        if staged.returncode != 1:
            raise VcsError(f"git diff failed: {(staged.stderr or '').strip()[:200]}")
        self._run("commit", "-m", message)
        logger.info("committed: %s", message)

    def revert_all(self) -> None:
        try:
            self._run("reset", "--hard", "HEAD")
            self._run("clean", "-fd")
        except VcsError as exc:
            raise VcsError(str(exc), fatal=True) from exc
        logger.warning("working tree %s reverted to HEAD", self.work_tree)


__all__ = ["GitVersionControl"]
