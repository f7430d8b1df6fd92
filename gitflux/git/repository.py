"""Read-only access to the git metadata gitflux needs.

Shells out to the ``git`` executable; nothing here modifies the repository.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

from gitflux.core.types import GitFluxError

logger = logging.getLogger(__name__)


class GitError(GitFluxError):
    """Raised when git cannot be run or reports an error."""


@dataclass(frozen=True)
class RepositorySnapshot:
    """The branch and tag names a derivation is computed from."""

    branch: str | None
    head_tags: tuple[str, ...] = ()
    all_tags: tuple[str, ...] = ()


class GitRepository:
    """A git working tree, queried through the git command line.

    Usage:
        repo = GitRepository(".")
        snapshot = repo.snapshot()
    """

    def __init__(self, path: str | Path = ".", git_executable: str = "git", timeout: float = 30.0) -> None:
        self._path = Path(path)
        self._git = git_executable
        self._timeout = timeout

    @property
    def path(self) -> Path:
        return self._path

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def current_branch(self) -> str | None:
        """The checked-out branch name, or None when HEAD is detached."""
        name = self._run("rev-parse", "--abbrev-ref", "HEAD").strip()
        if not name or name == "HEAD":
            return None
        return name

    def head_tags(self) -> list[str]:
        """Names of the tags pointing at HEAD."""
        return self._lines(self._run("tag", "--points-at", "HEAD"))

    def all_tags(self) -> list[str]:
        """Names of every tag in the repository."""
        return self._lines(self._run("tag", "--list"))

    def snapshot(self) -> RepositorySnapshot:
        """Read the branch and tags in one go."""
        snapshot = RepositorySnapshot(
            branch=self.current_branch(),
            head_tags=tuple(self.head_tags()),
            all_tags=tuple(self.all_tags()),
        )
        logger.debug(
            "Read git metadata from %s: branch=%s, %d tags at HEAD, %d tags total",
            self._path,
            snapshot.branch,
            len(snapshot.head_tags),
            len(snapshot.all_tags),
        )
        return snapshot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, *args: str) -> str:
        command = [self._git, *args]
        try:
            completed = subprocess.run(
                command,
                cwd=self._path,
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise GitError(f"git executable not found: {self._git}") from exc
        except subprocess.TimeoutExpired as exc:
            raise GitError(f"'git {' '.join(args)}' timed out after {self._timeout}s") from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
            raise GitError(f"'git {' '.join(args)}' failed in {self._path}: {detail}") from exc
        return completed.stdout

    @staticmethod
    def _lines(output: str) -> list[str]:
        return [line.strip() for line in output.splitlines() if line.strip()]
