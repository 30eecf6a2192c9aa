"""Read the version control status of a local project via git subprocess."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class VcsStatus:
    branch: Optional[str]
    sha: Optional[str]
    dirty: bool = False


class GitStatusReader:
    """Current branch, head sha and working tree state of a git checkout."""

    def __init__(self, repo_path: str, timeout: float = 5):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout

    def read(self) -> Optional[VcsStatus]:
        """Return None if ``repo_path`` is not inside a git work tree."""
        if self._git("rev-parse", "--is-inside-work-tree") != "true":
            logger.debug(f"{self.repo_path} is not a git work tree")
            return None

        branch = self._git("rev-parse", "--abbrev-ref", "HEAD")
        sha = self._git("rev-parse", "HEAD")
        porcelain = self._git("status", "--porcelain")
        return VcsStatus(
            # Detached HEAD reports "HEAD"
            branch=branch if branch and branch != "HEAD" else None,
            sha=sha or None,
            dirty=bool(porcelain),
        )

    def _git(self, *args: str) -> Optional[str]:
        try:
            result = subprocess.run(
                ["git", "-C", self.repo_path, *args],
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except (FileNotFoundError, subprocess.TimeoutExpired) as e:
            logger.debug(f"git {args[0]} failed: {e}")
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip()
