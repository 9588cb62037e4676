"""Blocking wrapper around the git binary for cloning and pulling repos."""

import logging
import subprocess
from pathlib import Path

from .errors import SyncError

logger = logging.getLogger(__name__)


class GitClient:
    """Runs git clone and pull, raising SyncError on failure."""

    def __init__(self, executable: str = "git"):
        self.executable = executable

    def clone(self, url: str, branch: str, dest: Path) -> None:
        """Clone a single branch of url into dest."""
        self._run(["clone", "-b", branch, url, str(dest)])

    def pull(self, dest: Path, branch: str) -> None:
        """Pull branch from origin into the working tree at dest."""
        self._run(["-C", str(dest), "pull", "origin", branch])

    def _run(self, args: list[str]) -> None:
        cmd = [self.executable, *args]
        logger.debug("Running %s", " ".join(cmd))

        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise SyncError(f"Could not run {self.executable}: {e}") from e

        if result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip()
            raise SyncError(message or f"git exited with status {result.returncode}")
