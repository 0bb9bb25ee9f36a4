"""External command execution."""

import subprocess
from typing import Sequence

from git_worktree_keeper.logging_config import get_logger

logger = get_logger(__name__)


class ProcessRunner:
    """Runs commands with inherited stdin/stdout/stderr."""

    def run(self, args: Sequence[str], cwd: str) -> int:
        """
        Run a command to completion.

        Args:
            args: Program and its arguments
            cwd: Working directory

        Returns:
            The command's exit status

        Raises:
            OSError: if the program cannot be started
        """
        logger.debug(f"Running {' '.join(args)} in {cwd}")
        completed = subprocess.run(list(args), cwd=cwd)
        return completed.returncode
