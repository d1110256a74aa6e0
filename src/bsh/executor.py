"""Run a fully substituted command through the host shell."""

import os
import subprocess
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from bsh.errors import SpawnError
from bsh.log import logger


@dataclass(frozen=True)
class ExitOutcome:
    """Result of one executed command."""
    command: str
    exit_code: int
    ran_at: datetime

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


class Executor:
    """Hands commands to a shell, inheriting the terminal's streams."""

    def __init__(self, shell: Optional[str] = None, interactive: bool = True):
        self.shell = shell or os.environ.get("SHELL") or "/bin/sh"
        self.interactive = interactive

    def argv(self, command: str) -> List[str]:
        if self.interactive:
            return [self.shell, "-i", "-c", command]
        return [self.shell, "-c", command]

    def execute(self, command: str) -> ExitOutcome:
        """Run *command* and block until the shell exits.

        A non-zero exit is returned, not raised. SpawnError is raised only
        when the shell itself cannot be started.
        """
        ran_at = datetime.now()
        logger.debug("Executing %r with %s", command, self.shell)
        try:
            process = subprocess.Popen(self.argv(command))
        except OSError as e:
            raise SpawnError(f"Failed to start shell '{self.shell}': {e}") from e

        while True:
            try:
                returncode = process.wait()
                break
            except KeyboardInterrupt:
                # The child got the same SIGINT; let it decide whether to exit.
                continue

        if returncode < 0:
            exit_code = 128 - returncode
            logger.debug("Command killed by signal %d", -returncode)
        else:
            exit_code = returncode
        return ExitOutcome(command=command, exit_code=exit_code, ran_at=ran_at)
