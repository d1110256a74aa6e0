"""Shared test fixtures for the bsh test suite."""

import io
from datetime import datetime
from pathlib import Path

import pytest
from rich.console import Console

from bsh.config import Settings
from bsh.executor import ExitOutcome
from bsh.repository import Repository


class RecordingExecutor:
    """Executor stand-in that records commands instead of running them."""

    def __init__(self, exit_code: int = 0):
        self.exit_code = exit_code
        self.commands = []

    def execute(self, command: str) -> ExitOutcome:
        self.commands.append(command)
        return ExitOutcome(command=command, exit_code=self.exit_code, ran_at=datetime.now())


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "commands.yaml"


@pytest.fixture
def repo(store_path: Path) -> Repository:
    """An empty store that runs commands through a non-interactive shell."""
    repository = Repository(store_path)
    repository.settings = Settings(shell="/bin/sh", interactive=False)
    repository.save()
    return repository


@pytest.fixture
def executor() -> RecordingExecutor:
    return RecordingExecutor()


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)
