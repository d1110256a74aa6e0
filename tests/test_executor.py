"""Tests for running commands through the host shell."""

import pytest

from bsh.errors import SpawnError
from bsh.executor import Executor


@pytest.fixture
def sh():
    return Executor(shell="/bin/sh", interactive=False)


class TestExecutor:
    def test_success(self, sh):
        outcome = sh.execute("true")
        assert outcome.exit_code == 0
        assert outcome.succeeded
        assert outcome.command == "true"
        assert outcome.ran_at is not None

    def test_nonzero_exit_is_reported_not_raised(self, sh):
        outcome = sh.execute("exit 3")
        assert outcome.exit_code == 3
        assert not outcome.succeeded

    def test_pipes_and_redirects_go_through_the_shell(self, sh, tmp_path):
        target = tmp_path / "out.txt"
        sh.execute(f"echo hello | tr a-z A-Z > {target}")
        assert target.read_text() == "HELLO\n"

    def test_environment_expansion(self, sh, tmp_path, monkeypatch):
        monkeypatch.setenv("BSH_TEST_VALUE", "expanded")
        target = tmp_path / "env.txt"
        sh.execute(f'printf "%s" "$BSH_TEST_VALUE" > {target}')
        assert target.read_text() == "expanded"

    def test_killed_by_signal_reports_shell_style_code(self, sh):
        outcome = sh.execute("kill -TERM $$")
        assert outcome.exit_code == 128 + 15

    def test_missing_shell_raises_spawn_error(self, tmp_path):
        executor = Executor(shell=str(tmp_path / "no-such-shell"), interactive=False)
        with pytest.raises(SpawnError):
            executor.execute("true")


class TestArgv:
    def test_interactive_shell(self):
        assert Executor(shell="/bin/bash").argv("ls") == ["/bin/bash", "-i", "-c", "ls"]

    def test_non_interactive_shell(self):
        executor = Executor(shell="/bin/zsh", interactive=False)
        assert executor.argv("ls") == ["/bin/zsh", "-c", "ls"]

    def test_defaults_to_login_shell(self, monkeypatch):
        monkeypatch.setenv("SHELL", "/usr/bin/fish")
        assert Executor().shell == "/usr/bin/fish"

    def test_falls_back_to_sh(self, monkeypatch):
        monkeypatch.delenv("SHELL", raising=False)
        assert Executor().shell == "/bin/sh"
