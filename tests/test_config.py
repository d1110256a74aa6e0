"""Tests for store discovery and settings."""

from pathlib import Path

from bsh.config import Settings, config_home, resolve_store_path


class TestResolveStorePath:
    def test_explicit_path_wins(self, tmp_path):
        env = {"BSH_STORE": str(tmp_path / "env.yaml")}
        path = resolve_store_path(str(tmp_path / "explicit.yaml"), env=env, cwd=tmp_path)
        assert path == (tmp_path / "explicit.yaml").resolve()

    def test_environment_variable(self, tmp_path):
        env = {"BSH_STORE": str(tmp_path / "env.yaml")}
        assert resolve_store_path(env=env, cwd=tmp_path) == (tmp_path / "env.yaml").resolve()

    def test_existing_file_in_working_directory(self, tmp_path):
        (tmp_path / "commands.yaml").write_text("categories: {}\n")
        assert resolve_store_path(env={}, cwd=tmp_path) == (tmp_path / "commands.yaml").resolve()

    def test_falls_back_to_xdg_config_home(self, tmp_path):
        env = {"XDG_CONFIG_HOME": str(tmp_path / "xdg")}
        path = resolve_store_path(env=env, cwd=tmp_path)
        assert path == tmp_path / "xdg" / "bsh" / "commands.yaml"

    def test_default_config_home(self, monkeypatch, tmp_path):
        monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path))
        assert config_home({}) == tmp_path / ".config" / "bsh"


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_dict(None)
        assert settings == Settings(shell=None, interactive=True, strict_add=True)

    def test_round_trip(self):
        settings = Settings(shell="/bin/zsh", interactive=False, strict_add=False)
        assert Settings.from_dict(settings.to_dict()) == settings

    def test_unknown_keys_are_ignored(self):
        assert Settings.from_dict({"theme": "dark"}) == Settings()

    def test_environment_override(self):
        settings = Settings(shell="/bin/zsh").with_overrides(env={"BSH_SHELL": "/bin/dash"})
        assert settings.shell == "/bin/dash"

    def test_explicit_shell_beats_environment(self):
        settings = Settings().with_overrides(env={"BSH_SHELL": "/bin/dash"}, shell="/bin/ksh")
        assert settings.shell == "/bin/ksh"

    def test_resolve_shell_order(self):
        assert Settings(shell="/bin/zsh").resolve_shell({"SHELL": "/bin/bash"}) == "/bin/zsh"
        assert Settings().resolve_shell({"SHELL": "/bin/bash"}) == "/bin/bash"
        assert Settings().resolve_shell({}) == "/bin/sh"
