"""Store location discovery and runtime settings."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Mapping, Optional

STORE_FILENAME = "commands.yaml"


@dataclass(frozen=True)
class Settings:
    """User settings kept in the ``settings`` section of the store file."""
    shell: Optional[str] = None
    interactive: bool = True
    strict_add: bool = True

    def to_dict(self) -> Dict:
        """Convert settings to dictionary for YAML serialization."""
        return {
            "shell": self.shell,
            "interactive": self.interactive,
            "strict_add": self.strict_add,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict]) -> "Settings":
        """Create Settings from dictionary, ignoring unknown keys."""
        data = data or {}
        shell = data.get("shell")
        return cls(
            shell=str(shell) if shell else None,
            interactive=bool(data.get("interactive", True)),
            strict_add=bool(data.get("strict_add", True)),
        )

    def with_overrides(self, env: Mapping[str, str] = os.environ,
                       shell: Optional[str] = None) -> "Settings":
        """Apply BSH_SHELL from the environment, then an explicit shell."""
        result = self
        if env.get("BSH_SHELL"):
            result = replace(result, shell=env["BSH_SHELL"])
        if shell:
            result = replace(result, shell=shell)
        return result

    def resolve_shell(self, env: Mapping[str, str] = os.environ) -> str:
        """Shell used to run commands: settings, then $SHELL, then /bin/sh."""
        return self.shell or env.get("SHELL") or "/bin/sh"


def config_home(env: Mapping[str, str] = os.environ) -> Path:
    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "bsh"
    return Path.home() / ".config" / "bsh"


def resolve_store_path(explicit: Optional[str] = None,
                       env: Mapping[str, str] = os.environ,
                       cwd: Optional[Path] = None) -> Path:
    """Locate the command store.

    Search order: explicit path, $BSH_STORE, ./commands.yaml when it
    already exists, then the per-user config directory.
    """
    if explicit:
        return Path(explicit).expanduser().resolve()

    if env.get("BSH_STORE"):
        return Path(env["BSH_STORE"]).expanduser().resolve()

    local = (cwd or Path.cwd()) / STORE_FILENAME
    if local.exists():
        return local.resolve()

    return config_home(env) / STORE_FILENAME
