"""
Persistent command store.

Holds the category -> alias -> template mapping. The whole store is
rewritten after every mutation; a failed write rolls the in-memory
change back so memory and disk never disagree.
"""

import copy
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

import yaml

from bsh import template as tpl
from bsh.config import Settings
from bsh.errors import AlreadyExists, MalformedTemplate, NotFound, StorageError, ValidationError
from bsh.log import logger

STORE_VERSION = "1.0"
FORBIDDEN_NAME_CHARS = '/\\:?*"<>|'


def validate_name(kind: str, name: str) -> None:
    """Reject empty names and names with whitespace or path-like characters."""
    if not name or not name.strip():
        raise ValidationError(f"{kind} name must not be empty")
    bad = [c for c in name if c.isspace() or c in FORBIDDEN_NAME_CHARS]
    if bad:
        raise ValidationError(
            f"{kind} name {name!r} contains illegal character {bad[0]!r}"
        )


def validate_template(template: str) -> None:
    if not template or not template.strip():
        raise ValidationError("Command must not be empty")
    tpl.validate(template)


class Repository:
    """Category/alias store backed by a YAML file."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.settings = Settings()
        self._categories: Dict[str, Dict[str, str]] = {}
        self._mutating = False
        self.load()

    # -- persistence ---------------------------------------------------------

    def load(self) -> None:
        """Load the store from disk, creating an empty one if it is missing."""
        if not self.path.exists():
            logger.info("Store not found, creating empty store at %s", self.path)
            self._categories = {}
            self.save()
            return

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        except yaml.YAMLError as e:
            raise StorageError(f"Cannot parse {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not contain a command store")

        self.settings = Settings.from_dict(data.get("settings"))
        self._categories = self._read_categories(data.get("categories") or {})
        logger.debug(
            "Loaded %d categories from %s", len(self._categories), self.path
        )

    def _read_categories(self, raw) -> Dict[str, Dict[str, str]]:
        if not isinstance(raw, dict):
            raise StorageError(f"'categories' in {self.path} must be a mapping")

        categories: Dict[str, Dict[str, str]] = {}
        for category, aliases in raw.items():
            aliases = aliases or {}
            if not isinstance(aliases, dict):
                raise StorageError(
                    f"Category '{category}' in {self.path} must be a mapping"
                )
            entries = {}
            for alias, command in aliases.items():
                if not isinstance(command, str):
                    raise StorageError(
                        f"Command '{category}/{alias}' in {self.path} must be a string"
                    )
                try:
                    tpl.validate(command)
                except MalformedTemplate as e:
                    raise StorageError(
                        f"Command '{category}/{alias}' in {self.path} is malformed: {e}"
                    ) from e
                entries[str(alias)] = command
            categories[str(category)] = entries
        return categories

    def save(self) -> None:
        """Write the whole store atomically (temp file + rename)."""
        data = {
            "version": STORE_VERSION,
            "settings": self.settings.to_dict(),
            "categories": self._categories,
        }

        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=".commands-", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    data, f,
                    default_flow_style=False,
                    sort_keys=False,
                    allow_unicode=True,
                )
            os.replace(tmp_path, self.path)
            tmp_path = None
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

        logger.debug("Saved store to %s", self.path)

    @contextmanager
    def _mutation(self) -> Iterator[None]:
        if self._mutating:
            raise RuntimeError("Command store is already being modified")
        snapshot = copy.deepcopy(self._categories)
        self._mutating = True
        try:
            yield
            self.save()
        except BaseException:
            self._categories = snapshot
            raise
        finally:
            self._mutating = False

    # -- queries -------------------------------------------------------------

    def has_category(self, category: str) -> bool:
        return category in self._categories

    def has_alias(self, category: str, alias: str) -> bool:
        return alias in self._categories.get(category, {})

    def list_categories(self) -> List[str]:
        return list(self._categories)

    def list_aliases(self, category: str) -> List[str]:
        if category not in self._categories:
            raise NotFound(f"Category '{category}' does not exist")
        return list(self._categories[category])

    def get(self, category: str, alias: str) -> str:
        """Return the raw template stored under category/alias."""
        if category not in self._categories:
            raise NotFound(f"Category '{category}' does not exist")
        if alias not in self._categories[category]:
            raise NotFound(f"Command '{alias}' does not exist in category '{category}'")
        return self._categories[category][alias]

    def entries(self) -> Iterator[Tuple[str, str, str]]:
        """Yield (category, alias, template) for every stored command."""
        for category, aliases in self._categories.items():
            for alias, command in aliases.items():
                yield category, alias, command

    # -- mutations -----------------------------------------------------------

    def add_category(self, category: str) -> None:
        validate_name("Category", category)
        if category in self._categories:
            raise AlreadyExists(f"Category '{category}' already exists")

        with self._mutation():
            self._categories[category] = {}
        logger.debug("Added category %s", category)

    def add_or_update_alias(self, category: str, alias: str, template: str) -> None:
        """Insert or overwrite an alias, creating its category if needed."""
        validate_name("Category", category)
        validate_name("Alias", alias)
        validate_template(template)

        with self._mutation():
            self._categories.setdefault(category, {})[alias] = template
        logger.debug("Stored %s/%s = %r", category, alias, template)

    def remove_alias(self, category: str, alias: str) -> None:
        """Remove an alias. The category is kept even when it becomes empty."""
        self.get(category, alias)

        with self._mutation():
            del self._categories[category][alias]
        logger.debug("Removed %s/%s", category, alias)

    def remove_category(self, category: str) -> None:
        if category not in self._categories:
            raise NotFound(f"Category '{category}' does not exist")

        with self._mutation():
            del self._categories[category]
        logger.debug("Removed category %s", category)
