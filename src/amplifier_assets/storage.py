"""Project file - JSON storage for extra data of a scope.

Per KERNEL_PHILOSOPHY:
- "Could two teams want different behavior?" → YES (file location is policy)
- This is library mechanism - apps inject the file path (policy)

Per IMPLEMENTATION_PHILOSOPHY:
- Ruthless simplicity: Simple JSON file, saved on every change
"""

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ProjectFileError
from .protocols import ExtraDataStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Scope:
    """A named owner of extra data (the project itself or one of its dependencies)."""

    name: str
    extra: ExtraDataStore


class ProjectFile:
    """
    Extra data file manager (with injected path).

    File format (JSON):
    {
      "version": "1.0",
      "extra": {
        "installers": {
          "rsync": {"class": "acme.RsyncInstaller", "parameters": {"user": {"required": true}}}
        },
        "servers": {
          "localhost": {"installer": "symlink", "document-root": "public"}
        }
      }
    }
    """

    VERSION = "1.0"

    def __init__(self, path: Path):
        """Initialize with app-provided file path.

        Args:
            path: Path to the project file (app determines location)

        Raises:
            ProjectFileError: If the file exists but cannot be parsed

        Example:
            >>> project_file = ProjectFile(path=Path("amplifier-assets.json"))
        """
        self.path = path
        self._extra: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        """Load the file if it exists."""
        if not self.path.exists():
            self._extra = {}
            return

        try:
            with open(self.path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise ProjectFileError(f"Failed to read project file {self.path}: {e}", context={"path": str(self.path)}) from e

        if not isinstance(data, dict):
            raise ProjectFileError(f"Invalid project file {self.path}: expected a JSON object", context={"path": str(self.path)})

        if data.get("version") != self.VERSION:
            logger.warning(f"Project file version mismatch: expected {self.VERSION}, got {data.get('version')}")

        self._extra = data.get("extra", {})
        logger.debug(f"Loaded {len(self._extra)} extra keys from {self.path}")

    def _save(self) -> None:
        """Save the file."""
        data = {"version": self.VERSION, "extra": self._extra}

        try:
            # Serialize first so a bad value never truncates the file
            content = json.dumps(data, indent=2)
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                f.write(content)
            logger.debug(f"Saved project file with {len(self._extra)} extra keys")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save project file: {e}")
            raise ProjectFileError(f"Failed to save project file {self.path}: {e}", context={"path": str(self.path)}) from e

    def get_extra_key(self, key: str, default: Any = None) -> Any:
        """Return a deep copy of the value stored under the key."""
        if key not in self._extra:
            return default
        return copy.deepcopy(self._extra[key])

    def get_extra_keys(self) -> dict[str, Any]:
        return copy.deepcopy(self._extra)

    def has_extra_key(self, key: str) -> bool:
        return key in self._extra

    def set_extra_key(self, key: str, value: Any) -> None:
        """
        Store a value and save the file.

        The previous value is restored if saving fails.

        Raises:
            ProjectFileError: If the file cannot be written
        """
        missing = object()
        previous = self._extra.get(key, missing)
        self._extra[key] = copy.deepcopy(value)

        try:
            self._save()
        except ProjectFileError:
            if previous is missing:
                del self._extra[key]
            else:
                self._extra[key] = previous
            raise

    def remove_extra_key(self, key: str) -> None:
        """Remove a key and save the file (no-op if the key is missing)."""
        if key not in self._extra:
            return

        previous = self._extra.pop(key)

        try:
            self._save()
        except ProjectFileError:
            self._extra[key] = previous
            raise
