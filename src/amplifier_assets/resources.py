"""Filesystem resources and a repository that selects them by glob.

Convention over configuration: the repository path ``/`` maps to one
directory, every file and directory below it is a resource.
"""

import logging
import posixpath
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .globs import get_base_path
from .globs import is_dynamic
from .globs import matches

logger = logging.getLogger(__name__)


class FilesystemResource(BaseModel):
    """A repository resource backed by a file or directory (immutable)."""

    model_config = ConfigDict(frozen=True)

    path: str
    filesystem_path: Path

    @property
    def name(self) -> str:
        return posixpath.basename(self.path) or self.filesystem_path.name

    def is_directory(self) -> bool:
        return self.filesystem_path.is_dir()

    def list_children(self) -> list["FilesystemResource"]:
        """List direct children (sorted by name); files have none."""
        if not self.is_directory():
            return []

        return [
            FilesystemResource(path=posixpath.join(self.path, child.name), filesystem_path=child)
            for child in sorted(self.filesystem_path.iterdir(), key=lambda p: p.name)
        ]


class FilesystemRepository:
    """
    Resource repository rooted at a directory (with injected root).

    Example:
        >>> repo = FilesystemRepository(root_dir=Path("res"))
        >>> [r.path for r in repo.find("/app/public/*.css")]
        ['/app/public/style.css']
    """

    def __init__(self, root_dir: Path):
        self.root_dir = root_dir

    def get(self, path: str) -> FilesystemResource | None:
        """Return the resource at a repository path, or None if it does not exist."""
        filesystem_path = self.root_dir / path.strip("/")
        if not filesystem_path.exists():
            return None
        return FilesystemResource(path="/" + path.strip("/"), filesystem_path=filesystem_path)

    def find(self, glob: str) -> list[FilesystemResource]:
        """
        Return all resources matching the glob, sorted by path.

        Only the subtree below the glob's base path is scanned.
        """
        if not is_dynamic(glob):
            resource = self.get(glob)
            return [resource] if resource is not None else []

        base = self.get(get_base_path(glob))
        if base is None or not base.is_directory():
            return []

        found = []
        for filesystem_path in base.filesystem_path.rglob("*"):
            relative = filesystem_path.relative_to(self.root_dir).as_posix()
            path = "/" + relative
            if matches(path, glob):
                found.append(FilesystemResource(path=path, filesystem_path=filesystem_path))

        found.sort(key=lambda resource: resource.path)
        logger.debug(f"Glob {glob} matched {len(found)} resources")
        return found
