"""Filesystem installers - copy or symlink resources into a document root.

Per KERNEL_PHILOSOPHY: Mechanism not policy - the server decides WHERE
(document root), the mapping decides WHAT (glob) and the installer decides HOW.

Installing the same resources twice leaves the same tree: existing entries
at the target paths are removed before writing. Resources below another
resource of the same mapping are installed with their ancestor.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Any

from .exceptions import AssetError
from .params import InstallationParams
from .resources import FilesystemResource

logger = logging.getLogger(__name__)

_FALSE_STRINGS = frozenset({"", "0", "false", "no", "off"})


def _as_bool(value: Any, default: bool) -> bool:
    """Interpret a parameter value as a flag ("false", "0", "no", "off" are false)."""
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def _has_ancestor(resource: FilesystemResource, resources: tuple[FilesystemResource, ...]) -> bool:
    return any(
        other.path != resource.path and resource.path.startswith(other.path.rstrip("/") + "/") for other in resources
    )


class DocumentRoot:
    """
    Writes resources into a directory, addressed by server paths.

    Never writes through a symlink below the document root, so linked
    resources cannot be changed by installing into them.

    Args:
        path: Absolute path of the document root
        symlinks: Link resources instead of copying them
        relative: Create relative links (only used with ``symlinks``)
    """

    def __init__(self, path: Path, symlinks: bool = False, relative: bool = True):
        self.path = path
        self.symlinks = symlinks
        self.relative = relative

    def _target(self, server_path: str) -> Path:
        target = self.path / server_path.strip("/")

        parent = target.parent
        while parent != self.path and self.path in parent.parents:
            if parent.is_symlink():
                raise AssetError(
                    f"Cannot install to {server_path}: {parent} is a symlink.",
                    context={"server_path": server_path, "symlink": str(parent)},
                )
            parent = parent.parent

        return target

    def remove(self, server_path: str) -> None:
        """Remove whatever exists at a server path (no-op if nothing does)."""
        target = self._target(server_path)

        if target == self.path:
            raise ValueError("Cannot remove the document root itself.")

        if target.is_symlink() or target.is_file():
            target.unlink()
        elif target.is_dir():
            shutil.rmtree(target)

    def add(self, server_path: str, resource: FilesystemResource) -> None:
        """
        Write a resource to a server path.

        At ``/`` the children of a directory are written, since the
        document root itself cannot be replaced; a file is written under
        its own name.
        """
        if server_path.strip("/") == "":
            if not resource.is_directory():
                self.add(f"/{resource.name}", resource)
                return
            for child in resource.list_children():
                self.add(f"/{child.name}", child)
            return

        target = self._target(server_path)
        target.parent.mkdir(parents=True, exist_ok=True)
        source = resource.filesystem_path

        if self.symlinks:
            link = os.path.relpath(source.absolute(), target.parent.absolute()) if self.relative else source.absolute()
            target.symlink_to(link, target_is_directory=source.is_dir())
        elif resource.is_directory():
            shutil.copytree(source, target)
        else:
            shutil.copy2(source, target)

        logger.debug(f"Installed {resource.path} to {target}")


class CopyInstaller:
    """Installs resources by copying them into the server's document root."""

    symlinks = False

    def validate_params(self, params: InstallationParams) -> None:
        pass

    def install_resource(self, resource: FilesystemResource, params: InstallationParams) -> None:
        if _has_ancestor(resource, params.resources):
            logger.debug(f"Skipped {resource.path}, installed with its parent")
            return

        document_root = Path(params.document_root)
        if not document_root.is_absolute():
            document_root = params.root_dir / document_root

        document_root.mkdir(parents=True, exist_ok=True)

        server_path = params.get_server_path_for_resource(resource)
        relative = _as_bool(params.parameter_values.get("relative"), default=True)
        target = DocumentRoot(document_root, symlinks=self.symlinks, relative=relative)

        if server_path == "/":
            for child in resource.list_children():
                target.remove(f"/{child.name}")
        else:
            target.remove(server_path)

        target.add(server_path, resource)


class SymlinkInstaller(CopyInstaller):
    """Installs resources by linking them into the server's document root."""

    symlinks = True
