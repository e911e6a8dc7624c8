"""Installation parameters - everything an installer needs for one mapping."""

import posixpath
from collections.abc import Sequence
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .exceptions import NotInstallableError
from .globs import get_base_path
from .globs import is_dynamic
from .installer import InstallerDescriptor
from .mapping import AssetMapping
from .protocols import ResourceInstaller
from .resources import FilesystemResource
from .server import Server
from .validation import InstallerParameterValidator
from .validation import ViolationCode


class InstallationParams:
    """
    Validated parameters for installing the resources of one asset mapping.

    The parameter values are the defaults of the installer's optional
    parameters, overridden by the values set on the server. Construction
    fails if the server sets an undeclared parameter or misses a required one.

    Raises:
        NotInstallableError: NO_SUCH_PARAMETER or MISSING_PARAMETER
    """

    __slots__ = (
        "_installer",
        "_installer_descriptor",
        "_resources",
        "_mapping",
        "_server",
        "_root_dir",
        "_base_path",
        "_parameter_values",
    )

    def __init__(
        self,
        installer: ResourceInstaller,
        installer_descriptor: InstallerDescriptor,
        resources: Sequence[FilesystemResource],
        mapping: AssetMapping,
        server: Server,
        root_dir: Path,
    ):
        parameter_values = {**installer_descriptor.get_parameter_values(), **server.parameter_values}
        _validate_parameter_values(parameter_values, installer_descriptor)

        glob = mapping.glob

        self._installer = installer
        self._installer_descriptor = installer_descriptor
        self._resources = tuple(resources)
        self._mapping = mapping
        self._server = server
        self._root_dir = Path(root_dir)
        self._base_path = get_base_path(glob) if is_dynamic(glob) else glob
        self._parameter_values = MappingProxyType(parameter_values)

    @property
    def installer(self) -> ResourceInstaller:
        return self._installer

    @property
    def installer_descriptor(self) -> InstallerDescriptor:
        return self._installer_descriptor

    @property
    def resources(self) -> tuple[FilesystemResource, ...]:
        return self._resources

    @property
    def mapping(self) -> AssetMapping:
        return self._mapping

    @property
    def server(self) -> Server:
        return self._server

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    @property
    def base_path(self) -> str:
        """Fixed directory prefix of the glob (the glob itself if it has no wildcards)."""
        return self._base_path

    @property
    def document_root(self) -> str:
        return self._server.document_root

    @property
    def server_path(self) -> str:
        return self._mapping.server_path

    @property
    def parameter_values(self) -> MappingProxyType:
        return self._parameter_values

    def get_server_path_for_resource(self, resource: FilesystemResource) -> str:
        """
        Return the path of a resource on the server.

        Example:
            For the glob ``/app/public/{css,js}`` and the server path ``/assets``,
            the resource ``/app/public/css/style.css`` is installed at
            ``/assets/css/style.css``.

            A file mapped to the server path ``/`` keeps its name:
            ``/app/robots.txt`` is installed at ``/robots.txt``.
        """
        relative_path = posixpath.relpath(resource.path, self._base_path)
        if relative_path == ".":
            relative_path = ""
        server_path = "/" + f"{self._mapping.server_path}/{relative_path}".strip("/")

        if server_path == "/" and not resource.is_directory():
            return "/" + resource.name

        return server_path


def _validate_parameter_values(parameter_values: dict[str, Any], descriptor: InstallerDescriptor) -> None:
    for violation in InstallerParameterValidator().validate(parameter_values, descriptor):
        if violation.code == ViolationCode.NO_SUCH_PARAMETER:
            raise NotInstallableError.no_such_parameter(violation.parameter_name, violation.installer_name)
        if violation.code == ViolationCode.MISSING_PARAMETER:
            raise NotInstallableError.missing_parameter(violation.parameter_name, violation.installer_name)
