"""Installation orchestration - resolve a mapping into validated installation params.

Process for one asset mapping:
1. Resolve the server
2. Resolve the server's installer descriptor
3. Find the matching resources
4. Load the installer
5. Assemble and validate the parameters
6. Let the installer validate the parameters

Preparation only reads state. Nothing is written until ``install_resource``
is called.
"""

import logging
from pathlib import Path

from .exceptions import NotInstallableError
from .loader import InstallerLoader
from .mapping import AssetMapping
from .params import InstallationParams
from .protocols import ResourceRepository
from .registry import InstallerManager
from .resources import FilesystemResource
from .server import ServerCollection

logger = logging.getLogger(__name__)


class InstallationManager:
    """
    Prepares and performs the installation of asset mappings.

    Example:
        >>> manager = InstallationManager(root_dir, repo, servers, installer_manager)
        >>> params = manager.prepare_installation(mapping)
        >>> for resource in params.resources:
        ...     manager.install_resource(resource, params)
    """

    def __init__(
        self,
        root_dir: Path,
        repo: ResourceRepository,
        servers: ServerCollection,
        installer_manager: InstallerManager,
        loader: InstallerLoader | None = None,
    ):
        self.root_dir = root_dir
        self.repo = repo
        self.servers = servers
        self.installer_manager = installer_manager
        self.loader = loader or InstallerLoader()

    def prepare_installation(self, mapping: AssetMapping) -> InstallationParams:
        """
        Resolve everything needed to install a mapping.

        Args:
            mapping: The asset mapping to install

        Returns:
            Validated installation params

        Raises:
            NotInstallableError: If any stage fails (see NotInstallableCode)
        """
        server_name = mapping.server_name
        if not self.servers.contains(server_name):
            raise NotInstallableError.server_not_found(server_name)

        server = self.servers.get(server_name)
        installer_name = server.installer_name

        if not self.installer_manager.has_installer_descriptor(installer_name):
            raise NotInstallableError.installer_not_found(installer_name)

        descriptor = self.installer_manager.get_installer_descriptor(installer_name)

        resources = self.repo.find(mapping.glob)
        if not resources:
            raise NotInstallableError.no_resource_matches(mapping.glob)

        installer = self.loader.load(descriptor)

        params = InstallationParams(installer, descriptor, resources, mapping, server, self.root_dir)
        installer.validate_params(params)

        logger.debug(f"Prepared installation of {mapping.glob} with {len(resources)} resources on {server.name}")
        return params

    def install_resource(self, resource: FilesystemResource, params: InstallationParams) -> None:
        """Install one resource with the installer resolved in ``params``."""
        params.installer.install_resource(resource, params)

    def install_mapping(self, mapping: AssetMapping) -> list[str]:
        """
        Prepare a mapping and install all of its resources.

        Returns:
            Server paths of the installed resources

        Raises:
            NotInstallableError: If the mapping cannot be installed
        """
        params = self.prepare_installation(mapping)
        logger.info(f"Installing {mapping.glob} to {params.server.name}{mapping.server_path}")

        installed = []
        for resource in params.resources:
            self.install_resource(resource, params)
            installed.append(params.get_server_path_for_resource(resource))

        logger.info(f"Installed {len(installed)} resources to {params.server.name}")
        return installed
