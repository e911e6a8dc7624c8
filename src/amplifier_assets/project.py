"""Wire the managers of a project together.

Apps with their own discovery store or repository build the managers
themselves; this covers the common case of one project directory.
"""

import logging
from collections.abc import Sequence
from pathlib import Path

from .assets import DiscoveryAssetManager
from .config import AssetsSettings
from .discovery import InMemoryDiscoveryManager
from .installation import InstallationManager
from .loader import InstallerLoader
from .registry import InstallerManager
from .resources import FilesystemRepository
from .servers import ServerManager
from .storage import ProjectFile
from .storage import Scope

logger = logging.getLogger(__name__)


class AssetsProject:
    """
    All managers of one project directory.

    Example:
        >>> project = AssetsProject.from_root(Path.cwd())
        >>> project.server_manager.add_server(Server(name="localhost", installer_name="symlink", document_root="public"))
        >>> mapping = AssetMapping(glob="/app/public", server_name="localhost")
        >>> project.asset_manager.add_root_asset_mapping(mapping)
        >>> project.installation_manager.install_mapping(mapping)
    """

    def __init__(self, root_dir: Path, settings: AssetsSettings, scopes: Sequence[Scope] = ()):
        self.root_dir = root_dir
        self.settings = settings
        self.root = Scope(settings.name, ProjectFile(root_dir / settings.project_file))

        self.installer_manager = InstallerManager(root=self.root, scopes=scopes)
        self.server_manager = ServerManager(root=self.root, installer_manager=self.installer_manager)
        self.discovery_manager = InMemoryDiscoveryManager()
        self.asset_manager = DiscoveryAssetManager(self.discovery_manager, self.server_manager.get_servers())
        self.repo = FilesystemRepository(root_dir / settings.resource_dir)
        self.loader = InstallerLoader()
        self.installation_manager = InstallationManager(
            root_dir=root_dir,
            repo=self.repo,
            servers=self.server_manager.get_servers(),
            installer_manager=self.installer_manager,
            loader=self.loader,
        )

    @classmethod
    def from_root(cls, root_dir: Path, scopes: Sequence[Scope] = ()) -> "AssetsProject":
        """Create the project for a directory, reading its pyproject.toml if present."""
        settings = AssetsSettings.from_pyproject(root_dir / "pyproject.toml")
        logger.debug(f"Loaded asset settings for {settings.name} from {root_dir}")
        return cls(root_dir, settings, scopes)
