"""amplifier-assets - Install repository resources to asset servers.

Public API exports.

Per KERNEL_PHILOSOPHY: This is library mechanism, apps inject policy (paths, stores, installers).
"""

from .assets import DiscoveryAssetManager
from .config import AssetsSettings
from .discovery import BindingDescriptor
from .discovery import BindingState
from .discovery import InMemoryDiscoveryManager
from .exceptions import AssetError
from .exceptions import DuplicateAssetMappingError
from .exceptions import InstallerConflictError
from .exceptions import InvalidExtraDataError
from .exceptions import NoSuchAssetMappingError
from .exceptions import NoSuchInstallerError
from .exceptions import NoSuchParameterError
from .exceptions import NoSuchServerError
from .exceptions import NotInstallableCode
from .exceptions import NotInstallableError
from .exceptions import ProjectFileError
from .installation import InstallationManager
from .installer import InstallerDescriptor
from .installer import InstallerParameter
from .installers import CopyInstaller
from .installers import SymlinkInstaller
from .loader import InstallerLoader
from .mapping import AssetMapping
from .params import InstallationParams
from .project import AssetsProject
from .protocols import DiscoveryManager
from .protocols import ExtraDataStore
from .protocols import ResourceInstaller
from .protocols import ResourceRepository
from .registry import InstallerManager
from .resources import FilesystemRepository
from .resources import FilesystemResource
from .server import Server
from .server import ServerCollection
from .servers import ServerManager
from .storage import ProjectFile
from .storage import Scope
from .translator import BindingExpressionBuilder

__all__ = [
    # Mappings
    "AssetMapping",
    "DiscoveryAssetManager",
    "BindingExpressionBuilder",
    # Discovery
    "BindingDescriptor",
    "BindingState",
    "DiscoveryManager",
    "InMemoryDiscoveryManager",
    # Servers
    "Server",
    "ServerCollection",
    "ServerManager",
    # Installers
    "InstallerDescriptor",
    "InstallerParameter",
    "InstallerManager",
    "InstallerLoader",
    "ResourceInstaller",
    "CopyInstaller",
    "SymlinkInstaller",
    # Installation
    "InstallationManager",
    "InstallationParams",
    # Resources
    "FilesystemRepository",
    "FilesystemResource",
    "ResourceRepository",
    # Storage and settings
    "ExtraDataStore",
    "ProjectFile",
    "Scope",
    "AssetsSettings",
    "AssetsProject",
    # Exceptions
    "AssetError",
    "DuplicateAssetMappingError",
    "InstallerConflictError",
    "InvalidExtraDataError",
    "NoSuchAssetMappingError",
    "NoSuchInstallerError",
    "NoSuchParameterError",
    "NoSuchServerError",
    "NotInstallableCode",
    "NotInstallableError",
    "ProjectFileError",
]

__version__ = "0.1.0"
