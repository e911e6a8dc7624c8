"""Protocols for installers and the external collaborators of the pipeline.

Per KERNEL_PHILOSOPHY: Protocol-based extensibility over configuration.
Per IMPLEMENTATION_PHILOSOPHY: Composition over inheritance.

The library ships reference implementations (``FilesystemRepository``,
``InMemoryDiscoveryManager``, ``ProjectFile``), apps can provide any other.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING
from typing import Any
from typing import Protocol
from typing import runtime_checkable

if TYPE_CHECKING:
    from .discovery import BindingDescriptor
    from .expr import Expression
    from .params import InstallationParams
    from .resources import FilesystemResource


@runtime_checkable
class ResourceInstaller(Protocol):
    """Protocol for resource installers.

    An installer writes resources to the document root of a server. The
    same params are passed for every resource matched by one mapping, so
    implementations may cache connections or other setup between calls.

    Example implementations:
    - CopyInstaller: copies files into a local directory
    - SymlinkInstaller: links files into a local directory
    - custom transports (rsync, FTP, object storage)
    """

    def validate_params(self, params: "InstallationParams") -> None:
        """Check installer specific semantics of the params.

        Raises:
            NotInstallableError: If the params cannot be used
        """
        ...

    def install_resource(self, resource: "FilesystemResource", params: "InstallationParams") -> None:
        """Install one resource.

        Raises:
            Exception: If installation fails
        """
        ...


class ResourceRepository(Protocol):
    """Protocol for the repository that resources are selected from."""

    def find(self, glob: str) -> Sequence["FilesystemResource"]:
        """Return all resources matching the glob (possibly empty)."""
        ...


class DiscoveryManager(Protocol):
    """Protocol for the binding store that asset mappings are saved in.

    Root bindings belong to the current project, other bindings are
    inherited and read-only.
    """

    def add_root_binding(self, binding: "BindingDescriptor", override: bool = False) -> None: ...

    def remove_root_bindings(self, expr: "Expression") -> None: ...

    def find_root_bindings(self, expr: "Expression") -> list["BindingDescriptor"]: ...

    def find_bindings(self, expr: "Expression") -> list["BindingDescriptor"]: ...

    def has_root_bindings(self, expr: "Expression | None" = None) -> bool: ...

    def has_bindings(self, expr: "Expression | None" = None) -> bool: ...


class ExtraDataStore(Protocol):
    """Protocol for the key-value slot that managers persist their data in."""

    def get_extra_key(self, key: str, default: Any = None) -> Any: ...

    def has_extra_key(self, key: str) -> bool: ...

    def set_extra_key(self, key: str, value: Any) -> None:
        """Store a value and persist it.

        Raises:
            Exception: If the value cannot be persisted
        """
        ...

    def remove_extra_key(self, key: str) -> None: ...
