"""Installer registry - layered installer descriptors with transactional persistence.

Descriptors come from three tiers, resolved in this order:
1. root scope (the current project, mutable, persisted)
2. non-root scopes (dependencies, read-only, later scopes win)
3. built-in installers (``copy`` and ``symlink``)

Only the root tier can be changed. Every change is saved through the root
scope's extra data store; if saving fails, the in-memory state is restored
and the error is re-raised.
"""

import logging
from collections.abc import Sequence

from .exceptions import InstallerConflictError
from .exceptions import NoSuchInstallerError
from .expr import Expression
from .expr import Valid
from .installer import InstallerDescriptor
from .installer import InstallerParameter
from .schema import INSTALLERS_KEY
from .schema import InstallerData
from .schema import parse_installers
from .storage import Scope

logger = logging.getLogger(__name__)

BUILTIN = "builtin"

BUILTIN_INSTALLERS: dict[str, dict] = {
    "copy": {
        "class": "amplifier_assets.installers.CopyInstaller",
        "description": "Copies assets to a target directory",
    },
    "symlink": {
        "class": "amplifier_assets.installers.SymlinkInstaller",
        "description": "Creates asset symlinks in a target directory",
        "parameters": {
            "relative": {
                "default": True,
                "description": "Whether to create relative or absolute links",
            },
        },
    },
}


def _data_to_descriptor(name: str, data: InstallerData) -> InstallerDescriptor:
    parameters = [
        InstallerParameter(
            name=parameter_name,
            required=parameter.required,
            default_value=parameter.default,
            description=parameter.description,
        )
        for parameter_name, parameter in data.parameters.items()
    ]

    return InstallerDescriptor(
        name=name,
        class_name=data.class_name,
        description=data.description,
        parameters=parameters,
    )


def _descriptor_to_data(descriptor: InstallerDescriptor) -> dict:
    data: dict = {"class": descriptor.class_name}

    if descriptor.description:
        data["description"] = descriptor.description

    if descriptor.parameters:
        parameters = {}
        for parameter in descriptor.parameters.values():
            parameter_data: dict = {}
            if parameter.required:
                parameter_data["required"] = True
            if parameter.default_value is not None:
                parameter_data["default"] = parameter.default_value
            if parameter.description:
                parameter_data["description"] = parameter.description
            parameters[parameter.name] = parameter_data
        data["parameters"] = parameters

    return data


class InstallerManager:
    """
    Manages installer descriptors across the root scope and its dependencies.

    Example:
        >>> root = Scope("acme/blog", ProjectFile(Path("amplifier-assets.json")))
        >>> manager = InstallerManager(root=root)
        >>> manager.get_installer_descriptor("symlink").class_name
        'amplifier_assets.installers.SymlinkInstaller'
    """

    def __init__(self, root: Scope, scopes: Sequence[Scope] = ()):
        """Initialize with the root scope and the non-root scopes.

        Args:
            root: Scope of the current project; changes are persisted here
            scopes: Scopes of dependencies in precedence order (lowest to highest)
        """
        self.root = root
        self.scopes = list(scopes)
        self._builtin: dict[str, InstallerDescriptor] | None = None
        self._inherited: dict[str, tuple[InstallerDescriptor, str]] = {}
        self._root: dict[str, InstallerDescriptor] = {}

    def _load(self) -> None:
        if self._builtin is not None:
            return

        builtin = {
            name: _data_to_descriptor(name, data)
            for name, data in parse_installers(BUILTIN_INSTALLERS, BUILTIN).items()
        }

        inherited: dict[str, tuple[InstallerDescriptor, str]] = {}
        for scope in self.scopes:
            for name, descriptor in self._load_scope(scope).items():
                inherited[name] = (descriptor, scope.name)

        root = self._load_scope(self.root)

        self._builtin = builtin
        self._inherited = inherited
        self._root = root

        logger.debug(
            f"Loaded installers: {len(builtin)} builtin, {len(inherited)} inherited, {len(root)} from {self.root.name}"
        )

    def _load_scope(self, scope: Scope) -> dict[str, InstallerDescriptor]:
        data = scope.extra.get_extra_key(INSTALLERS_KEY)
        if not data:
            return {}

        return {name: _data_to_descriptor(name, entry) for name, entry in parse_installers(data, scope.name).items()}

    def _persist(self) -> None:
        if self._root:
            data = {name: _descriptor_to_data(descriptor) for name, descriptor in self._root.items()}
            self.root.extra.set_extra_key(INSTALLERS_KEY, data)
        else:
            self.root.extra.remove_extra_key(INSTALLERS_KEY)

    def _commit(self, previous_root: dict[str, InstallerDescriptor]) -> None:
        """Persist the root tier or restore ``previous_root`` and re-raise."""
        try:
            self._persist()
        except Exception:
            self._root = previous_root
            raise

    def _resolve(self, name: str) -> tuple[InstallerDescriptor, str] | None:
        if name in self._root:
            return self._root[name], self.root.name
        if name in self._inherited:
            return self._inherited[name]
        if name in self._builtin:
            return self._builtin[name], BUILTIN
        return None

    def _merged(self) -> dict[str, InstallerDescriptor]:
        merged = dict(self._builtin)
        merged.update((name, descriptor) for name, (descriptor, _) in self._inherited.items())
        merged.update(self._root)
        return merged

    def add_root_installer_descriptor(self, descriptor: InstallerDescriptor) -> None:
        """
        Add an installer to the root scope.

        Installers already defined in the root scope are replaced. Names
        defined by a dependency or built in cannot be reused.

        Raises:
            InstallerConflictError: If the name is taken outside of the root scope
        """
        self._load()

        name = descriptor.name
        if name not in self._root and self._resolve(name) is not None:
            raise InstallerConflictError(
                f'An installer with the name "{name}" exists already.',
                context={"installer_name": name, "source": self._resolve(name)[1]},
            )

        previous_root = dict(self._root)
        self._root[name] = descriptor
        self._commit(previous_root)

        logger.debug(f"Added installer {name} to {self.root.name}")

    def remove_root_installer_descriptor(self, name: str) -> None:
        """
        Remove an installer from the root scope (no-op if it does not exist).

        Raises:
            InstallerConflictError: If the installer is not defined in the root scope
        """
        self._load()

        if name not in self._root:
            if self._resolve(name) is not None:
                raise InstallerConflictError(
                    f'Cannot remove installer "{name}": Can only remove installers configured in the root scope.',
                    context={"installer_name": name, "source": self._resolve(name)[1]},
                )
            return

        previous_root = dict(self._root)
        del self._root[name]
        self._commit(previous_root)

        logger.debug(f"Removed installer {name} from {self.root.name}")

    def remove_root_installer_descriptors(self, expr: Expression) -> None:
        """Remove all root installers matching the predicate."""
        self._load()

        previous_root = dict(self._root)
        self._root = {name: descriptor for name, descriptor in self._root.items() if not expr.evaluate(descriptor)}

        if len(self._root) == len(previous_root):
            return

        self._commit(previous_root)

    def clear_root_installer_descriptors(self) -> None:
        self.remove_root_installer_descriptors(Valid())

    def get_root_installer_descriptor(self, name: str) -> InstallerDescriptor:
        self._load()

        if name not in self._root:
            raise NoSuchInstallerError(name, self._root, scope_name=self.root.name)

        return self._root[name]

    def get_root_installer_descriptors(self) -> list[InstallerDescriptor]:
        self._load()
        return list(self._root.values())

    def find_root_installer_descriptors(self, expr: Expression) -> list[InstallerDescriptor]:
        self._load()
        return [descriptor for descriptor in self._root.values() if expr.evaluate(descriptor)]

    def has_root_installer_descriptor(self, name: str) -> bool:
        self._load()
        return name in self._root

    def has_root_installer_descriptors(self, expr: Expression | None = None) -> bool:
        self._load()
        if expr is None:
            return bool(self._root)
        return any(expr.evaluate(descriptor) for descriptor in self._root.values())

    def get_installer_descriptor(self, name: str) -> InstallerDescriptor:
        self._load()

        resolved = self._resolve(name)
        if resolved is None:
            raise NoSuchInstallerError(name, self._merged())

        return resolved[0]

    def get_installer_descriptors(self) -> list[InstallerDescriptor]:
        self._load()
        return list(self._merged().values())

    def find_installer_descriptors(self, expr: Expression) -> list[InstallerDescriptor]:
        self._load()
        return [descriptor for descriptor in self._merged().values() if expr.evaluate(descriptor)]

    def has_installer_descriptor(self, name: str) -> bool:
        self._load()
        return self._resolve(name) is not None

    def has_installer_descriptors(self, expr: Expression | None = None) -> bool:
        self._load()
        if expr is None:
            return bool(self._merged())
        return any(expr.evaluate(descriptor) for descriptor in self._merged().values())

    def get_installer_source(self, name: str) -> str:
        """
        Return where an installer is defined.

        Returns:
            ``"builtin"``, the name of a dependency scope or the root scope name

        Raises:
            NoSuchInstallerError: If the installer does not exist
        """
        self._load()

        resolved = self._resolve(name)
        if resolved is None:
            raise NoSuchInstallerError(name, self._merged())

        return resolved[1]
