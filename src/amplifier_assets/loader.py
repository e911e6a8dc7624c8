"""Installer loader - turns installer class references into installer instances.

Class references are registered explicitly with a factory. Registration
validates the factory, so a broken installer fails when it is registered
instead of in the middle of an installation. References that were never
registered are imported (``package.module.Class`` or
``package.module:Class``) and validated the same way.
"""

import importlib
import inspect
import logging
from collections.abc import Callable

from .exceptions import NotInstallableError
from .installer import InstallerDescriptor
from .protocols import ResourceInstaller

logger = logging.getLogger(__name__)

InstallerFactory = Callable[[], ResourceInstaller]

_INSTALLER_METHODS = ("validate_params", "install_resource")


def _import_reference(class_name: str) -> object | None:
    if ":" in class_name:
        module_name, _, attribute = class_name.partition(":")
    else:
        module_name, _, attribute = class_name.rpartition(".")

    if not module_name or not attribute:
        return None

    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None

    target = module
    for part in attribute.split("."):
        target = getattr(target, part, None)
        if target is None:
            return None

    return target


def _requires_arguments(factory: Callable) -> bool:
    try:
        signature = inspect.signature(factory)
    except (TypeError, ValueError):
        return False

    return any(
        parameter.default is inspect.Parameter.empty
        and parameter.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD,
                               inspect.Parameter.KEYWORD_ONLY)
        for parameter in signature.parameters.values()
    )


class InstallerLoader:
    """
    Registry of installer factories keyed by class reference.

    The built-in copy and symlink installers are registered on construction.

    Example:
        >>> loader = InstallerLoader()
        >>> loader.register("acme.RsyncInstaller", RsyncInstaller)
        >>> installer = loader.load(descriptor)
    """

    def __init__(self):
        from .installers import CopyInstaller
        from .installers import SymlinkInstaller

        self._factories: dict[str, InstallerFactory] = {}
        self._instances: dict[tuple[str, str], ResourceInstaller] = {}

        self.register("amplifier_assets.installers.CopyInstaller", CopyInstaller)
        self.register("amplifier_assets.installers.SymlinkInstaller", SymlinkInstaller)

    def register(self, class_name: str, factory: InstallerFactory) -> None:
        """
        Register a factory for a class reference.

        Args:
            class_name: Reference used in installer descriptors
            factory: Installer class or other callable without required arguments

        Raises:
            NotInstallableError: If the factory requires arguments
                (INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR) or the class does not
                implement ResourceInstaller (INSTALLER_CLASS_INVALID)
        """
        if not callable(factory):
            raise NotInstallableError.installer_class_invalid(class_name)

        if _requires_arguments(factory):
            raise NotInstallableError.installer_class_no_default_constructor(class_name)

        if inspect.isclass(factory) and not all(callable(getattr(factory, m, None)) for m in _INSTALLER_METHODS):
            raise NotInstallableError.installer_class_invalid(class_name)

        self._factories[class_name] = factory
        self._instances = {key: installer for key, installer in self._instances.items() if key[1] != class_name}
        logger.debug(f"Registered installer class {class_name}")

    def is_registered(self, class_name: str) -> bool:
        return class_name in self._factories

    def load(self, descriptor: InstallerDescriptor) -> ResourceInstaller:
        """
        Return the installer instance for a descriptor.

        Instances are cached per installer name and class, so redefining an
        installer with another class loads the new class.

        Raises:
            NotInstallableError: INSTALLER_CLASS_NOT_FOUND, INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR
                or INSTALLER_CLASS_INVALID
        """
        class_name = descriptor.class_name
        key = (descriptor.name, class_name)

        if key in self._instances:
            return self._instances[key]

        if class_name not in self._factories:
            target = _import_reference(class_name)
            if target is None:
                raise NotInstallableError.installer_class_not_found(class_name)
            self.register(class_name, target)

        installer = self._factories[class_name]()

        if not isinstance(installer, ResourceInstaller):
            raise NotInstallableError.installer_class_invalid(class_name)

        self._instances[key] = installer
        return installer
