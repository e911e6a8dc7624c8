"""Tests for InstallerLoader."""

import pytest
from amplifier_assets import CopyInstaller
from amplifier_assets import InstallerDescriptor
from amplifier_assets import InstallerLoader
from amplifier_assets import NotInstallableCode
from amplifier_assets import NotInstallableError
from amplifier_assets import SymlinkInstaller


class RsyncInstaller:
    def validate_params(self, params):
        pass

    def install_resource(self, resource, params):
        pass


class OtherRsyncInstaller(RsyncInstaller):
    pass


class NeedsArguments(RsyncInstaller):
    def __init__(self, host):
        self.host = host


class NotAnInstaller:
    def install(self, resource):
        pass


def descriptor(class_name: str, name: str = "custom") -> InstallerDescriptor:
    return InstallerDescriptor(name=name, class_name=class_name)


def test_builtins_registered():
    """The copy and symlink installers are registered on construction."""
    loader = InstallerLoader()

    assert loader.is_registered("amplifier_assets.installers.CopyInstaller")
    assert isinstance(loader.load(descriptor("amplifier_assets.installers.CopyInstaller", "copy")), CopyInstaller)
    assert isinstance(
        loader.load(descriptor("amplifier_assets.installers.SymlinkInstaller", "symlink")), SymlinkInstaller
    )


def test_registered_factory():
    """Registered factories are used for their class reference."""
    loader = InstallerLoader()
    loader.register("acme.RsyncInstaller", RsyncInstaller)

    assert isinstance(loader.load(descriptor("acme.RsyncInstaller")), RsyncInstaller)


def test_instances_cached_per_installer():
    """Each installer name gets one instance."""
    loader = InstallerLoader()
    loader.register("acme.RsyncInstaller", RsyncInstaller)

    first = loader.load(descriptor("acme.RsyncInstaller", "a"))

    assert loader.load(descriptor("acme.RsyncInstaller", "a")) is first
    assert loader.load(descriptor("acme.RsyncInstaller", "b")) is not first


def test_register_rejects_required_arguments():
    """Factories must be callable without arguments."""
    with pytest.raises(NotInstallableError) as exc_info:
        InstallerLoader().register("acme.NeedsArguments", NeedsArguments)

    assert exc_info.value.code == NotInstallableCode.INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR
    assert exc_info.value.context["name"] == "acme.NeedsArguments"


def test_register_rejects_non_installers():
    """Classes must implement the installer methods."""
    with pytest.raises(NotInstallableError) as exc_info:
        InstallerLoader().register("acme.NotAnInstaller", NotAnInstaller)

    assert exc_info.value.code == NotInstallableCode.INSTALLER_CLASS_INVALID


def test_factory_returning_non_installer():
    """Factory results are checked when loading."""
    loader = InstallerLoader()
    loader.register("acme.factory", lambda: object())

    with pytest.raises(NotInstallableError) as exc_info:
        loader.load(descriptor("acme.factory"))

    assert exc_info.value.code == NotInstallableCode.INSTALLER_CLASS_INVALID


def test_unregistered_reference_imported():
    """Unregistered references are imported by module path."""
    loader = InstallerLoader()

    installer = loader.load(descriptor(f"{__name__}:RsyncInstaller"))

    assert isinstance(installer, RsyncInstaller)
    assert loader.is_registered(f"{__name__}:RsyncInstaller")


def test_imported_reference_validated():
    """Imported classes are validated like registered ones."""
    with pytest.raises(NotInstallableError) as exc_info:
        InstallerLoader().load(descriptor(f"{__name__}.NeedsArguments"))

    assert exc_info.value.code == NotInstallableCode.INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR


@pytest.mark.parametrize("class_name", ["acme.Missing", "amplifier_assets.installers.Missing", "Missing"])
def test_missing_class(class_name):
    """Unknown references raise INSTALLER_CLASS_NOT_FOUND."""
    with pytest.raises(NotInstallableError) as exc_info:
        InstallerLoader().load(descriptor(class_name))

    assert exc_info.value.code == NotInstallableCode.INSTALLER_CLASS_NOT_FOUND
    assert exc_info.value.context["name"] == class_name


def test_redefined_installer_loads_new_class():
    """Changing the class of an installer loads the new class."""
    loader = InstallerLoader()
    loader.register("acme.RsyncInstaller", RsyncInstaller)
    loader.register("acme.OtherRsyncInstaller", OtherRsyncInstaller)

    first = loader.load(descriptor("acme.RsyncInstaller"))
    second = loader.load(descriptor("acme.OtherRsyncInstaller"))

    assert type(first) is RsyncInstaller
    assert type(second) is OtherRsyncInstaller
    assert type(loader.load(descriptor("acme.RsyncInstaller"))) is RsyncInstaller


def test_reregistered_class_reloaded():
    """Registering a new factory for a class reference drops cached instances."""
    loader = InstallerLoader()
    loader.register("acme.RsyncInstaller", RsyncInstaller)
    first = loader.load(descriptor("acme.RsyncInstaller"))

    loader.register("acme.RsyncInstaller", OtherRsyncInstaller)

    assert type(first) is RsyncInstaller
    assert type(loader.load(descriptor("acme.RsyncInstaller"))) is OtherRsyncInstaller
