"""Asset installation exceptions.

Per IMPLEMENTATION_PHILOSOPHY: Clear, actionable error messages.

Every error carries a human-readable message plus a context dict with the
offending names, so an application layer can render its own messages.
"""

import difflib
from collections.abc import Iterable
from enum import IntEnum


def _suggest(name: str, candidates: Iterable[str]) -> list[str]:
    return difflib.get_close_matches(name, list(candidates), n=3)


class AssetError(Exception):
    """Base exception for asset operations."""

    def __init__(self, message: str, context: dict | None = None):
        """Initialize with message and optional context.

        Args:
            message: Human-readable error message
            context: Optional dict with additional context (names, paths, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class NotInstallableCode(IntEnum):
    """Reasons why an asset mapping cannot be installed."""

    MISSING_PARAMETER = 1
    NO_SUCH_PARAMETER = 2
    INSTALLER_NOT_FOUND = 3
    NO_RESOURCE_MATCHES = 4
    SERVER_NOT_FOUND = 5
    INSTALLER_CLASS_NOT_FOUND = 6
    INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR = 7
    INSTALLER_CLASS_INVALID = 8


class NotInstallableError(AssetError):
    """An asset mapping cannot be installed.

    The ``code`` tells which stage of the installation pipeline failed.
    ``context["name"]`` holds the offending parameter, installer, server,
    glob or class name.
    """

    def __init__(self, code: NotInstallableCode, message: str, context: dict | None = None):
        super().__init__(message, context)
        self.code = code

    @classmethod
    def missing_parameter(cls, parameter_name: str, installer_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.MISSING_PARAMETER,
            f'The parameter "{parameter_name}" is required for the installer "{installer_name}".',
            context={"name": parameter_name, "installer_name": installer_name},
        )

    @classmethod
    def no_such_parameter(cls, parameter_name: str, installer_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.NO_SUCH_PARAMETER,
            f'The parameter "{parameter_name}" does not exist for the installer "{installer_name}".',
            context={"name": parameter_name, "installer_name": installer_name},
        )

    @classmethod
    def installer_not_found(cls, installer_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.INSTALLER_NOT_FOUND,
            f'The installer "{installer_name}" does not exist.',
            context={"name": installer_name},
        )

    @classmethod
    def no_resource_matches(cls, glob: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.NO_RESOURCE_MATCHES,
            f'The glob "{glob}" did not return any resources.',
            context={"name": glob},
        )

    @classmethod
    def server_not_found(cls, server_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.SERVER_NOT_FOUND,
            f'The asset server "{server_name}" does not exist.',
            context={"name": server_name},
        )

    @classmethod
    def installer_class_not_found(cls, class_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.INSTALLER_CLASS_NOT_FOUND,
            f'The installer class "{class_name}" does not exist.',
            context={"name": class_name},
        )

    @classmethod
    def installer_class_no_default_constructor(cls, class_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.INSTALLER_CLASS_NO_DEFAULT_CONSTRUCTOR,
            f'The constructor of class "{class_name}" must not have required parameters.',
            context={"name": class_name},
        )

    @classmethod
    def installer_class_invalid(cls, class_name: str) -> "NotInstallableError":
        return cls(
            NotInstallableCode.INSTALLER_CLASS_INVALID,
            f'The installer class "{class_name}" must implement ResourceInstaller.',
            context={"name": class_name},
        )


class NoSuchServerError(AssetError):
    """Server not found in the server collection."""

    def __init__(self, server_name: str | None, known: Iterable[str] = (), message: str | None = None):
        suggestions = _suggest(server_name, known) if server_name else []
        if message is None:
            message = f'The asset server "{server_name}" does not exist.'
            if suggestions:
                message += f" Did you mean: {', '.join(suggestions)}?"
        super().__init__(message, context={"server_name": server_name, "suggestions": suggestions})
        self.server_name = server_name
        self.suggestions = suggestions


class NoSuchInstallerError(AssetError):
    """Installer descriptor not found."""

    def __init__(self, installer_name: str, known: Iterable[str] = (), scope_name: str | None = None):
        suggestions = _suggest(installer_name, known)
        if scope_name:
            message = f'The installer "{installer_name}" does not exist in the root scope "{scope_name}".'
        else:
            message = f'The installer "{installer_name}" does not exist.'
        if suggestions:
            message += f" Did you mean: {', '.join(suggestions)}?"
        super().__init__(
            message,
            context={"installer_name": installer_name, "scope_name": scope_name, "suggestions": suggestions},
        )
        self.installer_name = installer_name
        self.suggestions = suggestions


class NoSuchParameterError(AssetError):
    """Installer parameter not found."""

    def __init__(self, parameter_name: str, installer_name: str):
        super().__init__(
            f'The installer parameter "{parameter_name}" does not exist for the "{installer_name}" installer.',
            context={"parameter_name": parameter_name, "installer_name": installer_name},
        )
        self.parameter_name = parameter_name
        self.installer_name = installer_name


class NoSuchAssetMappingError(AssetError):
    """Asset mapping not found."""

    def __init__(self, uuid):
        super().__init__(f'The asset mapping "{uuid}" does not exist.', context={"uuid": str(uuid)})
        self.uuid = uuid


class DuplicateAssetMappingError(AssetError):
    """An asset mapping with the same UUID exists already."""

    def __init__(self, uuid):
        super().__init__(f'An asset mapping with the UUID "{uuid}" exists already.', context={"uuid": str(uuid)})
        self.uuid = uuid


class InstallerConflictError(AssetError):
    """Installer descriptor cannot be changed because it is not owned by the root scope."""


class InvalidExtraDataError(AssetError):
    """Extra data stored in a scope does not match its schema."""


class ProjectFileError(AssetError):
    """Project file could not be read or written."""
