"""Extra data schemas - validate installer and server data stored in scopes.

Per AGENTS.md: Ruthless simplicity - pydantic models mirror the stored JSON,
minimal fields.
"""

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import TypeAdapter
from pydantic import ValidationError

from .exceptions import InvalidExtraDataError

INSTALLERS_KEY = "installers"
SERVERS_KEY = "servers"


class InstallerParameterData(BaseModel):
    """Stored form of an installer parameter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    required: bool = False
    default: str | int | float | bool | None = None
    description: str | None = Field(default=None, min_length=1)


class InstallerData(BaseModel):
    """Stored form of an installer descriptor (keyed by installer name)."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    class_name: str = Field(alias="class", min_length=1)
    description: str | None = Field(default=None, min_length=1)
    parameters: dict[str, InstallerParameterData] = Field(default_factory=dict)


class ServerData(BaseModel):
    """Stored form of a server (keyed by server name)."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    installer: str = Field(min_length=1)
    document_root: str = Field(alias="document-root", min_length=1)
    url_format: str | None = Field(default=None, alias="url-format")
    parameters: dict[str, Any] = Field(default_factory=dict)


_INSTALLERS = TypeAdapter(dict[str, InstallerData])
_SERVERS = TypeAdapter(dict[str, ServerData])


def _validate(adapter: TypeAdapter, data: Any, key: str, scope_name: str):
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidExtraDataError(
            f'The extra key "{key}" of "{scope_name}" is invalid:\n{e}',
            context={"key": key, "scope_name": scope_name, "errors": e.errors()},
        ) from e


def parse_installers(data: Any, scope_name: str) -> dict[str, InstallerData]:
    """
    Validate the installers stored in a scope.

    Args:
        data: Raw value of the ``installers`` extra key
        scope_name: Owner of the data (for error messages)

    Returns:
        Validated installer data keyed by installer name

    Raises:
        InvalidExtraDataError: If the data does not match the schema
    """
    return _validate(_INSTALLERS, data, INSTALLERS_KEY, scope_name)


def parse_servers(data: Any, scope_name: str) -> dict[str, ServerData]:
    """Validate the servers stored in a scope (see ``parse_installers``)."""
    return _validate(_SERVERS, data, SERVERS_KEY, scope_name)
