"""Asset servers - named installation targets."""

from collections.abc import Iterable
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from .exceptions import NoSuchParameterError
from .exceptions import NoSuchServerError

DEFAULT_SERVER = "default"
DEFAULT_URL_FORMAT = "/%s"


class Server(BaseModel):
    """
    A target that assets are installed to.

    ``document_root`` is opaque to this library: a directory for the
    filesystem installers, a URL or other locator for custom installers.
    ``url_format`` turns a server path into a public URL.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    installer_name: str = Field(min_length=1)
    document_root: str = Field(min_length=1)
    url_format: str = Field(default=DEFAULT_URL_FORMAT, min_length=1)
    parameter_values: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _check_not_reserved(cls, value: str) -> str:
        if value == DEFAULT_SERVER:
            raise ValueError(f'The server name "{DEFAULT_SERVER}" is reserved.')
        return value

    @field_validator("url_format")
    @classmethod
    def _check_placeholder(cls, value: str) -> str:
        if "%s" not in value:
            raise ValueError(f'The URL format must contain a "%s" placeholder. Got: {value}')
        return value

    def get_parameter_value(self, name: str) -> Any:
        if name not in self.parameter_values:
            raise NoSuchParameterError(name, self.installer_name)
        return self.parameter_values[name]

    def has_parameter_value(self, name: str) -> bool:
        return name in self.parameter_values

    def has_parameter_values(self) -> bool:
        return bool(self.parameter_values)

    def url_for(self, server_path: str) -> str:
        """Return the public URL of a server path."""
        return self.url_format % server_path.lstrip("/")


class ServerCollection:
    """
    Servers indexed by name, with a default server.

    The first server added becomes the default. Removing the default server
    promotes the earliest added of the remaining servers. The reserved name
    ``"default"`` addresses the default server in ``get``, ``remove`` and
    ``contains``.
    """

    def __init__(self, servers: Iterable[Server] = ()):
        self._servers: dict[str, Server] = {}
        self._default: Server | None = None
        self.merge(servers)

    def add(self, server: Server) -> None:
        self._servers[server.name] = server
        if self._default is None:
            self._default = server
        elif self._default.name == server.name:
            self._default = server

    def get(self, server_name: str) -> Server:
        if server_name == DEFAULT_SERVER:
            return self.get_default_server()

        if server_name not in self._servers:
            raise NoSuchServerError(server_name, self._servers)

        return self._servers[server_name]

    def remove(self, server_name: str) -> None:
        if server_name == DEFAULT_SERVER and self._default is not None:
            server_name = self._default.name

        self._servers.pop(server_name, None)

        if self._default is not None and self._default.name == server_name:
            self._default = next(iter(self._servers.values()), None)

    def contains(self, server_name: str) -> bool:
        if server_name == DEFAULT_SERVER:
            return self._default is not None
        return server_name in self._servers

    def clear(self) -> None:
        self._servers = {}
        self._default = None

    def replace(self, servers: Iterable[Server]) -> None:
        self.clear()
        self.merge(servers)

    def merge(self, servers: Iterable[Server]) -> None:
        for server in servers:
            self.add(server)

    def is_empty(self) -> bool:
        return not self._servers

    def get_server_names(self) -> list[str]:
        return list(self._servers)

    def to_dict(self) -> dict[str, Server]:
        return dict(self._servers)

    def get_default_server(self) -> Server:
        if self._default is None:
            raise NoSuchServerError(None, message="Cannot get the default server of an empty collection.")
        return self._default

    def set_default_server(self, server_name: str) -> None:
        self._default = self.get(server_name)

    def __contains__(self, server_name: object) -> bool:
        return isinstance(server_name, str) and self.contains(server_name)

    def __getitem__(self, server_name: str) -> Server:
        return self.get(server_name)

    def __delitem__(self, server_name: str) -> None:
        self.remove(server_name)

    def __iter__(self) -> Iterator[Server]:
        return iter(list(self._servers.values()))

    def __len__(self) -> int:
        return len(self._servers)
