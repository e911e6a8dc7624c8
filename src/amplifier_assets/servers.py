"""Server manager - servers persisted in the root scope."""

import logging

from .exceptions import NoSuchInstallerError
from .expr import Expression
from .expr import Key
from .expr import Same
from .expr import Valid
from .registry import InstallerManager
from .schema import SERVERS_KEY
from .schema import ServerData
from .schema import parse_servers
from .server import DEFAULT_URL_FORMAT
from .server import Server
from .server import ServerCollection
from .storage import Scope

logger = logging.getLogger(__name__)


def _data_to_server(name: str, data: ServerData) -> Server:
    return Server(
        name=name,
        installer_name=data.installer,
        document_root=data.document_root,
        url_format=data.url_format or DEFAULT_URL_FORMAT,
        parameter_values=data.parameters,
    )


def _server_to_data(server: Server) -> dict:
    data: dict = {"installer": server.installer_name, "document-root": server.document_root}

    if server.url_format != DEFAULT_URL_FORMAT:
        data["url-format"] = server.url_format

    if server.parameter_values:
        data["parameters"] = dict(server.parameter_values)

    return data


class ServerManager:
    """
    Manages the servers of the root scope.

    Changes are saved through the root scope's extra data store and rolled
    back in memory if saving fails.
    """

    def __init__(self, root: Scope, installer_manager: InstallerManager):
        self.root = root
        self.installer_manager = installer_manager
        self._servers: ServerCollection | None = None

    def _load(self) -> ServerCollection:
        if self._servers is None:
            data = self.root.extra.get_extra_key(SERVERS_KEY) or {}
            servers = parse_servers(data, self.root.name)
            self._servers = ServerCollection(_data_to_server(name, entry) for name, entry in servers.items())
            logger.debug(f"Loaded {len(self._servers)} servers from {self.root.name}")
        return self._servers

    def _persist(self) -> None:
        if self._servers.is_empty():
            self.root.extra.remove_extra_key(SERVERS_KEY)
        else:
            data = {server.name: _server_to_data(server) for server in self._servers}
            self.root.extra.set_extra_key(SERVERS_KEY, data)

    def _commit(self, previous: list[Server], previous_default: str | None) -> None:
        try:
            self._persist()
        except Exception:
            self._servers.replace(previous)
            if previous_default is not None:
                self._servers.set_default_server(previous_default)
            raise

    def _snapshot(self) -> tuple[list[Server], str | None]:
        servers = self._load()
        default = servers.get_default_server().name if not servers.is_empty() else None
        return list(servers), default

    def add_server(self, server: Server) -> None:
        """
        Add or replace a server.

        Raises:
            NoSuchInstallerError: If the server's installer does not exist
        """
        servers = self._load()

        if not self.installer_manager.has_installer_descriptor(server.installer_name):
            raise NoSuchInstallerError(
                server.installer_name, [d.name for d in self.installer_manager.get_installer_descriptors()]
            )

        previous, previous_default = self._snapshot()
        servers.add(server)
        self._commit(previous, previous_default)

        logger.debug(f"Added server {server.name}")

    def remove_server(self, server_name: str) -> None:
        self.remove_servers(Key("name", Same(server_name)))

    def remove_servers(self, expr: Expression) -> None:
        servers = self._load()
        previous, previous_default = self._snapshot()

        removed = [server.name for server in servers if expr.evaluate(server)]
        if not removed:
            return

        for name in removed:
            servers.remove(name)

        self._commit(previous, previous_default)
        logger.debug(f"Removed servers: {', '.join(removed)}")

    def clear_servers(self) -> None:
        self.remove_servers(Valid())

    def get_server(self, server_name: str) -> Server:
        return self._load().get(server_name)

    def get_servers(self) -> ServerCollection:
        return self._load()

    def find_servers(self, expr: Expression) -> ServerCollection:
        return ServerCollection(server for server in self._load() if expr.evaluate(server))

    def has_server(self, server_name: str) -> bool:
        return self._load().contains(server_name)

    def has_servers(self, expr: Expression | None = None) -> bool:
        servers = self._load()
        if expr is None:
            return not servers.is_empty()
        return any(expr.evaluate(server) for server in servers)

    def set_default_server(self, server_name: str) -> None:
        """Make a server the default for this session (the default is not persisted)."""
        self._load().set_default_server(server_name)

    def get_default_server(self) -> Server:
        return self._load().get_default_server()
