"""Asset mapping store backed by a discovery manager.

Mappings are saved as bindings of the asset mapping binding type; queries
over mapping fields are translated with ``BindingExpressionBuilder``.
"""

import logging
from uuid import UUID

from .discovery import BindingDescriptor
from .exceptions import DuplicateAssetMappingError
from .exceptions import NoSuchAssetMappingError
from .exceptions import NoSuchServerError
from .expr import Expression
from .expr import Key
from .expr import Same
from .expr import Valid
from .mapping import AssetMapping
from .protocols import DiscoveryManager
from .server import ServerCollection
from .translator import BINDING_TYPE
from .translator import PATH_PARAMETER
from .translator import QUERY_SUFFIX
from .translator import SERVER_PARAMETER
from .translator import BindingExpressionBuilder

logger = logging.getLogger(__name__)


def _binding_to_mapping(binding: BindingDescriptor) -> AssetMapping:
    return AssetMapping(
        glob=binding.query[: -len(QUERY_SUFFIX)],
        server_name=binding.get_parameter_value(SERVER_PARAMETER),
        server_path=binding.get_parameter_value(PATH_PARAMETER),
        uuid=binding.uuid,
    )


class DiscoveryAssetManager:
    """
    Manages asset mappings of the root scope and queries all mappings.

    Example:
        >>> assets = DiscoveryAssetManager(InMemoryDiscoveryManager(), servers)
        >>> assets.add_root_asset_mapping(AssetMapping(glob="/app/public", server_name="localhost"))
        >>> assets.find_asset_mappings(same("localhost", "server_name"))
    """

    def __init__(self, discovery_manager: DiscoveryManager, servers: ServerCollection):
        self.discovery_manager = discovery_manager
        self.servers = servers
        self.expr_builder = BindingExpressionBuilder()

    def _uuid_expr(self, uuid: UUID) -> Expression:
        return self.expr_builder.build_expression(Key("uuid", Same(uuid)))

    def add_root_asset_mapping(
        self,
        mapping: AssetMapping,
        override: bool = False,
        ignore_server_not_found: bool = False,
    ) -> None:
        """
        Add an asset mapping to the root scope.

        Args:
            mapping: The mapping to add
            override: Replace an existing mapping with the same UUID
            ignore_server_not_found: Accept mappings to unknown servers

        Raises:
            NoSuchServerError: If the server does not exist
            DuplicateAssetMappingError: If the UUID is taken and ``override`` is not set
        """
        if not ignore_server_not_found and not self.servers.contains(mapping.server_name):
            raise NoSuchServerError(mapping.server_name, self.servers.get_server_names())

        if not override and self.has_asset_mapping(mapping.uuid):
            raise DuplicateAssetMappingError(mapping.uuid)

        binding = BindingDescriptor(
            # Match directories as well as their contents
            query=mapping.glob + QUERY_SUFFIX,
            type_name=BINDING_TYPE,
            parameter_values={SERVER_PARAMETER: mapping.server_name, PATH_PARAMETER: mapping.server_path},
            language="glob",
            uuid=mapping.uuid,
        )
        self.discovery_manager.add_root_binding(binding, override=override)

        logger.debug(f"Added asset mapping {mapping.uuid}: {mapping.glob} -> {mapping.server_name}{mapping.server_path}")

    def remove_root_asset_mapping(self, uuid: UUID) -> None:
        self.discovery_manager.remove_root_bindings(self._uuid_expr(uuid))

    def remove_root_asset_mappings(self, expr: Expression) -> None:
        self.discovery_manager.remove_root_bindings(self.expr_builder.build_expression(expr))

    def clear_root_asset_mappings(self) -> None:
        self.discovery_manager.remove_root_bindings(self.expr_builder.build_expression())

    def get_root_asset_mapping(self, uuid: UUID) -> AssetMapping:
        mappings = self.find_root_asset_mappings(Key("uuid", Same(uuid)))
        if not mappings:
            raise NoSuchAssetMappingError(uuid)
        return mappings[0]

    def get_root_asset_mappings(self) -> list[AssetMapping]:
        return self.find_root_asset_mappings(Valid())

    def find_root_asset_mappings(self, expr: Expression) -> list[AssetMapping]:
        bindings = self.discovery_manager.find_root_bindings(self.expr_builder.build_expression(expr))
        return [_binding_to_mapping(binding) for binding in bindings]

    def has_root_asset_mapping(self, uuid: UUID) -> bool:
        return self.discovery_manager.has_root_bindings(self._uuid_expr(uuid))

    def has_root_asset_mappings(self, expr: Expression | None = None) -> bool:
        return self.discovery_manager.has_root_bindings(self.expr_builder.build_expression(expr))

    def get_asset_mapping(self, uuid: UUID) -> AssetMapping:
        mappings = self.find_asset_mappings(Key("uuid", Same(uuid)))
        if not mappings:
            raise NoSuchAssetMappingError(uuid)
        return mappings[0]

    def get_asset_mappings(self) -> list[AssetMapping]:
        return self.find_asset_mappings(Valid())

    def find_asset_mappings(self, expr: Expression) -> list[AssetMapping]:
        bindings = self.discovery_manager.find_bindings(self.expr_builder.build_expression(expr))
        return [_binding_to_mapping(binding) for binding in bindings]

    def has_asset_mapping(self, uuid: UUID) -> bool:
        return self.discovery_manager.has_bindings(self._uuid_expr(uuid))

    def has_asset_mappings(self, expr: Expression | None = None) -> bool:
        return self.discovery_manager.has_bindings(self.expr_builder.build_expression(expr))
