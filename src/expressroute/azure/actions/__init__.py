from __future__ import annotations

from .express_route import add_circuit_authorization, create_circuit, create_circuit_peering
from .gateway import create_gateway_connection, create_vnet_gateway
from .network import create_public_ip, create_vnet, find_subnet_id
from .resource_groups import create_resource_group, delete_resource_group

__all__ = [
    "add_circuit_authorization",
    "create_circuit",
    "create_circuit_peering",
    "create_gateway_connection",
    "create_public_ip",
    "create_resource_group",
    "create_vnet",
    "create_vnet_gateway",
    "delete_resource_group",
    "find_subnet_id",
]
