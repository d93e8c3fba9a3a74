from __future__ import annotations

from typing import Any

from expressroute.core.config import GatewayConfig
from expressroute.core.logging import get_logger

from ..clients import Clients, run_poller
from ..validators import require_name

logger = get_logger(__name__)


def gateway_parameters(
    *,
    location: str,
    cfg: GatewayConfig,
    ip_configuration_name: str,
    public_ip_id: str,
    subnet_id: str,
) -> dict[str, Any]:
    return {
        "location": location,
        "tags": dict(cfg.tags),
        "sku": {"name": cfg.sku_name, "tier": cfg.sku_tier},
        "enable_bgp": cfg.enable_bgp,
        "gateway_type": cfg.gateway_type,
        "vpn_type": cfg.vpn_type,
        "ip_configurations": [
            {
                "name": ip_configuration_name,
                "private_ip_allocation_method": "Dynamic",
                "public_ip_address": {"id": public_ip_id},
                "subnet": {"id": subnet_id},
            }
        ],
    }


async def create_vnet_gateway(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    name: str,
    cfg: GatewayConfig,
    ip_configuration_name: str,
    public_ip_id: str,
    subnet_id: str,
) -> Any:
    """Create the gateway and wait for it; this usually takes tens of minutes."""
    require_name("generic", name)
    require_name("generic", ip_configuration_name)
    logger.info(
        "Creating virtual network gateway...",
        gateway=name,
        sku=cfg.sku_name,
        gateway_type=cfg.gateway_type,
        vpn_type=cfg.vpn_type,
    )
    gateway = await run_poller(
        clients,
        clients.net.virtual_network_gateways.begin_create_or_update,
        resource_group,
        name,
        gateway_parameters(
            location=location,
            cfg=cfg,
            ip_configuration_name=ip_configuration_name,
            public_ip_id=public_ip_id,
            subnet_id=subnet_id,
        ),
    )
    logger.info("Created virtual network gateway", gateway=gateway.name)
    return gateway


async def create_gateway_connection(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    name: str,
    gateway_id: str,
    circuit_id: str,
    authorization_key: str | None = None,
) -> Any:
    require_name("generic", name)
    params: dict[str, Any] = {
        "location": location,
        "connection_type": "ExpressRoute",
        "virtual_network_gateway1": {"id": gateway_id},
        "peer": {"id": circuit_id},
    }
    # Only needed when circuit and gateway live in different subscriptions.
    if authorization_key:
        params["authorization_key"] = authorization_key
    logger.info("Creating virtual network gateway connection...", connection=name)
    connection = await run_poller(
        clients,
        clients.net.virtual_network_gateway_connections.begin_create_or_update,
        resource_group,
        name,
        params,
    )
    logger.info("Created virtual network gateway connection", connection=connection.name)
    return connection
