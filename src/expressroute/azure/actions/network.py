from __future__ import annotations

from typing import Any

from expressroute.core.config import PublicIpConfig, VirtualNetworkConfig
from expressroute.core.exceptions import ResourceNotFoundException
from expressroute.core.logging import get_logger

from ..clients import Clients, run_poller
from ..validators import require_name

logger = get_logger(__name__)


def vnet_parameters(location: str, cfg: VirtualNetworkConfig) -> dict[str, Any]:
    return {
        "location": location,
        "address_space": {"address_prefixes": [cfg.address_prefix]},
        "subnets": [
            {"name": s.name, "address_prefix": s.address_prefix} for s in cfg.subnets
        ],
    }


async def create_vnet(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    name: str,
    cfg: VirtualNetworkConfig,
) -> Any:
    require_name("vnet", name)
    logger.info(
        "Creating virtual network...",
        vnet=name,
        address_prefix=cfg.address_prefix,
        subnets=[s.name for s in cfg.subnets],
    )
    vnet = await run_poller(
        clients,
        clients.net.virtual_networks.begin_create_or_update,
        resource_group,
        name,
        vnet_parameters(location, cfg),
    )
    logger.info("Created a virtual network", vnet=vnet.name)
    return vnet


def find_subnet_id(vnet: Any, subnet_name: str) -> str:
    for subnet in getattr(vnet, "subnets", None) or []:
        if subnet.name == subnet_name:
            return subnet.id
    raise ResourceNotFoundException(
        f"subnet {subnet_name} not found in virtual network {getattr(vnet, 'name', None)}",
        details={"vnet": getattr(vnet, "name", None), "subnet": subnet_name},
    )


async def create_public_ip(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    public_ip_name: str,
    cfg: PublicIpConfig,
    tags: dict[str, str] | None = None,
) -> Any:
    require_name("generic", public_ip_name)
    logger.info("Creating public ip address...", public_ip=public_ip_name)
    pip = await run_poller(
        clients,
        clients.net.public_ip_addresses.begin_create_or_update,
        resource_group,
        public_ip_name,
        {
            "location": location,
            "public_ip_allocation_method": cfg.allocation_method,
            "sku": {"name": cfg.sku},
            "tags": tags or {},
        },
    )
    logger.info("Created public ip address", public_ip=pip.name)
    return pip
