from __future__ import annotations

from typing import Any

from expressroute.core.config import CircuitConfig, PeeringConfig
from expressroute.core.logging import get_logger

from ..clients import Clients, run_poller
from ..validators import require_name

logger = get_logger(__name__)


def circuit_parameters(location: str, cfg: CircuitConfig) -> dict[str, Any]:
    return {
        "location": location,
        "tags": dict(cfg.tags),
        "sku": {
            "name": cfg.sku_name,
            "tier": cfg.sku_tier,
            "family": cfg.sku_family,
        },
        "service_provider_properties": {
            "service_provider_name": cfg.service_provider_name,
            "peering_location": cfg.peering_location,
            "bandwidth_in_mbps": cfg.bandwidth_in_mbps,
        },
    }


def peering_parameters(cfg: PeeringConfig) -> dict[str, Any]:
    params: dict[str, Any] = {
        "name": cfg.peering_type,
        "peering_type": cfg.peering_type,
        "peer_asn": cfg.peer_asn,
        "vlan_id": cfg.vlan_id,
        "primary_peer_address_prefix": cfg.primary_peer_address_prefix,
        "secondary_peer_address_prefix": cfg.secondary_peer_address_prefix,
    }
    if cfg.peering_type == "MicrosoftPeering":
        params["microsoft_peering_config"] = {
            "advertised_public_prefixes": list(cfg.advertised_public_prefixes),
            "legacy_mode": cfg.legacy_mode,
        }
    return params


async def create_circuit(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    name: str,
    cfg: CircuitConfig,
) -> Any:
    require_name("generic", name)
    logger.info(
        "Creating express route circuit...",
        circuit=name,
        sku=cfg.sku_name,
        provider=cfg.service_provider_name,
        peering_location=cfg.peering_location,
        bandwidth_in_mbps=cfg.bandwidth_in_mbps,
    )
    circuit = await run_poller(
        clients,
        clients.net.express_route_circuits.begin_create_or_update,
        resource_group,
        name,
        circuit_parameters(location, cfg),
    )
    logger.info("Created express route circuit", circuit=circuit.name)
    return circuit


async def create_circuit_peering(
    *,
    clients: Clients,
    resource_group: str,
    circuit_name: str,
    cfg: PeeringConfig,
) -> Any:
    # The circuit must already be provisioned by the connectivity provider.
    logger.info(
        "Creating express route circuit peering...",
        circuit=circuit_name,
        peering_type=cfg.peering_type,
        peer_asn=cfg.peer_asn,
        vlan_id=cfg.vlan_id,
    )
    peering = await run_poller(
        clients,
        clients.net.express_route_circuit_peerings.begin_create_or_update,
        resource_group,
        circuit_name,
        cfg.peering_type,
        peering_parameters(cfg),
    )
    logger.info("Created express route circuit peering", peering=peering.name)
    return peering


async def add_circuit_authorization(
    *,
    clients: Clients,
    resource_group: str,
    circuit_name: str,
    authorization_name: str,
) -> Any:
    require_name("generic", authorization_name)
    logger.info(
        "Adding authorization to express route circuit...",
        circuit=circuit_name,
        authorization=authorization_name,
    )
    authorization = await run_poller(
        clients,
        clients.net.express_route_circuit_authorizations.begin_create_or_update,
        resource_group,
        circuit_name,
        authorization_name,
        {},
    )
    logger.info("Added express route circuit authorization", authorization=authorization.name)
    return authorization
