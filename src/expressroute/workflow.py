"""Azure Network sample for managing express route circuits.

The workflow:

- creates a resource group,
- creates an express route circuit,
- creates the circuit's Microsoft peering (the circuit has to be provisioned
  by the connectivity provider before this step succeeds for real),
- optionally adds an authorization to the circuit,
- creates a virtual network to host a virtual network gateway,
- creates a public ip and the virtual network gateway,
- optionally connects the gateway to the circuit,
- deletes the resource group again.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from expressroute.azure.actions import (
    add_circuit_authorization,
    create_circuit,
    create_circuit_peering,
    create_gateway_connection,
    create_public_ip,
    create_resource_group,
    create_vnet,
    create_vnet_gateway,
    delete_resource_group,
    find_subnet_id,
)
from expressroute.azure.clients import Clients
from expressroute.azure.naming import SampleNames
from expressroute.azure.tags import standard_tags
from expressroute.core.config import (
    GATEWAY_SUBNET_NAME,
    ExpressRouteSampleConfig,
    get_settings,
)
from expressroute.core.logging import bound_context, get_logger

logger = get_logger(__name__)


@dataclass
class ProvisionedResources:
    resource_group_id: str | None = None
    circuit: Any = None
    peering: Any = None
    authorization: Any = None
    virtual_network: Any = None
    public_ip: Any = None
    gateway: Any = None
    connection: Any = None
    steps: list[str] = field(default_factory=list)


class ExpressRouteSample:
    def __init__(
        self,
        clients: Clients,
        config: ExpressRouteSampleConfig | None = None,
        names: SampleNames | None = None,
        location: str | None = None,
    ) -> None:
        self.clients = clients
        self.config = config if config is not None else get_settings().sample
        self.names = names or SampleNames.generate()
        self.location = location or self.config.location or get_settings().azure.default_location
        self.resources = ProvisionedResources()

    async def run(self) -> ProvisionedResources:
        with bound_context(run_id=uuid.uuid4().hex[:12]):
            logger.info(
                "Starting express route sample", location=self.location, **self.names.as_dict()
            )
            try:
                await self.provision()
                logger.info("Express route sample completed", steps=self.resources.steps)
                return self.resources
            finally:
                await self.cleanup()

    async def provision(self) -> ProvisionedResources:
        res = self.resources
        names = self.names
        cfg = self.config

        group = await create_resource_group(
            clients=self.clients,
            resource_group=names.resource_group,
            location=self.location,
            tags=standard_tags(),
        )
        res.resource_group_id = group.id
        res.steps.append("resource_group")
        location = group.location or self.location

        res.circuit = await create_circuit(
            clients=self.clients,
            resource_group=names.resource_group,
            location=location,
            name=names.circuit,
            cfg=cfg.circuit,
        )
        res.steps.append("circuit")

        res.peering = await create_circuit_peering(
            clients=self.clients,
            resource_group=names.resource_group,
            circuit_name=names.circuit,
            cfg=cfg.peering,
        )
        res.steps.append("peering")

        if cfg.add_authorization:
            res.authorization = await add_circuit_authorization(
                clients=self.clients,
                resource_group=names.resource_group,
                circuit_name=names.circuit,
                authorization_name=cfg.authorization_name,
            )
            res.steps.append("authorization")

        res.virtual_network = await create_vnet(
            clients=self.clients,
            resource_group=names.resource_group,
            location=location,
            name=names.virtual_network,
            cfg=cfg.virtual_network,
        )
        res.steps.append("virtual_network")

        res.public_ip = await create_public_ip(
            clients=self.clients,
            resource_group=names.resource_group,
            location=location,
            public_ip_name=names.public_ip,
            cfg=cfg.public_ip,
            tags=standard_tags(),
        )
        res.steps.append("public_ip")

        res.gateway = await create_vnet_gateway(
            clients=self.clients,
            resource_group=names.resource_group,
            location=location,
            name=names.gateway,
            cfg=cfg.gateway,
            ip_configuration_name=names.ip_configuration,
            public_ip_id=res.public_ip.id,
            subnet_id=find_subnet_id(res.virtual_network, GATEWAY_SUBNET_NAME),
        )
        res.steps.append("gateway")

        if cfg.create_connection:
            res.connection = await create_gateway_connection(
                clients=self.clients,
                resource_group=names.resource_group,
                location=location,
                name=names.connection,
                gateway_id=res.gateway.id,
                circuit_id=res.circuit.id,
                authorization_key=getattr(res.authorization, "authorization_key", None),
            )
            res.steps.append("connection")

        return res

    async def cleanup(self) -> None:
        """Delete the resource group if one was created. Never raises."""
        resource_group_id = self.resources.resource_group_id
        if resource_group_id is None:
            logger.info("Did not create any resources in Azure. No clean up is necessary")
            return
        try:
            await delete_resource_group(clients=self.clients, resource_group_id=resource_group_id)
        except Exception as exc:
            logger.error(
                "Failed to delete resource group",
                resource_group_id=resource_group_id,
                error_type=type(exc).__name__,
                error=str(exc),
                exc_info=True,
            )


async def run_sample(
    clients: Clients,
    config: ExpressRouteSampleConfig | None = None,
    location: str | None = None,
) -> ProvisionedResources:
    return await ExpressRouteSample(clients, config=config, location=location).run()
