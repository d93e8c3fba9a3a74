from __future__ import annotations

from typing import Any

from azure.mgmt.core.tools import parse_resource_id

from expressroute.core.exceptions import ValidationException
from expressroute.core.logging import get_logger

from ..clients import Clients, run_poller
from ..validators import normalize_location, require_name, validate_location, validate_resource_id

logger = get_logger(__name__)


async def create_resource_group(
    *,
    clients: Clients,
    resource_group: str,
    location: str,
    tags: dict[str, str] | None = None,
) -> Any:
    require_name("resource_group", resource_group)
    if not validate_location(location):
        raise ValidationException(
            f"invalid location: {location}", details={"location": location}
        )
    location = normalize_location(location)
    logger.info("Creating resource group...", resource_group=resource_group, location=location)
    group = await run_poller(
        clients,
        clients.res.resource_groups.create_or_update,
        resource_group,
        {"location": location, "tags": tags or {}},
    )
    logger.info("Created a resource group", resource_group=group.name, id=group.id)
    return group


def resource_group_name(resource_group_id: str) -> str:
    if not validate_resource_id(resource_group_id):
        raise ValidationException(
            f"not a resource group id: {resource_group_id!r}",
            details={"resource_group_id": resource_group_id},
        )
    return parse_resource_id(resource_group_id)["resource_group"]


async def delete_resource_group(*, clients: Clients, resource_group_id: str) -> None:
    name = resource_group_name(resource_group_id)
    logger.info("Deleting resource group...", resource_group=name)
    await run_poller(clients, clients.res.resource_groups.begin_delete, name)
    logger.info("Deleted resource group", resource_group=name)
