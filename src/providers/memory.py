"""In-memory cloud provider.

Serves a small fixed inventory so the gateway can run without Azure
credentials. Used for local development and as the default test double.
"""

import copy
from typing import Any, AsyncIterator, Optional

from shared.logging import get_logger
from providers.base import CloudProvider, Record

logger = get_logger(__name__)


SAMPLE_INVENTORY: dict[str, dict[str, Any]] = {
    "rg-production": {
        "id": "/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/rg-production",
        "location": "eastus",
        "virtual_machines": [
            {
                "name": "vm-api-01",
                "location": "eastus",
                "vmSize": "Standard_D2s_v3",
                "provisioningState": "Succeeded",
            },
            {
                "name": "vm-api-02",
                "location": "eastus",
                "vmSize": "Standard_D2s_v3",
                "provisioningState": "Succeeded",
            },
        ],
        "container_groups": {
            "cg-worker": {
                "location": "eastus",
                "provisioningState": "Succeeded",
                "containers": {
                    "worker": {
                        "image": "myregistry.azurecr.io/worker:1.5.0",
                        "logs": (
                            "2026-02-09T10:00:00Z INFO Worker starting\n"
                            "2026-02-09T10:00:01Z INFO Connected to queue\n"
                        ),
                    },
                    "sidecar": {
                        "image": "mcr.microsoft.com/oss/envoy:v1.29",
                        "logs": "",
                    },
                },
            },
        },
    },
    "rg-staging": {
        "id": "/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/rg-staging",
        "location": "westeurope",
        "virtual_machines": [],
        "container_groups": {},
    },
}


class ResourceNotFoundError(LookupError):
    """Raised when an addressed resource does not exist."""


class InMemoryProvider(CloudProvider):
    """
    Provider backed by a nested dict of resource groups.

    Restarts are recorded in ``restarts`` so callers can assert on them.
    """

    name = "memory"

    def __init__(self, inventory: Optional[dict[str, dict[str, Any]]] = None) -> None:
        self._inventory = copy.deepcopy(
            SAMPLE_INVENTORY if inventory is None else inventory
        )
        self.restarts: list[tuple[str, str]] = []

    def _group(self, resource_group: str) -> dict[str, Any]:
        group = self._inventory.get(resource_group)
        if group is None:
            raise ResourceNotFoundError(f"Resource group '{resource_group}' could not be found.")
        return group

    def _container_group(self, resource_group: str, container_group: str) -> dict[str, Any]:
        groups = self._group(resource_group).get("container_groups", {})
        if container_group not in groups:
            raise ResourceNotFoundError(
                f"Container group '{container_group}' not found in resource group '{resource_group}'."
            )
        return groups[container_group]

    async def list_resource_groups(self) -> AsyncIterator[Record]:
        for name, group in self._inventory.items():
            yield {"name": name, "location": group.get("location"), "id": group.get("id")}

    async def list_virtual_machines(self, resource_group: str) -> AsyncIterator[Record]:
        for vm in self._group(resource_group).get("virtual_machines", []):
            yield dict(vm)

    async def list_container_groups(self, resource_group: str) -> AsyncIterator[Record]:
        for name, group in self._group(resource_group).get("container_groups", {}).items():
            yield {
                "name": name,
                "location": group.get("location"),
                "provisioningState": group.get("provisioningState"),
                "containers": [
                    {"name": c_name, "image": c["image"]}
                    for c_name, c in group.get("containers", {}).items()
                ],
            }

    async def get_container_logs(
        self,
        resource_group: str,
        container_group: str,
        container_name: str
    ) -> Optional[str]:
        containers = self._container_group(resource_group, container_group).get("containers", {})
        if container_name not in containers:
            raise ResourceNotFoundError(
                f"Container '{container_name}' not found in container group '{container_group}'."
            )
        return containers[container_name].get("logs") or None

    async def restart_container_group(self, resource_group: str, container_group: str) -> None:
        self._container_group(resource_group, container_group)
        self.restarts.append((resource_group, container_group))
        logger.info(
            "Container group restarted",
            resource_group=resource_group,
            container_group=container_group
        )
