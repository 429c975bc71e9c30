"""Azure cloud provider.

Wraps the Azure SDK async management clients. The credential and the
client bundle are built on first use and shared by all requests; the
clients are safe for concurrent use and are only read after construction.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional

from azure.identity.aio import ClientSecretCredential
from azure.mgmt.compute.aio import ComputeManagementClient
from azure.mgmt.containerinstance.aio import ContainerInstanceManagementClient
from azure.mgmt.resource.resources.aio import ResourceManagementClient

from shared.config import AzureSettings
from shared.logging import get_logger
from providers.base import CloudProvider, Record

logger = get_logger(__name__)


@dataclass
class AzureClients:
    """Management clients sharing one credential."""
    credential: ClientSecretCredential
    resources: ResourceManagementClient
    compute: ComputeManagementClient
    containers: ContainerInstanceManagementClient

    async def close(self) -> None:
        await self.resources.close()
        await self.compute.close()
        await self.containers.close()
        await self.credential.close()


def _missing_settings(settings: AzureSettings) -> list[str]:
    required = {
        "AZURE_TENANT_ID": settings.tenant_id,
        "AZURE_CLIENT_ID": settings.client_id,
        "AZURE_CLIENT_SECRET": settings.client_secret,
        "AZURE_SUBSCRIPTION_ID": settings.subscription_id,
    }
    return [name for name, value in required.items() if not value]


def create_clients(settings: AzureSettings) -> AzureClients:
    """
    Build the Azure client bundle from a service principal.

    Raises:
        ValueError: If any part of the credential or the subscription is missing
    """
    missing = _missing_settings(settings)
    if missing:
        raise ValueError(f"Azure credentials are not configured: missing {', '.join(missing)}")

    credential = ClientSecretCredential(
        tenant_id=settings.tenant_id,
        client_id=settings.client_id,
        client_secret=settings.client_secret,
    )
    subscription_id = settings.subscription_id

    return AzureClients(
        credential=credential,
        resources=ResourceManagementClient(credential, subscription_id),
        compute=ComputeManagementClient(credential, subscription_id),
        containers=ContainerInstanceManagementClient(credential, subscription_id),
    )


class AzureProvider(CloudProvider):
    """
    Cloud provider backed by Azure Resource Manager.

    Records are projected to the handful of fields the gateway reports.
    """

    name = "azure"

    def __init__(self, settings: AzureSettings, clients: Optional[AzureClients] = None) -> None:
        self.settings = settings
        self._clients = clients
        self._lock = asyncio.Lock()

    async def _get_clients(self) -> AzureClients:
        if self._clients is None:
            async with self._lock:
                if self._clients is None:
                    self._clients = create_clients(self.settings)
                    logger.info(
                        "Azure clients created",
                        subscription_id=self.settings.subscription_id
                    )
        return self._clients

    async def list_resource_groups(self) -> AsyncIterator[Record]:
        clients = await self._get_clients()
        async for group in clients.resources.resource_groups.list():
            yield {"name": group.name, "location": group.location, "id": group.id}

    async def list_virtual_machines(self, resource_group: str) -> AsyncIterator[Record]:
        clients = await self._get_clients()
        async for vm in clients.compute.virtual_machines.list(resource_group):
            hardware = vm.hardware_profile
            yield {
                "name": vm.name,
                "location": vm.location,
                "vmSize": hardware.vm_size if hardware else None,
                "provisioningState": vm.provisioning_state,
            }

    async def list_container_groups(self, resource_group: str) -> AsyncIterator[Record]:
        clients = await self._get_clients()
        async for group in clients.containers.container_groups.list_by_resource_group(resource_group):
            yield {
                "name": group.name,
                "location": group.location,
                "provisioningState": group.provisioning_state,
                "containers": _project_containers(group.containers),
            }

    async def get_container_logs(
        self,
        resource_group: str,
        container_group: str,
        container_name: str
    ) -> Optional[str]:
        clients = await self._get_clients()
        logs = await clients.containers.containers.list_logs(
            resource_group, container_group, container_name
        )
        return logs.content

    async def restart_container_group(self, resource_group: str, container_group: str) -> None:
        clients = await self._get_clients()
        poller = await clients.containers.container_groups.begin_restart(
            resource_group, container_group
        )
        await poller.result()

    async def close(self) -> None:
        if self._clients is not None:
            await self._clients.close()
            self._clients = None


def _project_containers(containers: Optional[list[Any]]) -> Optional[list[Record]]:
    if containers is None:
        return None
    return [{"name": c.name, "image": c.image} for c in containers]
