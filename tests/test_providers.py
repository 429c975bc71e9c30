"""Tests for cloud capability providers."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from shared.config import AzureSettings, GatewaySettings, Settings


class AsyncPager:
    """Minimal stand-in for the SDK's AsyncItemPaged."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for item in self._items:
            yield item


def make_azure_provider():
    from providers.azure import AzureClients, AzureProvider

    clients = AzureClients(
        credential=AsyncMock(),
        resources=AsyncMock(),
        compute=AsyncMock(),
        containers=AsyncMock(),
    )
    provider = AzureProvider(AzureSettings(), clients=clients)
    return provider, clients


async def collect(iterator):
    return [item async for item in iterator]


class TestInMemoryProvider:
    """Tests for the in-memory provider."""

    def setup_method(self):
        """Set up test fixtures."""
        from providers.memory import InMemoryProvider

        self.provider = InMemoryProvider()

    @pytest.mark.asyncio
    async def test_list_resource_groups(self):
        """Test listing every resource group."""
        groups = await collect(self.provider.list_resource_groups())

        assert [g["name"] for g in groups] == ["rg-production", "rg-staging"]
        assert groups[1]["location"] == "westeurope"

    @pytest.mark.asyncio
    async def test_list_virtual_machines(self):
        """Test listing virtual machines of a resource group."""
        vms = await collect(self.provider.list_virtual_machines("rg-production"))

        assert len(vms) == 2
        assert vms[0]["vmSize"] == "Standard_D2s_v3"

    @pytest.mark.asyncio
    async def test_missing_resource_group(self):
        """Test a missing resource group raises a not-found error."""
        from providers.memory import ResourceNotFoundError

        with pytest.raises(ResourceNotFoundError, match="rg-missing"):
            await collect(self.provider.list_container_groups("rg-missing"))

    @pytest.mark.asyncio
    async def test_missing_container(self):
        """Test fetching logs of an unknown container."""
        from providers.memory import ResourceNotFoundError

        with pytest.raises(ResourceNotFoundError, match="ghost"):
            await self.provider.get_container_logs("rg-production", "cg-worker", "ghost")

    @pytest.mark.asyncio
    async def test_empty_logs_are_none(self):
        """Test a container without output reports no logs."""
        logs = await self.provider.get_container_logs("rg-production", "cg-worker", "sidecar")

        assert logs is None

    @pytest.mark.asyncio
    async def test_restart_is_recorded(self):
        """Test restarts are recorded per container group."""
        await self.provider.restart_container_group("rg-production", "cg-worker")

        assert self.provider.restarts == [("rg-production", "cg-worker")]

    def test_inventory_is_copied(self):
        """Test providers do not share mutable inventory."""
        from providers.memory import SAMPLE_INVENTORY, InMemoryProvider

        inventory = {"rg1": {"container_groups": {}}}
        provider = InMemoryProvider(inventory)
        provider._inventory["rg2"] = {}

        assert "rg2" not in inventory
        assert "rg2" not in SAMPLE_INVENTORY


class TestAzureProvider:
    """Tests for the Azure provider against faked SDK clients."""

    @pytest.mark.asyncio
    async def test_list_resource_groups(self):
        """Test resource groups are projected to name, location and id."""
        provider, clients = make_azure_provider()
        clients.resources.resource_groups.list = Mock(return_value=AsyncPager([
            SimpleNamespace(name="rg1", location="eastus", id="/rg1", tags={"env": "prod"}),
        ]))

        groups = await collect(provider.list_resource_groups())

        assert groups == [{"name": "rg1", "location": "eastus", "id": "/rg1"}]

    @pytest.mark.asyncio
    async def test_list_virtual_machines(self):
        """Test VM size comes from the hardware profile."""
        provider, clients = make_azure_provider()
        clients.compute.virtual_machines.list = Mock(return_value=AsyncPager([
            SimpleNamespace(
                name="vm1",
                location="eastus",
                hardware_profile=SimpleNamespace(vm_size="Standard_B1s"),
                provisioning_state="Succeeded",
            ),
            SimpleNamespace(
                name="vm2",
                location="eastus",
                hardware_profile=None,
                provisioning_state="Creating",
            ),
        ]))

        vms = await collect(provider.list_virtual_machines("rg1"))

        clients.compute.virtual_machines.list.assert_called_once_with("rg1")
        assert vms[0]["vmSize"] == "Standard_B1s"
        assert vms[1]["vmSize"] is None

    @pytest.mark.asyncio
    async def test_list_container_groups(self):
        """Test container groups list their containers' names and images."""
        provider, clients = make_azure_provider()
        clients.containers.container_groups.list_by_resource_group = Mock(
            return_value=AsyncPager([
                SimpleNamespace(
                    name="cg1",
                    location="eastus",
                    provisioning_state="Succeeded",
                    containers=[SimpleNamespace(name="app", image="nginx:1.25", resources=None)],
                ),
            ])
        )

        groups = await collect(provider.list_container_groups("rg1"))

        assert groups == [{
            "name": "cg1",
            "location": "eastus",
            "provisioningState": "Succeeded",
            "containers": [{"name": "app", "image": "nginx:1.25"}],
        }]

    @pytest.mark.asyncio
    async def test_get_container_logs(self):
        """Test log content is returned as-is."""
        provider, clients = make_azure_provider()
        clients.containers.containers.list_logs = AsyncMock(
            return_value=SimpleNamespace(content="line 1\nline 2\n")
        )

        logs = await provider.get_container_logs("rg1", "cg1", "app")

        clients.containers.containers.list_logs.assert_awaited_once_with("rg1", "cg1", "app")
        assert logs == "line 1\nline 2\n"

    @pytest.mark.asyncio
    async def test_restart_waits_for_poller(self):
        """Test a restart waits for the long-running operation."""
        provider, clients = make_azure_provider()
        poller = Mock()
        poller.result = AsyncMock(return_value=None)
        clients.containers.container_groups.begin_restart = AsyncMock(return_value=poller)

        await provider.restart_container_group("rg1", "cg1")

        clients.containers.container_groups.begin_restart.assert_awaited_once_with("rg1", "cg1")
        poller.result.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_releases_clients(self):
        """Test closing the provider closes every client and the credential."""
        provider, clients = make_azure_provider()

        await provider.close()

        clients.resources.close.assert_awaited_once()
        clients.compute.close.assert_awaited_once()
        clients.containers.close.assert_awaited_once()
        clients.credential.close.assert_awaited_once()

    def test_missing_credentials(self):
        """Test client creation names every missing setting."""
        from providers.azure import create_clients

        with pytest.raises(ValueError) as exc_info:
            create_clients(AzureSettings(
                tenant_id="tenant", client_id=None, client_secret=None, subscription_id="sub"
            ))

        assert "AZURE_CLIENT_ID" in str(exc_info.value)
        assert "AZURE_CLIENT_SECRET" in str(exc_info.value)
        assert "AZURE_TENANT_ID" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unconfigured_provider_reports_tool_error(self):
        """Test a call without credentials becomes an error result, not a crash."""
        from gateway.executor import ToolExecutor
        from gateway.registry import ToolRegistry
        from providers.azure import AzureProvider

        provider = AzureProvider(AzureSettings(
            tenant_id=None, client_id=None, client_secret=None, subscription_id=None
        ))
        executor = ToolExecutor(ToolRegistry.from_catalog("full"), provider)

        result = await executor.execute("azure_list_resource_groups", {})

        assert result.is_error
        assert "Azure credentials are not configured" in result.content[0].text


class TestBuildProvider:
    """Tests for provider selection."""

    def test_memory_provider(self):
        """Test the memory binding is selected from settings."""
        from providers import InMemoryProvider, build_provider

        settings = Settings(gateway=GatewaySettings(provider="memory"))

        assert isinstance(build_provider(settings), InMemoryProvider)

    def test_azure_provider(self):
        """Test the Azure binding is built lazily without contacting Azure."""
        from providers import build_provider
        from providers.azure import AzureProvider

        settings = Settings(gateway=GatewaySettings(provider="azure"))
        provider = build_provider(settings)

        assert isinstance(provider, AzureProvider)
        assert provider._clients is None
