"""Static tool catalogs.

Two variants are exposed through the same registry: a status-only catalog
used while provider credentials are pending, and the full Azure catalog.
"""

from shared.models import ToolDescriptor, ToolParameter
from shared.schema import build_input_schema

RESOURCE_GROUP = ToolParameter(name="resourceGroup", description="Resource group name")
CONTAINER_GROUP = ToolParameter(name="containerGroup", description="Container group name")
CONTAINER_NAME = ToolParameter(name="containerName", description="Container name")


def _tool(name: str, description: str, *parameters: ToolParameter) -> ToolDescriptor:
    return ToolDescriptor(
        name=name,
        description=description,
        input_schema=build_input_schema(list(parameters)),
    )


STATUS_CATALOG: tuple[ToolDescriptor, ...] = (
    _tool("azure_status", "Check Azure MCP Gateway status"),
)

AZURE_CATALOG: tuple[ToolDescriptor, ...] = (
    _tool(
        "azure_list_resource_groups",
        "List all resource groups in the subscription",
    ),
    _tool(
        "azure_list_vms",
        "List virtual machines in a resource group",
        RESOURCE_GROUP,
    ),
    _tool(
        "azure_list_container_apps",
        "List container instances in a resource group",
        RESOURCE_GROUP,
    ),
    _tool(
        "azure_get_container_logs",
        "Get logs from a container instance",
        RESOURCE_GROUP,
        CONTAINER_GROUP,
        CONTAINER_NAME,
    ),
    _tool(
        "azure_restart_container",
        "Restart a container group",
        RESOURCE_GROUP,
        CONTAINER_GROUP,
    ),
)

CATALOGS: dict[str, tuple[ToolDescriptor, ...]] = {
    "status": STATUS_CATALOG,
    "full": AZURE_CATALOG,
}
