"""Base class for cloud capability providers.

A provider performs the actual cloud operations behind the gateway's tools.
Providers:
- Expose asynchronous operations only
- Return plain, JSON-serializable records
- Raise on failure; the executor turns exceptions into error results
- Never know about the tool protocol
"""

from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Optional

Record = dict[str, Any]


class CloudProvider(ABC):
    """
    Contract between the tool executor and a cloud backend.

    Listing operations return async iterators that may page lazily; the
    executor drains them completely before responding.
    """

    name: str = "abstract"

    @abstractmethod
    def list_resource_groups(self) -> AsyncIterator[Record]:
        """Yield ``{name, location, id}`` for every resource group."""

    @abstractmethod
    def list_virtual_machines(self, resource_group: str) -> AsyncIterator[Record]:
        """Yield ``{name, location, vmSize, provisioningState}`` per VM."""

    @abstractmethod
    def list_container_groups(self, resource_group: str) -> AsyncIterator[Record]:
        """Yield container groups with their ``containers`` name/image pairs."""

    @abstractmethod
    async def get_container_logs(
        self,
        resource_group: str,
        container_group: str,
        container_name: str
    ) -> Optional[str]:
        """Return the log text of a container, or None when it has none."""

    @abstractmethod
    async def restart_container_group(
        self,
        resource_group: str,
        container_group: str
    ) -> None:
        """Restart a container group and wait for the operation to finish."""

    async def close(self) -> None:
        """Release network resources held by the provider."""
