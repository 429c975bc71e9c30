"""Tool Registry for the gateway.

Holds the read-only catalog of tools advertised through ``tools/list``.
The catalog is fixed at construction and safe for concurrent reads.
"""

from typing import Any, Iterable, Iterator, Optional

from shared.logging import get_logger
from shared.models import ToolDescriptor
from shared.schema import validate_schema
from gateway.catalog import CATALOGS

logger = get_logger(__name__)


class ToolRegistry:
    """
    Ordered, name-unique catalog of tool descriptors.

    Responsibilities:
    - Snapshot the catalog for discovery
    - Lookup tools by name
    - Validate arguments against a tool's input schema on request
    """

    def __init__(self, tools: Iterable[ToolDescriptor] = ()) -> None:
        self._tools: dict[str, ToolDescriptor] = {}
        for tool in tools:
            self._register(tool)
        self._snapshot = tuple(self._tools.values())

    @classmethod
    def from_catalog(cls, variant: str) -> "ToolRegistry":
        """
        Build a registry for a named catalog variant.

        Raises:
            ValueError: If the variant is unknown
        """
        if variant not in CATALOGS:
            raise ValueError(
                f"Unknown catalog '{variant}', expected one of: {', '.join(sorted(CATALOGS))}"
            )
        registry = cls(CATALOGS[variant])
        logger.info("Tool catalog loaded", catalog=variant, tools=registry.names())
        return registry

    def _register(self, tool: ToolDescriptor) -> None:
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")
        self._tools[tool.name] = tool

    def get(self, tool_name: str) -> Optional[ToolDescriptor]:
        return self._tools.get(tool_name)

    def names(self) -> list[str]:
        return list(self._tools)

    def validate_input(
        self,
        tool_name: str,
        arguments: dict[str, Any]
    ) -> tuple[bool, list[str]]:
        """
        Validate arguments against a tool's input schema.

        Args:
            tool_name: Tool name
            arguments: Arguments to validate

        Returns:
            Tuple of (is_valid, list of error messages)
        """
        tool = self.get(tool_name)
        if not tool:
            return False, [f"Tool '{tool_name}' not found"]

        return validate_schema(arguments, tool.schema_dict())

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self._tools

    def __len__(self) -> int:
        return len(self._tools)

    def __iter__(self) -> Iterator[ToolDescriptor]:
        return iter(self._snapshot)

    # Defined last so the builtin ``list`` stays usable in annotations above.
    def list(self) -> tuple[ToolDescriptor, ...]:
        """Return the catalog in declaration order."""
        return self._snapshot
