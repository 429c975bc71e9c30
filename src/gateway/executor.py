"""Tool Executor for the gateway.

Maps tool names to cloud provider operations through a static dispatch
table, runs them with a timeout and normalizes every outcome into a
ToolResult. This is the single place where provider faults are absorbed.
"""

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from shared.logging import get_logger
from shared.models import ToolResult
from gateway.registry import ToolRegistry
from providers.base import CloudProvider

logger = get_logger(__name__)

STATUS_MESSAGE = (
    "Azure MCP Gateway is operational. Full Azure SDK integration pending credentials."
)
NO_LOGS = "No logs available"

# Renders the provider's return value; receives the call arguments too.
Renderer = Callable[[Any, dict[str, Any]], str]


def render_json(value: Any, arguments: dict[str, Any]) -> str:
    return json.dumps(value, indent=2)


def render_logs(value: Any, arguments: dict[str, Any]) -> str:
    return value or NO_LOGS


def render_restart(value: Any, arguments: dict[str, Any]) -> str:
    return f"Container group {arguments.get('containerGroup')} restarted successfully"


def render_status(value: Any, arguments: dict[str, Any]) -> str:
    return STATUS_MESSAGE


@dataclass(frozen=True)
class ToolHandler:
    """
    How one tool is executed.

    ``operation`` names a CloudProvider method (None for tools answered
    locally), ``arguments`` lists the call arguments forwarded to it
    positionally, and ``listing`` marks operations returning an async
    iterator that must be drained.
    """
    operation: Optional[str]
    arguments: tuple[str, ...]
    render: Renderer
    listing: bool = False


HANDLERS: dict[str, ToolHandler] = {
    "azure_status": ToolHandler(None, (), render_status),
    "azure_list_resource_groups": ToolHandler(
        "list_resource_groups", (), render_json, listing=True
    ),
    "azure_list_vms": ToolHandler(
        "list_virtual_machines", ("resourceGroup",), render_json, listing=True
    ),
    "azure_list_container_apps": ToolHandler(
        "list_container_groups", ("resourceGroup",), render_json, listing=True
    ),
    "azure_get_container_logs": ToolHandler(
        "get_container_logs",
        ("resourceGroup", "containerGroup", "containerName"),
        render_logs,
    ),
    "azure_restart_container": ToolHandler(
        "restart_container_group",
        ("resourceGroup", "containerGroup"),
        render_restart,
    ),
}


class UnknownToolError(LookupError):
    """Raised when a tool name has no catalog entry or handler."""

    def __init__(self, tool_name: str) -> None:
        super().__init__(f"Unknown tool: {tool_name}")
        self.tool_name = tool_name


class ProviderTimeoutError(RuntimeError):
    """A timeout raised by the provider itself, not the call deadline."""


class ToolExecutor:
    """
    Executes tool calls against a cloud provider.

    Responsibilities:
    - Resolve the handler for a tool name
    - Optionally validate arguments against the tool's schema
    - Invoke the provider operation under a timeout
    - Render the outcome as a ToolResult, never raising
    """

    def __init__(
        self,
        registry: ToolRegistry,
        provider: CloudProvider,
        handlers: Optional[dict[str, ToolHandler]] = None,
        timeout_seconds: float = 30.0,
        validate_arguments: bool = False
    ) -> None:
        self.registry = registry
        self.provider = provider
        self.handlers = HANDLERS if handlers is None else handlers
        self.timeout_seconds = timeout_seconds
        self.validate_arguments = validate_arguments

        missing = [name for name in registry.names() if name not in self.handlers]
        if missing:
            raise ValueError(f"No handler registered for tools: {', '.join(missing)}")

    async def execute(self, tool_name: str, arguments: dict[str, Any]) -> ToolResult:
        """
        Execute a tool and return its result.

        Args:
            tool_name: Name of the tool to run
            arguments: Tool arguments keyed by parameter name

        Returns:
            ToolResult with ``is_error`` set for any failure
        """
        start_time = time.time()
        logger.debug("Executing tool", tool=tool_name, provider=self.provider.name)

        try:
            handler = self._resolve(tool_name)

            if self.validate_arguments:
                is_valid, errors = self.registry.validate_input(tool_name, arguments)
                if not is_valid:
                    logger.info("Tool arguments rejected", tool=tool_name, errors=errors)
                    return ToolResult.error(f"Validation failed: {'; '.join(errors)}")

            value = await asyncio.wait_for(
                self._invoke(handler, arguments),
                timeout=self.timeout_seconds
            )
            result = ToolResult.text(handler.render(value, arguments))

        except UnknownToolError as e:
            logger.warning("Unknown tool requested", tool=tool_name)
            return ToolResult.error(str(e))

        except asyncio.TimeoutError:
            logger.error(
                "Tool execution timed out",
                tool=tool_name,
                timeout_seconds=self.timeout_seconds
            )
            return ToolResult.error(f"Operation timed out after {self.timeout_seconds:g}s")

        except Exception as e:
            logger.error(
                "Tool execution failed",
                tool=tool_name,
                error=str(e),
                error_type=type(e).__name__
            )
            return ToolResult.error(str(e) or type(e).__name__)

        logger.info(
            "Tool executed",
            tool=tool_name,
            execution_time_ms=round((time.time() - start_time) * 1000, 2)
        )
        return result

    def _resolve(self, tool_name: str) -> ToolHandler:
        handler = self.handlers.get(tool_name)
        if tool_name not in self.registry or handler is None:
            raise UnknownToolError(tool_name)
        return handler

    async def _invoke(self, handler: ToolHandler, arguments: dict[str, Any]) -> Any:
        if handler.operation is None:
            return None

        operation = getattr(self.provider, handler.operation)
        call_args = [arguments.get(name) for name in handler.arguments]

        # Only the wait_for deadline may surface as asyncio.TimeoutError.
        try:
            if handler.listing:
                # Drain lazily paged results; a failure mid-way fails the call.
                return [item async for item in operation(*call_args)]

            return await operation(*call_args)
        except (TimeoutError, asyncio.TimeoutError) as e:
            raise ProviderTimeoutError(str(e) or type(e).__name__) from e
