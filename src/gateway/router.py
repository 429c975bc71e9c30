"""Request Router for the gateway.

Classifies an already-parsed request body as a tool listing, a tool call,
a status query or an invalid request, and produces the response envelope.
Routing is total: every input ends in a response, never an exception.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from shared.logging import get_logger
from shared.models import StatusEnvelope
from gateway.executor import ToolExecutor
from gateway.registry import ToolRegistry

logger = get_logger(__name__)

SERVICE_NAME = "azure-mcp-gateway"
SERVICE_VERSION = "1.0.0"

LIST_TOOLS = "tools/list"
CALL_TOOL = "tools/call"


class MalformedRequestError(ValueError):
    """Raised when ``tools/call`` params cannot be read."""


@dataclass(frozen=True)
class RoutedResponse:
    """Status code and JSON payload produced by the router."""
    status_code: int
    payload: dict[str, Any]


def parse_call_params(params: Any) -> tuple[str, dict[str, Any]]:
    """
    Extract the tool name and arguments from ``tools/call`` params.

    Missing or null arguments default to an empty mapping.

    Raises:
        MalformedRequestError: If params, the name or the arguments are unusable
    """
    if not isinstance(params, Mapping):
        raise MalformedRequestError("tools/call requires a 'params' object")

    name = params.get("name")
    if not isinstance(name, str):
        raise MalformedRequestError("tools/call requires 'params.name' to be a string")

    arguments = params.get("arguments")
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise MalformedRequestError("'params.arguments' must be an object")

    return name, dict(arguments)


class RequestRouter:
    """
    Dispatches parsed requests to the registry or the executor.

    Classification order:
    1. ``tools/list`` returns the catalog
    2. ``tools/call`` runs a tool and returns its result verbatim
    3. a bare GET returns the status envelope
    4. anything else is rejected with HTTP 400
    """

    def __init__(
        self,
        registry: ToolRegistry,
        executor: ToolExecutor,
        status_message: Optional[str] = None
    ) -> None:
        self.registry = registry
        self.executor = executor
        self.status_message = status_message

    async def route(self, body: Any, http_method: str) -> RoutedResponse:
        if not isinstance(body, Mapping):
            body = {}

        method = body.get("method")

        try:
            if method == LIST_TOOLS:
                return RoutedResponse(200, self.list_tools())

            if method == CALL_TOOL:
                name, arguments = parse_call_params(body.get("params"))
                result = await self.executor.execute(name, arguments)
                return RoutedResponse(200, result.to_wire())

            if http_method.upper() == "GET":
                return RoutedResponse(200, self.status().to_wire())

        except Exception as e:
            logger.error(
                "Request handling failed",
                method=method,
                http_method=http_method,
                error=str(e),
                exc_info=True
            )
            return RoutedResponse(500, {"error": str(e) or type(e).__name__})

        logger.debug("Invalid request", method=method, http_method=http_method)
        return RoutedResponse(400, {"error": "Invalid request"})

    def list_tools(self) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self.registry.list()]}

    def status(self) -> StatusEnvelope:
        """Describe the gateway for health checks."""
        return StatusEnvelope(
            name=SERVICE_NAME,
            version=SERVICE_VERSION,
            status="healthy",
            tools=len(self.registry),
            message=self.status_message,
        )
