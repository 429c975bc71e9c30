"""Azure MCP Gateway - tool registry, request routing and execution.

The gateway advertises a fixed tool catalog, routes ``tools/list`` and
``tools/call`` requests, and runs tools against a cloud provider.
"""

from gateway.registry import ToolRegistry
from gateway.executor import ToolExecutor, ToolHandler
from gateway.router import RequestRouter, RoutedResponse
from gateway.cors import AccessPolicy, AccessPolicyMiddleware

__all__ = [
    "ToolRegistry",
    "ToolExecutor",
    "ToolHandler",
    "RequestRouter",
    "RoutedResponse",
    "AccessPolicy",
    "AccessPolicyMiddleware",
]
