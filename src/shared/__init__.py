"""Shared models, configuration and logging for the Azure MCP Gateway."""

from shared.models import (
    AccessPolicyDecision,
    ContentBlock,
    StatusEnvelope,
    ToolDescriptor,
    ToolParameter,
    ToolResult,
)
from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging

__all__ = [
    "AccessPolicyDecision",
    "ContentBlock",
    "StatusEnvelope",
    "ToolDescriptor",
    "ToolParameter",
    "ToolResult",
    "Settings",
    "get_settings",
    "get_logger",
    "setup_logging",
]
