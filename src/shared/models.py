"""Core data models for the Azure MCP Gateway.

This module defines the wire-level structures exchanged with MCP clients:
tool descriptors, tool results and the gateway status envelope.
"""

from types import MappingProxyType
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


def freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of ``freeze``: plain, mutable dicts and lists."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [thaw(item) for item in value]
    return value


class ToolParameter(BaseModel):
    """Definition of a single tool parameter."""
    name: str
    type: str = "string"
    description: str = ""
    required: bool = True


class ToolDescriptor(BaseModel):
    """
    Declarative description of a callable tool.

    Descriptors are defined once in a static catalog and never mutated.
    The input schema is stored read-only (nested mappings and tuples) and
    thawed back to plain JSON on serialization. It documents the accepted
    arguments and is only enforced when argument validation is switched on.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., description="Unique tool name")
    description: str = Field(..., description="Human-readable description")
    input_schema: Mapping[str, Any] = Field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []},
        alias="inputSchema",
        validate_default=True,
    )

    @field_validator("input_schema", mode="after")
    @classmethod
    def _freeze_schema(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)

    @field_serializer("input_schema")
    def _thaw_schema(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return thaw(value)

    @property
    def required_arguments(self) -> list[str]:
        return list(self.input_schema.get("required", ()))

    def schema_dict(self) -> dict[str, Any]:
        """Return a mutable copy of the input schema."""
        return thaw(self.input_schema)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ContentBlock(BaseModel):
    """A single text segment of a tool result."""
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ToolResult(BaseModel):
    """
    Result of a tool invocation.

    Always carries at least one content block so callers get readable
    feedback for both success and failure.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: list[ContentBlock] = Field(..., min_length=1)
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        """Create a successful single-block result."""
        return cls(content=[ContentBlock(text=text)])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        """Create an error result with the conventional ``Error:`` prefix."""
        return cls(content=[ContentBlock(text=f"Error: {message}")], is_error=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class AccessPolicyDecision(BaseModel):
    """CORS headers granted to a single request."""
    model_config = ConfigDict(frozen=True)

    allow_origin: Optional[str] = None
    allow_methods: tuple[str, ...] = ("GET", "POST", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type",)

    def headers(self) -> dict[str, str]:
        """Render the decision as HTTP response headers."""
        headers = {
            "Access-Control-Allow-Methods": ", ".join(self.allow_methods),
            "Access-Control-Allow-Headers": ", ".join(self.allow_headers),
        }
        if self.allow_origin is not None:
            headers["Access-Control-Allow-Origin"] = self.allow_origin
        return headers


class StatusEnvelope(BaseModel):
    """Health/status response returned for bare GET requests."""
    name: str
    version: str
    status: str = "healthy"
    tools: Optional[int] = None
    message: Optional[str] = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
