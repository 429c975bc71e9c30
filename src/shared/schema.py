"""JSON Schema helpers for tool input schemas."""

from typing import Any

from jsonschema import Draft7Validator

from shared.models import ToolParameter


def validate_schema(data: Any, schema: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate data against a JSON Schema.

    Args:
        data: The data to validate
        schema: JSON Schema to validate against

    Returns:
        Tuple of (is_valid, list of error messages)
    """
    if not schema:
        return True, []

    validator = Draft7Validator(schema)
    errors = list(validator.iter_errors(data))

    if not errors:
        return True, []

    error_messages = [
        f"{'.'.join(str(p) for p in e.path)}: {e.message}" if e.path else e.message
        for e in errors
    ]

    return False, error_messages


def build_input_schema(parameters: list[ToolParameter]) -> dict[str, Any]:
    """
    Build an object schema from parameter definitions.

    Each property carries only its type and description, and the
    ``required`` list keeps declaration order.
    """
    properties = {
        param.name: {"type": param.type, "description": param.description}
        for param in parameters
    }

    return {
        "type": "object",
        "properties": properties,
        "required": [p.name for p in parameters if p.required],
    }
