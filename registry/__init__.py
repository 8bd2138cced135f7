"""
Tool registry
The tool catalogue sent to providers, and the semantic decoding of tool input
at execution time.
"""
import copy

from utils.errors import InvalidToolInputError, UnknownToolError
from .schemas.creation_tools import CREATION_TOOLS
from .schemas.object_tools import OBJECT_TOOLS
from .schemas.layout_tools import LAYOUT_TOOLS

TOOLS: list[dict] = CREATION_TOOLS + OBJECT_TOOLS + LAYOUT_TOOLS

TOOLS_BY_NAME: dict[str, dict] = {tool["name"]: tool for tool in TOOLS}

# Calls to these are grouped into one atomic insert
CREATION_TOOL_NAMES = frozenset({"create_shape", "create_text", "create_component"})

# Interchangeable names for the target object id
ID_ALIASES = ("object_id", "shape_id", "id")

# Tool names models commonly use for the catalogue's tools
TOOL_ALIASES = {
    "move_object": "move_shape",
    "resize_object": "resize_shape",
    "rotate_object": "rotate_shape",
    "delete_shape": "delete_object",
    "change_color": "change_style",
}


def canonical_name(name: str) -> str:
    return TOOL_ALIASES.get(name, name)


def get_tool(name: str) -> dict:
    tool = TOOLS_BY_NAME.get(canonical_name(name))
    if tool is None:
        raise UnknownToolError(name)
    return tool


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _coerce(field: str, value, prop: dict):
    expected = prop.get("type")
    if expected in ("number", "integer"):
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise InvalidToolInputError(f"'{field}' must be a number, got '{value}'")
        if not _is_number(value):
            raise InvalidToolInputError(f"'{field}' must be a number")
        if expected == "integer":
            value = int(value)
    elif expected == "string":
        if _is_number(value):
            value = str(value)
        if not isinstance(value, str):
            raise InvalidToolInputError(f"'{field}' must be a string")
    elif expected == "array" and not isinstance(value, list):
        raise InvalidToolInputError(f"'{field}' must be a list")
    elif expected == "object" and not isinstance(value, dict):
        raise InvalidToolInputError(f"'{field}' must be an object")

    if "minimum" in prop and value < prop["minimum"]:
        raise InvalidToolInputError(f"'{field}' must be at least {prop['minimum']}, got {value}")

    if "enum" in prop and value not in prop["enum"]:
        raise InvalidToolInputError(f"'{field}' must be one of {', '.join(map(str, prop['enum']))}")
    return value


def decode_tool_input(name: str, tool_input: dict) -> dict:
    """
    Decode a structurally valid tool input against the tool's schema.

    - unknown tool names raise UnknownToolError
    - id aliases (object_id / shape_id / id) are folded into the schema's id field
    - schema defaults fill missing optional fields
    - missing required fields, wrong types and enum violations raise InvalidToolInputError
    """
    tool = get_tool(name)
    schema = tool["input_schema"]
    properties = schema.get("properties", {})
    decoded = copy.deepcopy(tool_input)

    id_field = next((f for f in ID_ALIASES if f in properties), None)
    if id_field and decoded.get(id_field) in (None, ""):
        for alias in ID_ALIASES:
            if decoded.get(alias) not in (None, ""):
                decoded[id_field] = decoded[alias]
                break
    if id_field and decoded.get(id_field) is not None:
        decoded[id_field] = str(decoded[id_field])

    missing = [f for f in schema.get("required", []) if decoded.get(f) is None]
    if missing:
        raise InvalidToolInputError(f"{name} is missing required fields: {', '.join(missing)}")

    for field, prop in properties.items():
        if decoded.get(field) is None:
            if "default" in prop:
                decoded[field] = copy.deepcopy(prop["default"])
            continue
        decoded[field] = _coerce(field, decoded[field], prop)

    if "object_ids" in decoded and isinstance(decoded["object_ids"], list):
        decoded["object_ids"] = [str(i) for i in decoded["object_ids"]]

    return decoded


__all__ = [
    "TOOLS",
    "TOOLS_BY_NAME",
    "CREATION_TOOL_NAMES",
    "ID_ALIASES",
    "TOOL_ALIASES",
    "canonical_name",
    "get_tool",
    "decode_tool_input",
]
