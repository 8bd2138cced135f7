"""
Tool Call Validator
Structural check on provider-returned tool calls before anything touches the canvas.

Only shape is checked here (id, name, input). Whether the tool exists and
whether its input makes sense is decided later, at execution time.
"""
import json

from utils import get_logger
from utils.errors import ToolCallValidationError
from .types import ToolCall

logger = get_logger(__name__)


class ToolCallValidator:
    """Turns raw provider output into ToolCall values or raises ToolCallValidationError"""

    REQUIRED_FIELDS = ("id", "name", "input")

    def validate(self, raw) -> ToolCall:
        """
        Validate one raw tool call.

        Accepts {"id": str, "name": str, "input": dict | json-string}.
        Raises ToolCallValidationError with either `missing_fields` or
        `parse_error` set, never both.
        """
        if not isinstance(raw, dict):
            raise ToolCallValidationError(
                f"Tool call must be an object, got {type(raw).__name__}",
                missing_fields=list(self.REQUIRED_FIELDS),
                raw=raw,
            )

        missing = [f for f in self.REQUIRED_FIELDS if raw.get(f) is None]
        for f in ("id", "name"):
            value = raw.get(f)
            if f not in missing and (not isinstance(value, str) or not value.strip()):
                missing.append(f)

        if missing:
            logger.warning(f"Tool call missing fields {missing}: {str(raw)[:200]}")
            raise ToolCallValidationError(
                f"Tool call missing required fields: {', '.join(missing)}",
                missing_fields=missing,
                raw=raw,
            )

        tool_input = raw["input"]
        if isinstance(tool_input, str):
            try:
                tool_input = json.loads(tool_input) if tool_input.strip() else {}
            except json.JSONDecodeError as e:
                logger.warning(f"Tool call {raw['id']} has unparseable input: {e}")
                raise ToolCallValidationError(
                    f"Tool call input is not valid JSON: {e.msg}",
                    parse_error=str(e),
                    raw=raw,
                ) from e

        if not isinstance(tool_input, dict):
            raise ToolCallValidationError(
                f"Tool call input must be an object, got {type(tool_input).__name__}",
                parse_error=f"input decoded to {type(tool_input).__name__}",
                raw=raw,
            )

        return ToolCall(id=raw["id"], name=raw["name"], input=tool_input)

    def validate_all(self, raws: list) -> list[ToolCall]:
        """Validate a whole response; the first bad call aborts the lot"""
        if not isinstance(raws, list):
            raise ToolCallValidationError(
                "Tool calls must be a list",
                parse_error=f"got {type(raws).__name__}",
                raw=raws,
            )
        calls = [self.validate(raw) for raw in raws]
        logger.info(f"Validated {len(calls)} tool calls")
        return calls


# Singleton instance
_validator: ToolCallValidator | None = None


def get_validator() -> ToolCallValidator:
    """Get or create validator singleton"""
    global _validator
    if _validator is None:
        _validator = ToolCallValidator()
    return _validator
