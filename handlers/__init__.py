"""
Function call handlers
Dispatches a decoded tool call to the handler that owns its name.
"""
from registry import canonical_name, decode_tool_input
from utils.errors import UnknownToolError
from utils.logger import get_logger
from handlers.types import FunctionCall, HandlerContext
from handlers.object_handlers import OBJECT_FUNCTIONS, handle_object_functions
from handlers.layout_handlers import LAYOUT_FUNCTIONS, handle_layout_functions
from handlers.creation_handlers import build_object_attrs
from handlers.colors import normalize_color

logger = get_logger(__name__)


def handle_function_call(function_call: FunctionCall, ctx: HandlerContext) -> dict:
    """
    Run one non-creation tool call.

    Raises UnknownToolError, InvalidToolInputError or ObjectNotFoundError;
    the caller turns those into a per-call error result.
    """
    name = canonical_name(function_call["name"])
    args = decode_tool_input(name, function_call.get("args") or {})
    decoded: FunctionCall = {"name": name, "args": args}

    if name in OBJECT_FUNCTIONS:
        return handle_object_functions(decoded, ctx)
    if name in LAYOUT_FUNCTIONS:
        return handle_layout_functions(decoded, ctx)

    logger.warning(f"No handler for function: {name}")
    raise UnknownToolError(name)


__all__ = [
    "FunctionCall",
    "HandlerContext",
    "handle_function_call",
    "build_object_attrs",
    "normalize_color",
]
