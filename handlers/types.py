"""
Handler types
"""
from dataclasses import dataclass, field
from typing import Any, Optional, TypedDict

from utils.errors import InvalidToolInputError
from utils.logger import get_logger

logger = get_logger(__name__)


class FunctionCall(TypedDict):
    name: str
    args: dict[str, Any]


@dataclass
class HandlerContext:
    """Everything a handler needs besides its own arguments"""
    canvas_id: str
    store: Any                                   # services.canvas_store.CanvasStore
    selected_ids: tuple[str, ...] = ()
    current_color: Optional[str] = None
    steps: list[str] = field(default_factory=list)

    def log_step(self, step: str) -> None:
        self.steps.append(step)
        logger.debug(step)


def target_id(args: dict) -> str:
    """The object a per-object tool acts on, under any of its accepted names"""
    for key in ("object_id", "shape_id", "id"):
        value = args.get(key)
        if value not in (None, ""):
            return str(value)
    raise InvalidToolInputError("No object id given (object_id, shape_id or id)")


def target_ids(args: dict, ctx: HandlerContext) -> list[str]:
    """Explicit object_ids, else the current selection"""
    ids = args.get("object_ids") or list(ctx.selected_ids)
    if not ids:
        raise InvalidToolInputError("No objects given and nothing is selected")
    return [str(i) for i in ids]
