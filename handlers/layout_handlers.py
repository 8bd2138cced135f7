"""
Layout Handlers
arrange_objects and align_objects: fetch the targets, compute new positions
with utils.layout, write them back.
"""
import time

from handlers.types import FunctionCall, HandlerContext, target_ids
from utils import layout
from utils.errors import InvalidToolInputError, ObjectNotFoundError
from utils.logger import get_logger

logger = get_logger(__name__)

LAYOUT_FUNCTIONS = {"arrange_objects", "align_objects"}


def handle_layout_functions(function_call: FunctionCall, ctx: HandlerContext) -> dict:
    """Handle layout function calls"""
    name = function_call["name"]
    args = function_call.get("args", {})

    logger.info(f"Layout handler called: {name} with args: {args}")

    if name == "arrange_objects":
        return handle_arrange(args, ctx)
    elif name == "align_objects":
        return handle_align(args, ctx)

    raise ValueError(f"Unknown layout function: {name}")


def _fetch(ids: list[str], ctx: HandlerContext) -> list[dict]:
    objects = []
    for object_id in ids:
        obj = ctx.store.get_object(object_id)
        if obj is None:
            logger.warning(f"Layout target {object_id} not found, skipping")
            continue
        objects.append(obj)
    if not objects:
        raise ObjectNotFoundError(ids[0] if len(ids) == 1 else ", ".join(ids))
    return objects


def _apply(updates: list[dict], ctx: HandlerContext) -> list[dict]:
    for update in updates:
        ctx.store.move(update["id"], update["position"]["x"], update["position"]["y"])
    return updates


def _with_positions(objects: list[dict], updates: list[dict]) -> list[dict]:
    positions = {u["id"]: u["position"] for u in updates}
    return [{**o, "position": positions.get(o["id"], o.get("position"))} for o in objects]


def compute_arrangement(objects: list[dict], args: dict) -> list[dict]:
    layout_type = args["layout_type"]
    spacing = args.get("spacing")

    if layout_type == "horizontal":
        updates = layout.distribute_horizontally(objects, spacing if spacing is not None else "even")
    elif layout_type == "vertical":
        updates = layout.distribute_vertically(objects, spacing if spacing is not None else "even")
    elif layout_type == "grid":
        updates = layout.arrange_grid(objects, args.get("columns") or 3, spacing if spacing is not None else 20)
    elif layout_type == "circular":
        updates = layout.circular_layout(objects, args.get("radius") or 200)
    elif layout_type == "stack":
        return layout.stack(objects, spacing if spacing is not None else 10, args.get("alignment") or "left")
    else:
        raise InvalidToolInputError(f"Unknown layout type: {layout_type}")

    if args.get("alignment"):
        updates = layout.align_objects(_with_positions(objects, updates), args["alignment"])
    return updates


def handle_arrange(args: dict, ctx: HandlerContext) -> dict:
    start = time.monotonic()
    objects = _fetch(target_ids(args, ctx), ctx)
    updates = _apply(compute_arrangement(objects, args), ctx)
    duration_ms = (time.monotonic() - start) * 1000

    logger.info(f"arrange_objects {args['layout_type']}: {len(updates)} objects in {duration_ms:.1f}ms")
    ctx.log_step(f"✅ Arranged {len(updates)} objects ({args['layout_type']})")
    return {"layout": args["layout_type"], "updated": updates}


def handle_align(args: dict, ctx: HandlerContext) -> dict:
    objects = _fetch(target_ids(args, ctx), ctx)
    updates = _apply(layout.align_objects(objects, args["alignment"]), ctx)
    ctx.log_step(f"✅ Aligned {len(updates)} objects ({args['alignment']})")
    return {"alignment": args["alignment"], "updated": updates}
