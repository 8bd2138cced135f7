"""
Object Handlers
Per-object canvas operations: move, resize, rotate, restyle, delete, group,
plus the read-only list/select tools.

Handlers return plain dicts. Missing objects surface as ObjectNotFoundError
from the store and are reported on that call's result only.
"""
from handlers.types import FunctionCall, HandlerContext, target_id, target_ids
from handlers.colors import normalize_color
from services.canvas_store import decode_data
from utils.logger import get_logger

logger = get_logger(__name__)

OBJECT_FUNCTIONS = {
    "move_shape",
    "resize_shape",
    "rotate_shape",
    "change_style",
    "delete_object",
    "group_objects",
    "list_objects",
    "select_objects",
}


def handle_object_functions(function_call: FunctionCall, ctx: HandlerContext) -> dict:
    """Handle per-object function calls"""
    name = function_call["name"]
    args = function_call.get("args", {})

    logger.info(f"Object handler called: {name} with args: {args}")

    if name == "move_shape":
        return handle_move(args, ctx)
    elif name == "resize_shape":
        return handle_resize(args, ctx)
    elif name == "rotate_shape":
        return handle_rotate(args, ctx)
    elif name == "change_style":
        return handle_change_style(args, ctx)
    elif name == "delete_object":
        return handle_delete(args, ctx)
    elif name == "group_objects":
        return handle_group(args, ctx)
    elif name == "list_objects":
        return handle_list_objects(ctx)
    elif name == "select_objects":
        return handle_select_objects(args, ctx)

    raise ValueError(f"Unknown object function: {name}")


def describe_object(obj: dict) -> dict:
    """Object as returned to the caller, with `data` decoded"""
    return {
        "id": obj["id"],
        "type": obj.get("type"),
        "position": obj.get("position"),
        "data": decode_data(obj),
        "group_id": obj.get("group_id"),
    }


def handle_move(args: dict, ctx: HandlerContext) -> dict:
    object_id = target_id(args)
    obj = ctx.store.move(object_id, args["x"], args["y"])
    ctx.log_step(f"✅ Moved {object_id} to ({args['x']}, {args['y']})")
    return describe_object(obj)


def handle_resize(args: dict, ctx: HandlerContext) -> dict:
    object_id = target_id(args)
    obj = ctx.store.resize(object_id, args["width"], args.get("height"))
    ctx.log_step(f"✅ Resized {object_id}")
    return describe_object(obj)


def handle_rotate(args: dict, ctx: HandlerContext) -> dict:
    object_id = target_id(args)
    obj = ctx.store.rotate(object_id, args["angle"])
    ctx.log_step(f"✅ Rotated {object_id} to {args['angle']}°")
    return describe_object(obj)


def handle_change_style(args: dict, ctx: HandlerContext) -> dict:
    object_id = target_id(args)
    style = {}
    # Fill and text color share the object's `color` field
    color = args.get("fill") or args.get("color")
    if color:
        style["color"] = normalize_color(color)
    if args.get("stroke"):
        style["stroke"] = normalize_color(args["stroke"])
    if args.get("stroke_width") is not None:
        style["stroke_width"] = args["stroke_width"]
    obj = ctx.store.restyle(object_id, style)
    ctx.log_step(f"✅ Restyled {object_id}")
    return describe_object(obj)


def handle_delete(args: dict, ctx: HandlerContext) -> dict:
    object_id = target_id(args)
    ctx.store.delete(object_id)
    ctx.log_step(f"✅ Deleted {object_id}")
    return {"deleted": object_id}


def handle_group(args: dict, ctx: HandlerContext) -> dict:
    ids = target_ids(args, ctx)
    result = ctx.store.group(ids, args.get("group_name"))
    ctx.log_step(f"✅ Grouped {len(ids)} objects")
    return result


def handle_list_objects(ctx: HandlerContext) -> dict:
    objects = [describe_object(o) for o in ctx.store.list_objects(ctx.canvas_id)]
    ctx.log_step("✅ Executed: list_objects")
    logger.info(f"Returning {len(objects)} objects for canvas {ctx.canvas_id}")
    return {"count": len(objects), "objects": objects}


def handle_select_objects(args: dict, ctx: HandlerContext) -> dict:
    wanted_type = args.get("type")
    wanted_color = normalize_color(args["color"]) if args.get("color") else None

    matches = []
    for obj in ctx.store.list_objects(ctx.canvas_id):
        if wanted_type and obj.get("type") != wanted_type:
            continue
        if wanted_color and normalize_color(decode_data(obj).get("color")) != wanted_color:
            continue
        matches.append(obj["id"])

    ctx.log_step(f"✅ Selected {len(matches)} objects")
    return {"object_ids": matches, "count": len(matches)}
