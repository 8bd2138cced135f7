"""
Creation Handlers
Turn create_shape / create_text / create_component calls into canvas attribute sets.

These never touch the store; the batch processor collects the attribute
sets from every creation call and inserts them in one go.
"""
from registry import decode_tool_input
from services.canvas_store import encode_data
from utils.errors import InvalidToolInputError
from utils.logger import get_logger
from handlers.colors import normalize_color
from handlers.component_handlers import build_component_attrs

logger = get_logger(__name__)

# Default gap between repeated copies, as a multiple of the object size
SPACING_FACTOR = 1.5


def _shape_data(args: dict, color: str) -> dict:
    width = args["width"]
    height = width if args["type"] == "circle" else args.get("height") or width
    return {
        "width": width,
        "height": height,
        "color": color,
        "stroke": normalize_color(args.get("stroke")),
        "stroke_width": args.get("stroke_width"),
    }


def _text_data(args: dict, color: str) -> dict:
    return {
        "text": args["text"],
        "font_size": args.get("font_size"),
        "font_family": args.get("font_family"),
        "color": color,
        "align": args.get("align"),
    }


def build_object_attrs(name: str, raw_input: dict, current_color: str | None = None,
                       max_objects: int | None = None) -> list[dict]:
    """
    Attribute sets for one creation call, expanded by `count`.

    An explicit color in the call wins, then the caller's current color,
    then the schema default. Copies step along `direction` by the shape's
    size plus a gap: `spacing` when given, else size * SPACING_FACTOR.
    Text is never repeated. A component expands into its grouped parts and
    ignores `count`.
    """
    args = decode_tool_input(name, raw_input)

    if name == "create_component":
        attrs_list = build_component_attrs(args)
        if max_objects is not None and len(attrs_list) > max_objects:
            raise InvalidToolInputError(
                f"component needs {len(attrs_list)} objects, limit is {max_objects} per command"
            )
        return attrs_list

    if name == "create_shape":
        explicit = raw_input.get("fill") or raw_input.get("color")
        color = normalize_color(explicit or current_color or args.get("fill"))
        data = _shape_data(args, color)
        object_type = args["type"]
    elif name == "create_text":
        color = normalize_color(raw_input.get("color") or current_color or args.get("color"))
        data = _text_data(args, color)
        object_type = "text"
    else:
        raise InvalidToolInputError(f"{name} is not a creation tool")

    count = int(args.get("count") or 1) if name == "create_shape" else 1
    if count < 1:
        raise InvalidToolInputError(f"count must be at least 1, got {count}")
    if max_objects is not None and count > max_objects:
        raise InvalidToolInputError(f"count {count} exceeds the limit of {max_objects} objects per command")

    vertical = args.get("direction") == "vertical"
    size = (data.get("height") if vertical else data.get("width")) or 0
    spacing = args.get("spacing")
    gap = max(0, spacing) if spacing is not None else size * SPACING_FACTOR
    step = size + gap

    encoded = encode_data(data)
    attrs_list = []
    for index in range(count):
        offset = index * step
        attrs_list.append({
            "type": object_type,
            "position": {
                "x": args["x"] + (0 if vertical else offset),
                "y": args["y"] + (offset if vertical else 0),
            },
            "data": encoded,
        })

    if count > 1:
        logger.info(f"Expanded {name} x{count} ({'vertical' if vertical else 'horizontal'}, step {step})")
    return attrs_list
