"""
Component Handlers
Expand a create_component call into the shapes and text that draw it.

Every part of one component shares a fresh group_id, so the component moves
and deletes as a unit. Parts are listed back to front. Colors are stored
upper-case; shadows keep their alpha byte (#RRGGBBAA).
"""
import uuid

from services.canvas_store import encode_data
from utils.errors import InvalidToolInputError
from utils.logger import get_logger

logger = get_logger(__name__)

FONT_FAMILY = "Arial"

THEMES = {
    "light": {
        "bg": "#ffffff", "border": "#e5e7eb",
        "text_primary": "#111827", "text_secondary": "#6b7280",
        "input_bg": "#ffffff", "input_border": "#d1d5db",
        "button_bg": "#3b82f6", "button_border": "#2563eb", "button_text": "#ffffff",
        "navbar_bg": "#f9fafb",
        "card_bg": "#ffffff", "card_header_bg": "#f9fafb", "card_footer_bg": "#f9fafb",
        "shadow": "#00000026",
        "sidebar_bg": "#f9fafb", "sidebar_item_bg": "#ffffff", "sidebar_item_border": "#e5e7eb",
    },
    "dark": {
        "bg": "#1f2937", "border": "#374151",
        "text_primary": "#f9fafb", "text_secondary": "#d1d5db",
        "input_bg": "#374151", "input_border": "#4b5563",
        "button_bg": "#3b82f6", "button_border": "#2563eb", "button_text": "#ffffff",
        "navbar_bg": "#111827",
        "card_bg": "#1f2937", "card_header_bg": "#374151", "card_footer_bg": "#374151",
        "shadow": "#00000066",
        "sidebar_bg": "#1f2937", "sidebar_item_bg": "#374151", "sidebar_item_border": "#4b5563",
    },
    "blue": {
        "bg": "#eff6ff", "border": "#93c5fd",
        "text_primary": "#1e3a8a", "text_secondary": "#3b82f6",
        "input_bg": "#ffffff", "input_border": "#93c5fd",
        "button_bg": "#3b82f6", "button_border": "#2563eb", "button_text": "#ffffff",
        "navbar_bg": "#3b82f6",
        "card_bg": "#ffffff", "card_header_bg": "#dbeafe", "card_footer_bg": "#f0f9ff",
        "shadow": "#3b82f633",
        "sidebar_bg": "#dbeafe", "sidebar_item_bg": "#bfdbfe", "sidebar_item_border": "#93c5fd",
    },
    "green": {
        "bg": "#f0fdf4", "border": "#86efac",
        "text_primary": "#14532d", "text_secondary": "#16a34a",
        "input_bg": "#ffffff", "input_border": "#86efac",
        "button_bg": "#22c55e", "button_border": "#16a34a", "button_text": "#ffffff",
        "navbar_bg": "#22c55e",
        "card_bg": "#ffffff", "card_header_bg": "#dcfce7", "card_footer_bg": "#f0fdf4",
        "shadow": "#22c55e33",
        "sidebar_bg": "#dcfce7", "sidebar_item_bg": "#bbf7d0", "sidebar_item_border": "#86efac",
    },
}

# (width, height) used when the call leaves them out
DEFAULT_SIZES = {
    "button": (360, 44),
    "card": (300, 200),
    "navbar": (800, 60),
    "login_form": (300, 280),
    "sidebar": (220, 400),
}


def _rect(x, y, width, height, color, stroke, stroke_width) -> dict:
    return {
        "type": "rectangle",
        "position": {"x": x, "y": y},
        "data": {
            "width": width,
            "height": height,
            "color": color.upper(),
            "stroke": stroke.upper(),
            "stroke_width": stroke_width,
        },
    }


def _text(x, y, text, font_size, color, align="left") -> dict:
    return {
        "type": "text",
        "position": {"x": x, "y": y},
        "data": {
            "text": text,
            "font_size": font_size,
            "font_family": FONT_FAMILY,
            "color": color.upper(),
            "align": align,
        },
    }


def _items(content: dict, default: list[str]) -> list[str]:
    items = content.get("items")
    if items is None:
        return default
    if not isinstance(items, list) or not all(isinstance(item, str) for item in items):
        raise InvalidToolInputError("'content.items' must be a list of strings")
    return items or default


def _login_form(x, y, w, h, theme, content):
    parts = [
        _rect(x, y, w, h, theme["bg"], theme["border"], 2),
        _text(x + w / 2, y + 20, content.get("title") or "Login", 24, theme["text_primary"], "center"),
    ]
    for label, label_y in (("Username:", y + 60), ("Password:", y + 130)):
        parts.append(_text(x + 20, label_y, label, 14, theme["text_secondary"]))
        parts.append(_rect(x + 20, label_y + 20, w - 40, 40, theme["input_bg"], theme["input_border"], 1))
    parts.append(_rect(x + 20, y + 210, w - 40, 45, theme["button_bg"], theme["button_border"], 0))
    parts.append(_text(x + w / 2, y + 225, "Sign In", 16, theme["button_text"], "center"))
    return parts


def _navbar(x, y, w, h, theme, content):
    items = _items(content, ["Home", "About", "Services", "Contact"])
    parts = [
        _rect(x, y, w, h, theme["navbar_bg"], theme["border"], 0),
        _text(x + 20, y + h / 2 - 10, content.get("title") or "Brand", 20, theme["text_primary"]),
    ]
    spacing = (w - 200) / (len(items) - 1) if len(items) > 1 else 0
    for i, item in enumerate(items):
        parts.append(_text(x + 200 + i * spacing, y + h / 2 - 8, item, 16, theme["text_secondary"], "center"))
    return parts


def _card(x, y, w, h, theme, content):
    return [
        _rect(x + 4, y + 4, w, h, theme["shadow"], theme["shadow"], 0),
        _rect(x, y, w, h, theme["card_bg"], theme["border"], 1),
        _rect(x, y, w, 60, theme["card_header_bg"], theme["border"], 0),
        _text(x + 20, y + 20, content.get("title") or "Card Title", 18, theme["text_primary"]),
        _text(x + 20, y + 80, content.get("subtitle") or "Card description goes here", 14,
              theme["text_secondary"]),
        _rect(x, y + h - 50, w, 50, theme["card_footer_bg"], theme["border"], 0),
    ]


def _buttons(x, y, w, h, theme, content):
    items = _items(content, ["Button 1", "Button 2", "Button 3"])
    gap = 20
    button_width = (w - gap * (len(items) - 1)) / len(items)
    if button_width <= 0:
        raise InvalidToolInputError(f"{len(items)} buttons don't fit in a width of {w}")
    parts = []
    for i, label in enumerate(items):
        button_x = x + i * (button_width + gap)
        parts.append(_rect(button_x, y, button_width, h, theme["button_bg"], theme["button_border"], 1))
        parts.append(_text(button_x + button_width / 2, y + h / 2 - 8, label, 14, theme["button_text"], "center"))
    return parts


def _sidebar(x, y, w, h, theme, content):
    items = _items(content, ["Dashboard", "Profile", "Settings", "Logout"])
    parts = [
        _rect(x, y, w, h, theme["sidebar_bg"], theme["border"], 1),
        _text(x + 20, y + 20, content.get("title") or "Menu", 20, theme["text_primary"]),
    ]
    for i, item in enumerate(items):
        item_y = y + 60 + i * 50
        parts.append(_rect(x + 10, item_y, w - 20, 40, theme["sidebar_item_bg"], theme["sidebar_item_border"], 1))
        parts.append(_text(x + 25, item_y + 12, item, 14, theme["text_secondary"]))
    return parts


BUILDERS = {
    "button": _buttons,
    "card": _card,
    "navbar": _navbar,
    "login_form": _login_form,
    "sidebar": _sidebar,
}


def build_component_attrs(args: dict) -> list[dict]:
    """
    Attribute sets for a decoded create_component call.

    Raises InvalidToolInputError for an unknown type or theme, or content
    items that aren't strings.
    """
    component_type = args["type"]
    builder = BUILDERS.get(component_type)
    if builder is None:
        raise InvalidToolInputError(f"Unknown component type: {component_type}")
    theme = THEMES.get(args.get("theme") or "light")
    if theme is None:
        raise InvalidToolInputError(f"Unknown theme: {args.get('theme')}")

    default_width, default_height = DEFAULT_SIZES[component_type]
    width = args.get("width") or default_width
    height = args.get("height") or default_height
    content = args.get("content") or {}

    group_id = str(uuid.uuid4())
    attrs_list = []
    for part in builder(args["x"], args["y"], width, height, theme, content):
        part["data"] = encode_data(part["data"])
        part["group_id"] = group_id
        attrs_list.append(part)

    logger.info(f"Expanded {component_type} component into {len(attrs_list)} objects (group {group_id})")
    return attrs_list
