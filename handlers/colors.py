"""
Color normalization
Models hand back colors as names, short hex or hex without '#'. Everything
stored on the canvas is upper-case #RRGGBB.
"""
import re

from config import settings

NAMED_COLORS = {
    "red": "#FF0000",
    "green": "#00FF00",
    "blue": "#0000FF",
    "yellow": "#FFFF00",
    "cyan": "#00FFFF",
    "magenta": "#FF00FF",
    "orange": "#FFA500",
    "purple": "#800080",
    "pink": "#FFC0CB",
    "brown": "#A52A2A",
    "gray": "#808080",
    "grey": "#808080",
    "light gray": "#D3D3D3",
    "light grey": "#D3D3D3",
    "dark gray": "#A9A9A9",
    "dark grey": "#A9A9A9",
    "light blue": "#ADD8E6",
    "dark blue": "#00008B",
    "light green": "#90EE90",
    "dark green": "#006400",
    "black": "#000000",
    "white": "#FFFFFF",
}

_HEX6 = re.compile(r"^#?([0-9a-fA-F]{6})$")
_HEX3 = re.compile(r"^#?([0-9a-fA-F]{3})$")


def normalize_color(color) -> str:
    """
    >>> normalize_color("red")
    '#FF0000'
    >>> normalize_color("3b82f6")
    '#3B82F6'
    >>> normalize_color("#abc")
    '#AABBCC'
    """
    if not isinstance(color, str) or not color.strip():
        return settings.DEFAULT_COLOR

    value = color.strip()
    match = _HEX6.match(value)
    if match:
        return f"#{match.group(1).upper()}"
    match = _HEX3.match(value)
    if match:
        return "#" + "".join(c * 2 for c in match.group(1).upper())

    return NAMED_COLORS.get(" ".join(value.lower().split()), settings.DEFAULT_COLOR)
