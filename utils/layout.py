"""
Layout geometry for canvas objects
Pure functions: take object records, return position updates.

Objects look like {"id": ..., "position": {"x": .., "y": ..}, "data": {...} | "<json>"}.
Every function returns [{"id": ..., "position": {"x": .., "y": ..}}] in input order,
with coordinates rounded to whole pixels.
"""
import json
import math


def _data(obj: dict) -> dict:
    data = obj.get("data") or {}
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError:
            return {}
    return data if isinstance(data, dict) else {}


def _x(obj: dict) -> float:
    return float((obj.get("position") or {}).get("x") or 0)


def _y(obj: dict) -> float:
    return float((obj.get("position") or {}).get("y") or 0)


def object_width(obj: dict) -> float:
    return float(_data(obj).get("width") or 0)


def object_height(obj: dict) -> float:
    data = _data(obj)
    # Circles only carry a diameter
    return float(data.get("height") or data.get("width") or 0)


def _update(obj: dict, x: float, y: float) -> dict:
    return {"id": obj["id"], "position": {"x": round(x), "y": round(y)}}


def _unchanged(objects: list[dict]) -> list[dict]:
    return [_update(o, _x(o), _y(o)) for o in objects]


def _in_input_order(objects: list[dict], updates: dict) -> list[dict]:
    return [updates[o["id"]] for o in objects]


def distribute_horizontally(objects: list[dict], spacing: float | str = "even") -> list[dict]:
    """
    Lay objects out left to right in their current x order.
    "even" keeps the outer edges and spreads the gaps evenly; a number uses a fixed gap.
    All objects are moved onto the average y.
    """
    if len(objects) < 2:
        return _unchanged(objects)

    ordered = sorted(objects, key=_x)
    avg_y = sum(_y(o) for o in ordered) / len(ordered)

    if isinstance(spacing, (int, float)) and not isinstance(spacing, bool):
        gap = float(spacing)
    else:
        first, last = ordered[0], ordered[-1]
        span = _x(last) + object_width(last) - _x(first)
        gap = (span - sum(object_width(o) for o in ordered)) / (len(ordered) - 1)

    updates = {}
    cursor = _x(ordered[0])
    for obj in ordered:
        updates[obj["id"]] = _update(obj, cursor, avg_y)
        cursor += object_width(obj) + gap
    return _in_input_order(objects, updates)


def distribute_vertically(objects: list[dict], spacing: float | str = "even") -> list[dict]:
    """Same as distribute_horizontally along the y axis, aligned on the average x."""
    if len(objects) < 2:
        return _unchanged(objects)

    ordered = sorted(objects, key=_y)
    avg_x = sum(_x(o) for o in ordered) / len(ordered)

    if isinstance(spacing, (int, float)) and not isinstance(spacing, bool):
        gap = float(spacing)
    else:
        first, last = ordered[0], ordered[-1]
        span = _y(last) + object_height(last) - _y(first)
        gap = (span - sum(object_height(o) for o in ordered)) / (len(ordered) - 1)

    updates = {}
    cursor = _y(ordered[0])
    for obj in ordered:
        updates[obj["id"]] = _update(obj, avg_x, cursor)
        cursor += object_height(obj) + gap
    return _in_input_order(objects, updates)


def arrange_grid(objects: list[dict], columns: int, spacing: float = 20) -> list[dict]:
    """Uniform grid anchored on the first object, cell size = largest object."""
    if not objects:
        return []
    columns = max(1, int(columns))

    start_x, start_y = _x(objects[0]), _y(objects[0])
    cell_w = max(object_width(o) for o in objects)
    cell_h = max(object_height(o) for o in objects)

    result = []
    for index, obj in enumerate(objects):
        row, col = divmod(index, columns)
        result.append(_update(
            obj,
            start_x + col * (cell_w + spacing),
            start_y + row * (cell_h + spacing),
        ))
    return result


def circular_layout(objects: list[dict], radius: float) -> list[dict]:
    """Spread objects evenly on a circle around their current centroid."""
    if len(objects) < 2:
        return _unchanged(objects)

    center_x = sum(_x(o) for o in objects) / len(objects)
    center_y = sum(_y(o) for o in objects) / len(objects)
    step = 2 * math.pi / len(objects)

    return [
        _update(
            obj,
            center_x + radius * math.cos(index * step),
            center_y + radius * math.sin(index * step),
        )
        for index, obj in enumerate(objects)
    ]


def stack(objects: list[dict], spacing: float = 10, alignment: str = "left") -> list[dict]:
    """Stack objects top to bottom in input order, then align them."""
    if not objects:
        return []

    cursor = _y(objects[0])
    stacked = []
    for obj in objects:
        stacked.append({**obj, "position": {"x": _x(obj), "y": cursor}})
        cursor += object_height(obj) + spacing
    return align_objects(stacked, alignment) if len(stacked) > 1 else _unchanged(stacked)


def align_objects(objects: list[dict], alignment: str) -> list[dict]:
    """Align to a shared edge (left/right/top/bottom) or centre line (center/middle)."""
    if len(objects) < 2:
        return _unchanged(objects)

    if alignment == "left":
        edge = min(_x(o) for o in objects)
        return [_update(o, edge, _y(o)) for o in objects]
    if alignment == "right":
        edge = max(_x(o) + object_width(o) for o in objects)
        return [_update(o, edge - object_width(o), _y(o)) for o in objects]
    if alignment == "center":
        center = sum(_x(o) + object_width(o) / 2 for o in objects) / len(objects)
        return [_update(o, center - object_width(o) / 2, _y(o)) for o in objects]
    if alignment == "top":
        edge = min(_y(o) for o in objects)
        return [_update(o, _x(o), edge) for o in objects]
    if alignment == "bottom":
        edge = max(_y(o) + object_height(o) for o in objects)
        return [_update(o, _x(o), edge - object_height(o)) for o in objects]
    if alignment == "middle":
        center = sum(_y(o) + object_height(o) / 2 for o in objects) / len(objects)
        return [_update(o, _x(o), center - object_height(o) / 2) for o in objects]

    return _unchanged(objects)
