"""
Object tool schemas
Tools that read or change existing canvas objects one call at a time.

Handlers also accept `object_id`, `shape_id` or `id` interchangeably for
the target object.
"""

move_shape_tool = {
    "name": "move_shape",
    "description": "Move an existing shape to a new position",
    "input_schema": {
        "type": "object",
        "properties": {
            "shape_id": {"type": "string", "description": "ID of the shape to move"},
            "x": {"type": "number", "description": "New X coordinate"},
            "y": {"type": "number", "description": "New Y coordinate"}
        },
        "required": ["shape_id", "x", "y"]
    }
}

resize_shape_tool = {
    "name": "resize_shape",
    "description": "Resize an existing shape",
    "input_schema": {
        "type": "object",
        "properties": {
            "shape_id": {"type": "string", "description": "ID of the shape to resize"},
            "width": {"type": "number", "description": "New width", "minimum": 1},
            "height": {"type": "number", "description": "New height (ignored for circles)", "minimum": 1}
        },
        "required": ["shape_id", "width"]
    }
}

rotate_shape_tool = {
    "name": "rotate_shape",
    "description": "Rotate an existing shape to an absolute angle in degrees",
    "input_schema": {
        "type": "object",
        "properties": {
            "shape_id": {"type": "string", "description": "ID of the shape to rotate"},
            "angle": {"type": "number", "description": "Rotation in degrees, clockwise"}
        },
        "required": ["shape_id", "angle"]
    }
}

change_style_tool = {
    "name": "change_style",
    "description": "Change the colors or stroke of an existing object. Only the given fields change.",
    "input_schema": {
        "type": "object",
        "properties": {
            "shape_id": {"type": "string", "description": "ID of the object to restyle"},
            "fill": {"type": "string", "description": "New fill color (hex or color name)"},
            "stroke": {"type": "string", "description": "New stroke color"},
            "stroke_width": {"type": "number", "description": "New stroke width"},
            "color": {"type": "string", "description": "New text color (text objects)"}
        },
        "required": ["shape_id"]
    }
}

delete_object_tool = {
    "name": "delete_object",
    "description": "Delete an object from the canvas",
    "input_schema": {
        "type": "object",
        "properties": {
            "object_id": {"type": "string", "description": "ID of the object to delete"}
        },
        "required": ["object_id"]
    }
}

group_objects_tool = {
    "name": "group_objects",
    "description": "Group multiple objects together. Uses the current selection when object_ids is omitted.",
    "input_schema": {
        "type": "object",
        "properties": {
            "object_ids": {
                "type": "array",
                "items": {"type": "string"},
                "description": "List of object IDs to group"
            },
            "group_name": {"type": "string", "description": "Name for the group"}
        },
        "required": []
    }
}

list_objects_tool = {
    "name": "list_objects",
    "description": "List every object on the canvas with its id, type, position and data",
    "input_schema": {
        "type": "object",
        "properties": {},
        "required": []
    }
}

select_objects_tool = {
    "name": "select_objects",
    "description": "Find objects on the canvas by type and/or color. Returns matching object ids.",
    "input_schema": {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "enum": ["rectangle", "circle", "text"],
                "description": "Only objects of this type"
            },
            "color": {"type": "string", "description": "Only objects with this fill or text color"}
        },
        "required": []
    }
}

OBJECT_TOOLS = [
    move_shape_tool,
    resize_shape_tool,
    rotate_shape_tool,
    change_style_tool,
    delete_object_tool,
    group_objects_tool,
    list_objects_tool,
    select_objects_tool,
]
