"""
Layout tool schemas
"""

arrange_objects_tool = {
    "name": "arrange_objects",
    "description": "Arranges objects in standard layout patterns: horizontal, vertical, grid, circular and stack. Uses the current selection when object_ids is omitted.",
    "input_schema": {
        "type": "object",
        "properties": {
            "object_ids": {
                "type": "array",
                "items": {"type": "string"},
                "description": "IDs of objects to arrange"
            },
            "layout_type": {
                "type": "string",
                "enum": ["horizontal", "vertical", "grid", "circular", "stack"],
                "description": "Type of layout to apply"
            },
            "spacing": {
                "type": "number",
                "description": "Spacing between objects in pixels (omit for even distribution)"
            },
            "alignment": {
                "type": "string",
                "enum": ["left", "center", "right", "top", "middle", "bottom"],
                "description": "Alignment for objects (used with stack layout or separately)"
            },
            "columns": {"type": "integer", "description": "Number of columns for grid layout", "default": 3},
            "radius": {"type": "number", "description": "Radius in pixels for circular layout", "default": 200}
        },
        "required": ["layout_type"]
    }
}

align_objects_tool = {
    "name": "align_objects",
    "description": "Align objects to a shared edge or centre line. Uses the current selection when object_ids is omitted.",
    "input_schema": {
        "type": "object",
        "properties": {
            "object_ids": {
                "type": "array",
                "items": {"type": "string"},
                "description": "IDs of objects to align"
            },
            "alignment": {
                "type": "string",
                "enum": ["left", "center", "right", "top", "middle", "bottom"],
                "description": "Edge or centre line to align to"
            }
        },
        "required": ["alignment"]
    }
}

LAYOUT_TOOLS = [
    arrange_objects_tool,
    align_objects_tool,
]
