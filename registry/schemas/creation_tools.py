"""
Creation tool schemas
Tools that add new objects to the canvas. These are grouped and inserted
as one atomic batch.
"""

create_shape_tool = {
    "name": "create_shape",
    "description": "Create a shape (rectangle or circle) on the canvas. To create several identical shapes set `count`; they are laid out in a non-overlapping row or column starting at (x, y).",
    "input_schema": {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "enum": ["rectangle", "circle"],
                "description": "The type of shape to create"
            },
            "x": {"type": "number", "description": "X coordinate for the shape position"},
            "y": {"type": "number", "description": "Y coordinate for the shape position"},
            "width": {
                "type": "number",
                "description": "Width of the shape (for rectangles) or diameter (for circles)",
                "minimum": 1
            },
            "height": {
                "type": "number",
                "description": "Height of the shape (only for rectangles, ignored for circles)",
                "minimum": 1
            },
            "fill": {
                "type": "string",
                "description": "Fill color in hex format (e.g., #3b82f6) or a color name",
                "default": "#3b82f6"
            },
            "stroke": {
                "type": "string",
                "description": "Stroke color in hex format",
                "default": "#1e40af"
            },
            "stroke_width": {"type": "number", "description": "Width of the stroke", "default": 2},
            "count": {
                "type": "integer",
                "description": "How many copies to create (default 1)",
                "default": 1,
                "minimum": 1
            },
            "spacing": {
                "type": "number",
                "description": "Gap in pixels between copies when count > 1 (default: 1.5x the shape size)"
            },
            "direction": {
                "type": "string",
                "enum": ["horizontal", "vertical"],
                "description": "Which way copies are laid out when count > 1",
                "default": "horizontal"
            }
        },
        "required": ["type", "x", "y", "width"]
    }
}

create_text_tool = {
    "name": "create_text",
    "description": "Add text to the canvas",
    "input_schema": {
        "type": "object",
        "properties": {
            "text": {"type": "string", "description": "The text content to display"},
            "x": {"type": "number", "description": "X coordinate for text position"},
            "y": {"type": "number", "description": "Y coordinate for text position"},
            "font_size": {"type": "number", "description": "Font size in pixels", "default": 16, "minimum": 1},
            "font_family": {"type": "string", "description": "Font family name", "default": "Arial"},
            "color": {"type": "string", "description": "Text color in hex format", "default": "#000000"},
            "align": {
                "type": "string",
                "enum": ["left", "center", "right"],
                "description": "Text alignment",
                "default": "left"
            }
        },
        "required": ["text", "x", "y"]
    }
}

create_component_tool = {
    "name": "create_component",
    "description": "Create a UI component (a grouped set of shapes and text): button group, card, navbar, login form or sidebar. All parts share one group.",
    "input_schema": {
        "type": "object",
        "properties": {
            "type": {
                "type": "string",
                "enum": ["button", "card", "navbar", "login_form", "sidebar"],
                "description": "Type of component to create"
            },
            "x": {"type": "number", "description": "X coordinate of the component's top-left corner"},
            "y": {"type": "number", "description": "Y coordinate of the component's top-left corner"},
            "width": {
                "type": "number",
                "description": "Component width (default depends on the component type)",
                "minimum": 1
            },
            "height": {
                "type": "number",
                "description": "Component height (default depends on the component type)",
                "minimum": 1
            },
            "theme": {
                "type": "string",
                "enum": ["light", "dark", "blue", "green"],
                "description": "Color theme for the component",
                "default": "light"
            },
            "content": {
                "type": "object",
                "description": "Component-specific content",
                "properties": {
                    "title": {"type": "string", "description": "Component title or label"},
                    "subtitle": {"type": "string", "description": "Secondary text (cards)"},
                    "items": {
                        "type": "array",
                        "description": "Menu items or button labels (navbars, sidebars, button groups)",
                        "items": {"type": "string"}
                    }
                }
            }
        },
        "required": ["type", "x", "y"]
    }
}

CREATION_TOOLS = [
    create_shape_tool,
    create_text_tool,
    create_component_tool,
]
