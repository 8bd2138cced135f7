"""
Tests for create_component: expansion into grouped parts and batching with
the other creation calls.

Usage:
    pytest test_components.py
"""
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest

from handlers.component_handlers import THEMES, build_component_attrs
from handlers.creation_handlers import build_object_attrs
from orchestration.batch_processor import BatchProcessor
from orchestration.types import ToolCall
from registry import decode_tool_input
from utils.errors import ErrorKind, InvalidToolInputError


def component(call_id, **overrides):
    args = {"type": "login_form", "x": 100, "y": 50}
    args.update(overrides)
    return ToolCall(id=call_id, name="create_component", input=args)


def parts_of(**tool_input):
    args = {"x": 0, "y": 0}
    args.update(tool_input)
    attrs_list = build_component_attrs(decode_tool_input("create_component", args))
    return [dict(a, data=json.loads(a["data"])) for a in attrs_list]


def texts(parts):
    return [p["data"]["text"] for p in parts if p["type"] == "text"]


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------

def test_login_form_layout():
    parts = parts_of(type="login_form", x=100, y=50, width=300, height=280, theme="dark")

    assert len(parts) == 8
    assert texts(parts) == ["Login", "Username:", "Password:", "Sign In"]
    assert [p["type"] for p in parts].count("rectangle") == 4

    background = parts[0]
    assert background["position"] == {"x": 100, "y": 50}
    assert background["data"]["color"] == THEMES["dark"]["bg"].upper()
    assert background["data"]["stroke_width"] == 2

    title = parts[1]
    assert title["position"] == {"x": 250, "y": 70}
    assert title["data"]["align"] == "center"
    assert title["data"]["font_family"] == "Arial"

    button = parts[-2]
    assert button["position"] == {"x": 120, "y": 260}
    assert button["data"]["width"] == 260
    assert button["data"]["color"] == "#3B82F6"


def test_parts_share_one_group():
    parts = parts_of(type="card")
    group_ids = {p["group_id"] for p in parts}
    assert len(group_ids) == 1 and None not in group_ids

    again = parts_of(type="card")
    assert again[0]["group_id"] not in group_ids


def test_navbar_custom_items():
    parts = parts_of(type="navbar", width=600, height=60, content={"title": "Acme", "items": ["One", "Two", "Three"]})

    assert texts(parts) == ["Acme", "One", "Two", "Three"]
    item_xs = [p["position"]["x"] for p in parts if p["type"] == "text"][1:]
    assert item_xs == [200, 400, 600]


def test_navbar_single_item():
    parts = parts_of(type="navbar", content={"items": ["Home"]})
    assert texts(parts) == ["Brand", "Home"]


def test_button_group_splits_width():
    parts = parts_of(type="button", width=320, height=40, content={"items": ["Yes", "No"]})

    rects = [p for p in parts if p["type"] == "rectangle"]
    assert [r["data"]["width"] for r in rects] == [150, 150]
    assert [r["position"]["x"] for r in rects] == [0, 170]
    assert texts(parts) == ["Yes", "No"]


def test_sidebar_defaults():
    parts = parts_of(type="sidebar", theme="green")

    assert texts(parts) == ["Menu", "Dashboard", "Profile", "Settings", "Logout"]
    assert len(parts) == 2 + 2 * 4
    item_rects = [p for p in parts if p["type"] == "rectangle"][1:]
    assert [r["position"]["y"] for r in item_rects] == [60, 110, 160, 210]
    assert {r["data"]["color"] for r in item_rects} == {THEMES["green"]["sidebar_item_bg"].upper()}


def test_card_subtitle_and_shadow():
    parts = parts_of(type="card", content={"title": "Pricing", "subtitle": "Pick a plan"})

    assert texts(parts) == ["Pricing", "Pick a plan"]
    shadow = parts[0]
    assert shadow["position"] == {"x": 4, "y": 4}
    assert shadow["data"]["color"] == "#00000026"


def test_items_must_be_strings():
    with pytest.raises(InvalidToolInputError):
        parts_of(type="sidebar", content={"items": ["Home", 3]})


def test_too_many_buttons_for_width():
    with pytest.raises(InvalidToolInputError):
        parts_of(type="button", width=40, content={"items": ["A", "B", "C"]})


def test_component_respects_object_limit():
    with pytest.raises(InvalidToolInputError):
        build_object_attrs("create_component", {"type": "login_form", "x": 0, "y": 0}, max_objects=5)


# ---------------------------------------------------------------------------
# Batching
# ---------------------------------------------------------------------------

def test_component_batches_with_shapes(store, canvas):
    calls = [
        ToolCall(id="s1", name="create_shape", input={"type": "circle", "x": 0, "y": 0, "width": 20}),
        component("c1"),
        ToolCall(id="l1", name="list_objects", input={}),
    ]
    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert all(r.ok for r in results)
    result = results[1].result
    assert result["component_type"] == "login_form"
    assert len(result["object_ids"]) == 8

    objects = store.list_objects(canvas["id"])
    assert len(objects) == 9
    grouped = [o for o in objects if o["group_id"] == result["group_id"]]
    assert sorted(o["id"] for o in grouped) == sorted(result["object_ids"])


def test_invalid_component_fails_whole_group(store, canvas):
    calls = [
        ToolCall(id="s1", name="create_shape", input={"type": "rectangle", "x": 0, "y": 0, "width": 20}),
        component("c1", theme="neon"),
    ]
    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert [r.error_kind for r in results] == [ErrorKind.BATCH_INSERT_FAILED] * 2
    assert store.list_objects(canvas["id"]) == []


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
