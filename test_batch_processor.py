"""
Tests for batch execution of tool calls against an in-memory canvas.

Usage:
    pytest test_batch_processor.py
"""
import json
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest

from orchestration.batch_processor import BatchProcessor
from orchestration.types import ToolCall
from services.canvas_store import InMemoryCanvasStore
from utils.errors import BatchInsertError, ErrorKind


def shape(call_id, **overrides):
    args = {"type": "rectangle", "x": 100, "y": 100, "width": 50, "height": 30, "fill": "red"}
    args.update(overrides)
    return ToolCall(id=call_id, name="create_shape", input=args)


def text(call_id, **overrides):
    args = {"text": "Hello", "x": 10, "y": 10}
    args.update(overrides)
    return ToolCall(id=call_id, name="create_text", input=args)


def data_of(obj):
    return json.loads(obj["data"]) if isinstance(obj["data"], str) else obj["data"]


class FailingStore(InMemoryCanvasStore):
    """Rejects every batch insert, the way a constraint violation would"""

    def create_objects_batch(self, canvas_id, attrs_list):
        raise BatchInsertError("violates check constraint", index=len(attrs_list) - 1)


def test_repeated_rectangles(store, canvas):
    """'create 5 red rectangles': 5 objects, strictly increasing x at a fixed step"""
    processor = BatchProcessor(store)
    results = processor.execute([shape("c1", count=5)], canvas["id"])

    assert len(results) == 1 and results[0].ok
    assert results[0].result["count"] == 5
    assert len(results[0].result["objects"]) == 5

    objects = store.list_objects(canvas["id"])
    xs = [o["position"]["x"] for o in objects]
    assert len(objects) == 5
    assert all(b > a for a, b in zip(xs, xs[1:]))
    assert len({b - a for a, b in zip(xs, xs[1:])}) == 1
    assert {o["position"]["y"] for o in objects} == {100}
    assert {data_of(o)["color"] for o in objects} == {"#FF0000"}


@pytest.mark.parametrize("count,width,direction,spacing", [
    (2, 40, "horizontal", None),
    (4, 40, "vertical", None),
    (7, 25, "horizontal", 5),
    (3, 60, "vertical", 0),
])
def test_expansion_is_non_overlapping(store, canvas, count, width, direction, spacing):
    overrides = {"count": count, "width": width, "height": width, "direction": direction}
    if spacing is not None:
        overrides["spacing"] = spacing
    BatchProcessor(store).execute([shape("c1", **overrides)], canvas["id"])

    objects = store.list_objects(canvas["id"])
    assert len(objects) == count

    axis = "x" if direction == "horizontal" else "y"
    starts = sorted(o["position"][axis] for o in objects)
    for a, b in zip(starts, starts[1:]):
        assert b - a >= width


def test_explicit_spacing_sets_step(store, canvas):
    BatchProcessor(store).execute([shape("c1", count=3, width=50, spacing=10)], canvas["id"])
    xs = [o["position"]["x"] for o in store.list_objects(canvas["id"])]
    assert xs == [100, 160, 220]


def test_default_step_is_two_and_a_half_widths(store, canvas):
    BatchProcessor(store).execute([shape("c1", count=3, width=50)], canvas["id"])
    xs = [o["position"]["x"] for o in store.list_objects(canvas["id"])]
    assert xs == [100, 225, 350]


def test_text_ignores_count(store, canvas):
    results = BatchProcessor(store).execute([text("t1", count=4)], canvas["id"])

    assert results[0].ok
    assert results[0].result["type"] == "text"
    assert len(store.list_objects(canvas["id"])) == 1


def test_mixed_calls_keep_their_order(store, canvas):
    """create_shape, move_object on a missing id, create_text: three results in order"""
    calls = [
        shape("c1"),
        ToolCall(id="c2", name="move_object", input={"object_id": "missing", "x": 5, "y": 5}),
        text("c3"),
    ]
    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert [r.tool_call_id for r in results] == ["c1", "c2", "c3"]
    assert results[0].ok
    assert results[1].error_kind == ErrorKind.OBJECT_NOT_FOUND
    assert results[2].ok
    assert results[2].result["type"] == "text"
    assert len(store.list_objects(canvas["id"])) == 2


def test_results_are_index_aligned(store, canvas):
    existing = store.create_objects_batch(canvas["id"], [
        {"type": "rectangle", "position": {"x": 0, "y": 0}, "data": json.dumps({"width": 10, "height": 10})},
        {"type": "circle", "position": {"x": 50, "y": 0}, "data": json.dumps({"width": 10})},
    ])
    calls = [
        ToolCall(id="a", name="move_shape", input={"shape_id": existing[0]["id"], "x": 300, "y": 300}),
        shape("b"),
        ToolCall(id="c", name="list_objects", input={}),
        ToolCall(id="d", name="no_such_tool", input={"x": 1}),
        text("e", text="Title"),
        ToolCall(id="f", name="resize_shape", input={"shape_id": existing[1]["id"], "width": 80}),
        ToolCall(id="g", name="delete_object", input={"object_id": "gone"}),
        shape("h", count=3),
    ]

    results = BatchProcessor(store, max_concurrency=3).execute(calls, canvas["id"])

    assert len(results) == len(calls)
    for call, result in zip(calls, results):
        assert result.input == call.input
        assert result.tool_call_id == call.id
    assert results[3].error_kind == ErrorKind.UNKNOWN_TOOL
    assert results[6].error_kind == ErrorKind.OBJECT_NOT_FOUND
    assert results[5].result["data"]["height"] == 80
    assert results[7].result["count"] == 3
    assert results[7].result["total"] == 5


def test_invalid_creation_call_commits_nothing(store, canvas):
    calls = [shape("c1", count=3), shape("c2", type="triangle"), text("c3")]
    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert [r.error_kind for r in results] == [ErrorKind.BATCH_INSERT_FAILED] * 3
    assert store.list_objects(canvas["id"]) == []


def test_store_rejection_fails_whole_group(canvas):
    store = FailingStore()
    store.create_canvas(canvas_id=canvas["id"])
    calls = [
        shape("c1", count=2),
        ToolCall(id="c2", name="list_objects", input={}),
        text("c3"),
    ]

    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert results[0].error_kind == ErrorKind.BATCH_INSERT_FAILED
    assert results[2].error_kind == ErrorKind.BATCH_INSERT_FAILED
    assert results[1].ok
    assert results[1].result["count"] == 0
    assert store.list_objects(canvas["id"]) == []


def test_expansion_cap(store, canvas):
    processor = BatchProcessor(store, max_objects=10)
    results = processor.execute([shape("c1", count=6), shape("c2", count=6)], canvas["id"])

    assert all(r.error_kind == ErrorKind.BATCH_INSERT_FAILED for r in results)
    assert store.list_objects(canvas["id"]) == []


def test_invalid_input_on_individual_call_is_local(store, canvas):
    calls = [ToolCall(id="m", name="move_shape", input={"shape_id": "x"}), shape("c")]
    results = BatchProcessor(store).execute(calls, canvas["id"])

    assert results[0].error_kind == ErrorKind.INVALID_TOOL_INPUT
    assert results[1].ok


def test_current_color_applies_when_call_has_none(store, canvas):
    call = ToolCall(id="c1", name="create_shape", input={"type": "circle", "x": 0, "y": 0, "width": 20})
    BatchProcessor(store).execute([call], canvas["id"], {"current_color": "00ff00"})

    obj = store.list_objects(canvas["id"])[0]
    assert data_of(obj)["color"] == "#00FF00"
    assert data_of(obj)["height"] == 20


def test_schema_defaults_fill_text_attributes(store, canvas):
    BatchProcessor(store).execute([text("t1")], canvas["id"])

    data = data_of(store.list_objects(canvas["id"])[0])
    assert data["font_size"] == 16
    assert data["font_family"] == "Arial"
    assert data["align"] == "left"
    assert data["color"] == "#000000"


def test_selection_is_default_target(store, canvas):
    created = store.create_objects_batch(canvas["id"], [
        {"type": "rectangle", "position": {"x": 10, "y": 0}, "data": json.dumps({"width": 20, "height": 20})},
        {"type": "rectangle", "position": {"x": 90, "y": 40}, "data": json.dumps({"width": 20, "height": 20})},
    ])
    ids = tuple(o["id"] for o in created)
    call = ToolCall(id="g", name="group_objects", input={})

    results = BatchProcessor(store).execute([call], canvas["id"], {"selected_ids": ids})

    assert results[0].ok
    assert sorted(results[0].result["object_ids"]) == sorted(ids)
    group_ids = {store.get_object(i)["group_id"] for i in ids}
    assert len(group_ids) == 1 and None not in group_ids


def test_empty_call_list(store, canvas):
    assert BatchProcessor(store).execute([], canvas["id"]) == []


def test_execution_log_records_each_call(store, canvas):
    processor = BatchProcessor(store)
    processor.execute([shape("c1"), ToolCall(id="c2", name="delete_object", input={"object_id": "nope"})], canvas["id"])

    log = {entry["tool_call_id"]: entry for entry in processor.get_execution_log()}
    assert log["c1"]["status"] == "completed"
    assert log["c2"]["status"] == "failed"


def test_execution_log_keeps_most_recent_entries(store, canvas):
    processor = BatchProcessor(store, log_size=3)
    calls = [ToolCall(id=f"d{i}", name="delete_object", input={"object_id": "nope"}) for i in range(5)]
    processor.execute(calls, canvas["id"])

    assert len(processor.get_execution_log()) == 3
    assert {entry["tool_call_id"] for entry in processor.get_execution_log()} <= {f"d{i}" for i in range(5)}

    processor.execute([ToolCall(id="last", name="list_objects", input={})], canvas["id"])
    assert len(processor.get_execution_log()) == 3
    assert processor.get_execution_log()[-1]["tool_call_id"] == "last"

    processor.clear_execution_log()
    assert processor.get_execution_log() == []


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
