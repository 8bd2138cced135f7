"""
Canvas Store
Persistence boundary for canvases and their objects.

Object records look like:
    {"id": str, "canvas_id": str, "type": "rectangle" | "circle" | "text",
     "position": {"x": .., "y": ..}, "data": "<json string>",
     "z_index": int, "group_id": str | None}

`create_objects_batch` is all-or-nothing. Per-object operations raise
ObjectNotFoundError for ids that don't exist.
"""
import json
import uuid
from abc import ABC, abstractmethod
from threading import Lock

from supabase import PostgrestAPIError

from config import settings
from utils import get_logger
from utils import supabase_client as db
from utils.errors import BatchInsertError, ObjectNotFoundError

logger = get_logger(__name__)

OBJECT_TYPES = {"rectangle", "circle", "text"}


def decode_data(obj: dict) -> dict:
    """Decode an object's `data` field (JSON string or dict) into a dict"""
    data = obj.get("data") if obj else None
    if not data:
        return {}
    if isinstance(data, dict):
        return dict(data)
    try:
        decoded = json.loads(data)
    except (TypeError, json.JSONDecodeError):
        logger.warning(f"Object {obj.get('id')} has undecodable data")
        return {}
    return decoded if isinstance(decoded, dict) else {}


def encode_data(data: dict) -> str:
    return json.dumps(data)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_attrs(index: int, attrs: dict) -> None:
    """Reject an attribute set before anything is written"""
    if not isinstance(attrs, dict):
        raise BatchInsertError("attributes must be an object", index=index)
    if attrs.get("type") not in OBJECT_TYPES:
        raise BatchInsertError(f"unsupported object type {attrs.get('type')!r}", index=index)
    position = attrs.get("position")
    if not isinstance(position, dict) or not _is_number(position.get("x")) or not _is_number(position.get("y")):
        raise BatchInsertError("position must have numeric x and y", index=index)
    if not isinstance(attrs.get("data"), str):
        raise BatchInsertError("data must be a JSON string", index=index)


class CanvasStore(ABC):
    """
    Abstract store. Subclasses implement the raw row operations; the
    per-object canvas operations are built on top of them here.
    """

    @abstractmethod
    def get_canvas(self, canvas_id: str) -> dict | None:
        ...

    @abstractmethod
    def create_objects_batch(self, canvas_id: str, attrs_list: list[dict]) -> list[dict]:
        """Insert every attribute set or none; raises BatchInsertError"""

    @abstractmethod
    def get_object(self, object_id: str) -> dict | None:
        ...

    @abstractmethod
    def list_objects(self, canvas_id: str) -> list[dict]:
        ...

    @abstractmethod
    def update_object(self, object_id: str, changes: dict) -> dict:
        """Apply changes, returns the updated object; raises ObjectNotFoundError"""

    @abstractmethod
    def delete_object(self, object_id: str) -> dict:
        """Remove an object, returns it; raises ObjectNotFoundError"""

    def require_object(self, object_id: str) -> dict:
        obj = self.get_object(object_id)
        if obj is None:
            raise ObjectNotFoundError(object_id)
        return obj

    def _update_data(self, object_id: str, values: dict) -> dict:
        obj = self.require_object(object_id)
        data = decode_data(obj)
        data.update(values)
        return self.update_object(object_id, {"data": encode_data(data)})

    def move(self, object_id: str, x: float, y: float) -> dict:
        return self.update_object(object_id, {"position": {"x": x, "y": y}})

    def resize(self, object_id: str, width: float, height: float | None = None) -> dict:
        obj = self.require_object(object_id)
        values = {"width": width}
        # Circles keep a single diameter
        if obj.get("type") == "circle":
            values["height"] = width
        elif height is not None:
            values["height"] = height
        return self._update_data(object_id, values)

    def rotate(self, object_id: str, angle: float) -> dict:
        return self._update_data(object_id, {"rotation": angle % 360})

    def restyle(self, object_id: str, style: dict) -> dict:
        return self._update_data(object_id, {k: v for k, v in style.items() if v is not None})

    def delete(self, object_id: str) -> dict:
        return self.delete_object(object_id)

    def group(self, object_ids: list[str], group_name: str | None = None) -> dict:
        """Assign one new group id to every object; all ids must exist first"""
        for object_id in object_ids:
            self.require_object(object_id)
        group_id = str(uuid.uuid4())
        for object_id in object_ids:
            self.update_object(object_id, {"group_id": group_id})
        logger.info(f"Grouped {len(object_ids)} objects into {group_id}")
        return {"group_id": group_id, "group_name": group_name, "object_ids": list(object_ids)}


class SupabaseCanvasStore(CanvasStore):
    """Store backed by the `canvases` and `canvas_objects` tables"""

    def get_canvas(self, canvas_id):
        return db.get_canvas(canvas_id)

    def create_objects_batch(self, canvas_id, attrs_list):
        for index, attrs in enumerate(attrs_list):
            validate_attrs(index, attrs)

        next_z = db.get_max_z_index(canvas_id) + 1
        rows = []
        for offset, attrs in enumerate(attrs_list):
            rows.append({
                "canvas_id": canvas_id,
                "type": attrs["type"],
                "position": attrs["position"],
                "data": attrs["data"],
                "z_index": attrs.get("z_index", next_z + offset),
                "group_id": attrs.get("group_id"),
            })

        try:
            inserted = db.insert_canvas_objects(rows)
        except PostgrestAPIError as e:
            logger.error(f"Batch insert of {len(rows)} objects failed: {e.message}")
            raise BatchInsertError(e.message or "insert rejected") from e

        if len(inserted) != len(rows):
            raise BatchInsertError(f"expected {len(rows)} rows back, got {len(inserted)}")
        return inserted

    def get_object(self, object_id):
        return db.get_canvas_object(object_id)

    def list_objects(self, canvas_id):
        return db.get_canvas_objects(canvas_id)

    def update_object(self, object_id, changes):
        updated = db.update_canvas_object(object_id, changes)
        if updated is None:
            raise ObjectNotFoundError(object_id)
        return updated

    def delete_object(self, object_id):
        deleted = db.delete_canvas_object(object_id)
        if deleted is None:
            raise ObjectNotFoundError(object_id)
        return deleted


class InMemoryCanvasStore(CanvasStore):
    """Process-local store for development and tests"""

    def __init__(self):
        self._canvases: dict[str, dict] = {}
        self._objects: dict[str, dict] = {}
        self._lock = Lock()

    def create_canvas(self, name: str = "Untitled", canvas_id: str | None = None) -> dict:
        canvas = {"id": canvas_id or str(uuid.uuid4()), "name": name}
        with self._lock:
            self._canvases[canvas["id"]] = canvas
        return dict(canvas)

    def get_canvas(self, canvas_id):
        with self._lock:
            canvas = self._canvases.get(canvas_id)
            return dict(canvas) if canvas else None

    def create_objects_batch(self, canvas_id, attrs_list):
        for index, attrs in enumerate(attrs_list):
            validate_attrs(index, attrs)

        with self._lock:
            if canvas_id not in self._canvases:
                raise BatchInsertError(f"canvas {canvas_id} does not exist")
            next_z = max(
                (o["z_index"] for o in self._objects.values() if o["canvas_id"] == canvas_id),
                default=0,
            ) + 1
            created = []
            for offset, attrs in enumerate(attrs_list):
                created.append({
                    "id": str(uuid.uuid4()),
                    "canvas_id": canvas_id,
                    "type": attrs["type"],
                    "position": dict(attrs["position"]),
                    "data": attrs["data"],
                    "z_index": attrs.get("z_index", next_z + offset),
                    "group_id": attrs.get("group_id"),
                })
            for obj in created:
                self._objects[obj["id"]] = obj
        return [self._copy(o) for o in created]

    def get_object(self, object_id):
        with self._lock:
            obj = self._objects.get(object_id)
            return self._copy(obj) if obj else None

    def list_objects(self, canvas_id):
        with self._lock:
            objects = [o for o in self._objects.values() if o["canvas_id"] == canvas_id]
            return [self._copy(o) for o in sorted(objects, key=lambda o: o["z_index"])]

    def update_object(self, object_id, changes):
        with self._lock:
            obj = self._objects.get(object_id)
            if obj is None:
                raise ObjectNotFoundError(object_id)
            obj.update(changes)
            return self._copy(obj)

    def delete_object(self, object_id):
        with self._lock:
            obj = self._objects.pop(object_id, None)
            if obj is None:
                raise ObjectNotFoundError(object_id)
            return self._copy(obj)

    @staticmethod
    def _copy(obj: dict) -> dict:
        copied = dict(obj)
        copied["position"] = dict(obj.get("position") or {})
        return copied


# Singleton instance
_store: CanvasStore | None = None


def get_canvas_store() -> CanvasStore:
    """Get or create the configured canvas store (CANVAS_STORE=supabase|memory)"""
    global _store
    if _store is None:
        if settings.CANVAS_STORE == "memory":
            _store = InMemoryCanvasStore()
        else:
            _store = SupabaseCanvasStore()
        logger.info(f"Using {type(_store).__name__}")
    return _store
