"""
Supabase client for database access
Raw table access for canvases and canvas objects; the canvas store builds on these.
"""
from supabase import create_client, Client
from config import settings
from utils.logger import get_logger

logger = get_logger(__name__)

_client: Client | None = None

CANVASES_TABLE = "canvases"
OBJECTS_TABLE = "canvas_objects"


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton"""
    global _client
    if _client is None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
            raise ValueError("Supabase URL and Key must be configured")
        _client = create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
    return _client


def get_canvas(canvas_id: str) -> dict | None:
    """Get a canvas row by id"""
    client = get_supabase_client()
    response = client.table(CANVASES_TABLE).select("*").eq("id", canvas_id).limit(1).execute()
    rows = response.data or []
    return rows[0] if rows else None


def insert_canvas_objects(rows: list[dict]) -> list[dict]:
    """
    Insert many object rows in a single request.
    PostgREST runs a bulk insert as one statement, so either every row lands or none do.
    """
    client = get_supabase_client()
    response = client.table(OBJECTS_TABLE).insert(rows).execute()
    logger.info(f"insert_canvas_objects: inserted {len(response.data or [])} of {len(rows)} rows")
    return response.data or []


def get_canvas_object(object_id: str) -> dict | None:
    """Get a single object row"""
    client = get_supabase_client()
    response = client.table(OBJECTS_TABLE).select("*").eq("id", object_id).limit(1).execute()
    rows = response.data or []
    return rows[0] if rows else None


def get_canvas_objects(canvas_id: str) -> list[dict]:
    """Get all objects on a canvas, ordered by z_index"""
    client = get_supabase_client()
    response = (
        client.table(OBJECTS_TABLE)
        .select("*")
        .eq("canvas_id", canvas_id)
        .order("z_index")
        .execute()
    )
    logger.info(f"get_canvas_objects for {canvas_id}: found {len(response.data or [])} objects")
    return response.data or []


def update_canvas_object(object_id: str, changes: dict) -> dict | None:
    """Update an object row, returns the updated row or None if it does not exist"""
    client = get_supabase_client()
    response = client.table(OBJECTS_TABLE).update(changes).eq("id", object_id).execute()
    rows = response.data or []
    return rows[0] if rows else None


def delete_canvas_object(object_id: str) -> dict | None:
    """Delete an object row, returns the deleted row or None if it does not exist"""
    client = get_supabase_client()
    response = client.table(OBJECTS_TABLE).delete().eq("id", object_id).execute()
    rows = response.data or []
    return rows[0] if rows else None


def get_max_z_index(canvas_id: str) -> int:
    """Highest z_index currently used on a canvas (0 when empty)"""
    client = get_supabase_client()
    response = (
        client.table(OBJECTS_TABLE)
        .select("z_index")
        .eq("canvas_id", canvas_id)
        .order("z_index", desc=True)
        .limit(1)
        .execute()
    )
    rows = response.data or []
    return int(rows[0].get("z_index") or 0) if rows else 0
