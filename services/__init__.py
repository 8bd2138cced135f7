"""
Services module - canvas persistence and LLM provider clients
"""
from .canvas_store import (
    CanvasStore,
    SupabaseCanvasStore,
    InMemoryCanvasStore,
    get_canvas_store,
    decode_data,
    encode_data,
)

__all__ = [
    "CanvasStore",
    "SupabaseCanvasStore",
    "InMemoryCanvasStore",
    "get_canvas_store",
    "decode_data",
    "encode_data",
]
