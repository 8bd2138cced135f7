"""
Utility helpers - logging, database access, layout geometry
"""
from .logger import get_logger

__all__ = ["get_logger"]
