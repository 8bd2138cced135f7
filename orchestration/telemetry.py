"""
Telemetry
One structured event per command: which provider answered, how the command
was classified, how many tool calls ran, how long it took and whether it worked.
"""
import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Callable, Optional

from utils import get_logger

logger = get_logger(__name__)


@dataclass
class CommandEvent:
    canvas_id: str
    provider: Optional[str]
    classification: Optional[str]
    tool_count: int
    duration_ms: float
    success: bool
    error_kind: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        data = asdict(self)
        data["duration_ms"] = round(self.duration_ms, 1)
        return data


_listeners: list[Callable[[CommandEvent], None]] = []
_listeners_lock = Lock()


def add_listener(listener: Callable[[CommandEvent], None]) -> None:
    with _listeners_lock:
        _listeners.append(listener)


def remove_listener(listener: Callable[[CommandEvent], None]) -> None:
    with _listeners_lock:
        if listener in _listeners:
            _listeners.remove(listener)


def emit_command_event(event: CommandEvent) -> None:
    """Log the event as one JSON line and hand it to every listener"""
    logger.info(f"command_event {json.dumps(event.to_dict())}")

    with _listeners_lock:
        listeners = list(_listeners)

    for listener in listeners:
        try:
            listener(event)
        except Exception:
            # A broken listener must not fail the command it reports on
            logger.exception(f"Telemetry listener {getattr(listener, '__name__', listener)} failed")
