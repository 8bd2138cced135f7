"""
Batch Processor
Executes validated tool calls against the canvas.

1. Partition calls into creation calls and everything else, keeping their indices
2. Expand every creation call (count = N, or a component's parts) into attribute sets
3. Insert all attribute sets in one atomic batch
4. Run the other calls one by one through the handlers
5. Put results back in the order the calls came in

Creation is all-or-nothing: if the batch insert fails, every creation call
reports batch_insert_failed. Failures of individual calls stay on their own result.
"""
import time
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime

from config import settings
from handlers import handle_function_call, build_object_attrs, FunctionCall, HandlerContext
from handlers.object_handlers import describe_object
from registry import CREATION_TOOL_NAMES
from services.canvas_store import CanvasStore
from utils import get_logger
from utils.errors import (
    BatchInsertError,
    ErrorKind,
    InvalidToolInputError,
    OrchestrationError,
)
from .types import ExecutionResult, ToolCall

logger = get_logger(__name__)


class BatchProcessor:
    """
    Splits a tool-call list into one atomic creation batch plus individual
    calls, runs them on a bounded thread pool, and re-joins results by index.
    """

    def __init__(
        self,
        store: CanvasStore,
        max_concurrency: int | None = None,
        max_objects: int | None = None,
        warn_ms: float | None = None,
        log_size: int | None = None,
    ):
        self.store = store
        self.max_concurrency = max_concurrency or settings.BATCH_MAX_CONCURRENCY
        self.max_objects = max_objects or settings.BATCH_MAX_OBJECTS
        self.warn_ms = warn_ms if warn_ms is not None else settings.BATCH_WARN_MS
        # Most recent entries only
        self.execution_log: deque[dict] = deque(maxlen=log_size or settings.BATCH_EXECUTION_LOG_SIZE)

    def execute(self, tool_calls: list[ToolCall], canvas_id: str, defaults: dict | None = None) -> list[ExecutionResult]:
        """
        Execute tool calls; the returned list is index-aligned with `tool_calls`.

        `defaults` carries canvas context: `selected_ids` and `current_color`.
        """
        defaults = defaults or {}
        start = time.monotonic()

        creation = [(i, call) for i, call in enumerate(tool_calls) if call.name in CREATION_TOOL_NAMES]
        individual = [(i, call) for i, call in enumerate(tool_calls) if call.name not in CREATION_TOOL_NAMES]

        results: list[ExecutionResult | None] = [None] * len(tool_calls)

        if tool_calls:
            workers = max(1, min(self.max_concurrency, len(individual) + (1 if creation else 0)))
            # Leaving the block waits for every submitted task, so a creation
            # batch is never cut off mid-insert
            with ThreadPoolExecutor(max_workers=workers) as pool:
                creation_future = pool.submit(self._execute_creation, creation, canvas_id, defaults) if creation else None
                individual_futures = [
                    (index, pool.submit(self._execute_individual, call, canvas_id, defaults))
                    for index, call in individual
                ]

                if creation_future is not None:
                    for index, result in creation_future.result():
                        results[index] = result
                for index, future in individual_futures:
                    results[index] = future.result()

        duration_ms = (time.monotonic() - start) * 1000
        failed = sum(1 for r in results if r is not None and not r.ok)
        logger.info(
            f"Batch complete: {len(tool_calls)} calls ({len(creation)} creation, "
            f"{len(individual)} individual), {failed} failed, {duration_ms:.0f}ms"
        )
        if duration_ms > self.warn_ms:
            logger.warning(f"Slow batch: {duration_ms:.0f}ms for {len(tool_calls)} calls (threshold {self.warn_ms}ms)")

        return results

    def _execute_creation(self, creation: list[tuple[int, ToolCall]], canvas_id: str,
                          defaults: dict) -> list[tuple[int, ExecutionResult]]:
        current_color = defaults.get("current_color")

        # Build every attribute set first; one bad call fails the whole group
        spans = []
        attrs_list = []
        try:
            for index, call in creation:
                attrs = build_object_attrs(call.name, call.input, current_color, self.max_objects)
                spans.append((index, call, len(attrs_list), len(attrs)))
                attrs_list.extend(attrs)
                if len(attrs_list) > self.max_objects:
                    raise InvalidToolInputError(
                        f"command would create {len(attrs_list)} objects, limit is {self.max_objects}"
                    )
            created = self.store.create_objects_batch(canvas_id, attrs_list)
        except (BatchInsertError, InvalidToolInputError) as e:
            logger.warning(f"Creation batch of {len(creation)} calls failed: {e}")
            return self._fail_group(creation, str(e))
        except Exception as e:
            logger.exception("Creation batch failed unexpectedly")
            return self._fail_group(creation, str(e))

        logger.info(f"Created {len(created)} objects from {len(creation)} calls on canvas {canvas_id}")

        results = []
        for index, call, offset, count in spans:
            objects = [describe_object(o) for o in created[offset:offset + count]]
            if call.name == "create_component":
                result = {
                    "component_type": call.input.get("type"),
                    "group_id": objects[0]["group_id"] if objects else None,
                    "object_ids": [o["id"] for o in objects],
                    "objects": objects,
                }
            elif count > 1:
                result = {"count": count, "total": len(created), "objects": objects}
            else:
                result = objects[0]
            results.append((index, ExecutionResult(
                tool=call.name, input=call.input, result=result, tool_call_id=call.id,
            )))
            self._log(call, "completed")
        return results

    def _fail_group(self, creation: list[tuple[int, ToolCall]], reason: str) -> list[tuple[int, ExecutionResult]]:
        results = []
        for index, call in creation:
            results.append((index, ExecutionResult(
                tool=call.name,
                input=call.input,
                result=None,
                tool_call_id=call.id,
                error_kind=ErrorKind.BATCH_INSERT_FAILED,
                error=reason,
            )))
            self._log(call, "failed", reason)
        return results

    def _execute_individual(self, call: ToolCall, canvas_id: str, defaults: dict) -> ExecutionResult:
        ctx = HandlerContext(
            canvas_id=canvas_id,
            store=self.store,
            selected_ids=tuple(defaults.get("selected_ids") or ()),
            current_color=defaults.get("current_color"),
        )
        function_call: FunctionCall = {"name": call.name, "args": call.input}

        try:
            result = handle_function_call(function_call, ctx)
        except OrchestrationError as e:
            logger.warning(f"{call.name} ({call.id}) failed: {e.kind.value}: {e}")
            self._log(call, "failed", str(e))
            return ExecutionResult(
                tool=call.name, input=call.input, result=None, tool_call_id=call.id,
                error_kind=e.kind, error=str(e),
            )
        except Exception as e:
            logger.exception(f"{call.name} ({call.id}) failed unexpectedly")
            self._log(call, "failed", str(e))
            return ExecutionResult(
                tool=call.name, input=call.input, result=None, tool_call_id=call.id,
                error_kind=ErrorKind.INVALID_TOOL_INPUT, error=str(e),
            )

        self._log(call, "completed")
        return ExecutionResult(tool=call.name, input=call.input, result=result, tool_call_id=call.id)

    def _log(self, call: ToolCall, status: str, error: str | None = None) -> None:
        entry = {
            "tool_call_id": call.id,
            "tool": call.name,
            "status": status,
            "timestamp": datetime.now().isoformat(),
        }
        if error:
            entry["error"] = error
        self.execution_log.append(entry)

    def get_execution_log(self) -> list[dict]:
        """Get the full execution log for debugging/audit"""
        return list(self.execution_log)

    def clear_execution_log(self) -> None:
        """Clear the execution log"""
        self.execution_log.clear()
