"""
Orchestration Types
Request/response shapes passed between the classifier, router, validator and batch processor.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from utils.errors import ErrorKind


class Classification(Enum):
    """Which provider tier a command is routed to"""
    FAST_PATH = "fast_path"         # Single, template-like commands
    COMPLEX_PATH = "complex_path"   # Multi-step, contextual, layout or component commands


@dataclass(frozen=True)
class Command:
    """A natural-language instruction against one canvas"""
    text: str
    canvas_id: str
    selected_ids: tuple[str, ...] = ()
    current_color: Optional[str] = None


@dataclass(frozen=True)
class ToolCall:
    """
    A structurally valid tool invocation.
    Only ToolCallValidator builds these; `input` is always a dict.
    """
    id: str
    name: str
    input: dict


@dataclass
class ExecutionResult:
    """Outcome of one ToolCall, positionally aligned with the input list"""
    tool: str
    input: dict
    result: Any
    tool_call_id: str
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error_kind is None

    def to_dict(self) -> dict:
        data = {
            "tool": self.tool,
            "input": self.input,
            "result": self.result,
            "tool_call_id": self.tool_call_id,
        }
        if self.error_kind is not None:
            data["error_kind"] = self.error_kind.value
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ProviderAttempt:
    """One step of the routing plan: a call, or a reason it was skipped"""
    provider: str
    outcome: str                    # success | circuit_open | rate_limited | missing_credential | failed
    error_kind: Optional[ErrorKind] = None


@dataclass
class RouteResult:
    """What the router hands back on success"""
    provider: str
    model: str
    raw_tool_calls: list[dict]
    attempts: list[ProviderAttempt] = field(default_factory=list)
    text: Optional[str] = None


@dataclass
class CommandOptions:
    """Optional canvas context for execute_command"""
    selected_ids: tuple[str, ...] = ()
    current_color: Optional[str] = None
    timeout: Optional[float] = None


@dataclass
class CommandOutcome:
    """Final answer for one command"""
    ok: bool
    results: list[ExecutionResult] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None
    provider: Optional[str] = None
    classification: Optional[Classification] = None
    attempts: list[ProviderAttempt] = field(default_factory=list)
    duration_ms: float = 0.0

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results],
            "error_kind": self.error_kind.value if self.error_kind else None,
            "message": self.message,
            "provider": self.provider,
            "classification": self.classification.value if self.classification else None,
            "attempts": [
                {
                    "provider": a.provider,
                    "outcome": a.outcome,
                    "error_kind": a.error_kind.value if a.error_kind else None,
                }
                for a in self.attempts
            ],
            "duration_ms": round(self.duration_ms, 1),
        }
