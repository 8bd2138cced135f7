"""
Orchestration Module - Canvas command pipeline

    CommandClassifier → ProviderRouter (RateLimiter + CircuitBreaker) → ProviderClient
        → ToolCallValidator → BatchProcessor → ordered results → telemetry

- CommandClassifier: fast_path / complex_path triage
- RateLimiter: per-provider fixed window
- CircuitBreaker: per-provider closed / open / half_open
- ProviderRouter: primary + one fallback
- ToolCallValidator: structural checks on provider output
- BatchProcessor: atomic creation batch + individual calls, order preserved
"""
from utils.errors import (
    ErrorKind,
    OrchestrationError,
    ProviderError,
    RateLimitExceededError,
    ProviderUnavailableError,
    ToolCallValidationError,
    CanvasNotFoundError,
    ObjectNotFoundError,
    BatchInsertError,
    UnknownToolError,
    InvalidToolInputError,
    user_message,
)
from .types import (
    Classification,
    Command,
    ToolCall,
    ExecutionResult,
    ProviderAttempt,
    RouteResult,
    CommandOptions,
    CommandOutcome,
)
from .provider_state import CircuitStatus, CircuitState, RateWindow, ProviderStateRegistry, get_provider_state
from .classifier import CommandClassifier, get_classifier
from .rate_limiter import RateLimiter, get_rate_limiter
from .circuit_breaker import CircuitBreaker, get_circuit_breaker
from .validator import ToolCallValidator, get_validator
from .router import ProviderRouter
from .batch_processor import BatchProcessor
from .telemetry import CommandEvent, emit_command_event, add_listener, remove_listener
from .orchestrator import Orchestrator, get_orchestrator

__all__ = [
    # Main orchestrator
    "Orchestrator",
    "get_orchestrator",
    "Command",
    "CommandOptions",
    "CommandOutcome",
    # Classification
    "CommandClassifier",
    "Classification",
    "get_classifier",
    # Provider resilience
    "RateLimiter",
    "get_rate_limiter",
    "CircuitBreaker",
    "get_circuit_breaker",
    "CircuitStatus",
    "CircuitState",
    "RateWindow",
    "ProviderStateRegistry",
    "get_provider_state",
    "ProviderRouter",
    "ProviderAttempt",
    "RouteResult",
    # Execution
    "ToolCallValidator",
    "get_validator",
    "ToolCall",
    "BatchProcessor",
    "ExecutionResult",
    # Telemetry
    "CommandEvent",
    "emit_command_event",
    "add_listener",
    "remove_listener",
    # Errors
    "ErrorKind",
    "OrchestrationError",
    "ProviderError",
    "RateLimitExceededError",
    "ProviderUnavailableError",
    "ToolCallValidationError",
    "CanvasNotFoundError",
    "ObjectNotFoundError",
    "BatchInsertError",
    "UnknownToolError",
    "InvalidToolInputError",
    "user_message",
]
