"""
Error taxonomy shared by the provider clients, the canvas store and the orchestrator.

Callers reason over ErrorKind only. Raw transport detail stays in logs and in
`detail`, never in the user-visible message.
"""
from enum import Enum


class ErrorKind(Enum):
    # Command-level
    MISSING_CREDENTIAL = "missing_credential"
    RATE_LIMITED = "rate_limited"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    MALFORMED_PROVIDER_RESPONSE = "malformed_provider_response"
    INVALID_TOOL_CALL = "invalid_tool_call"
    CANVAS_NOT_FOUND = "canvas_not_found"

    # Per tool call
    UNKNOWN_TOOL = "unknown_tool"
    INVALID_TOOL_INPUT = "invalid_tool_input"
    OBJECT_NOT_FOUND = "object_not_found"
    BATCH_INSERT_FAILED = "batch_insert_failed"

    # Provider client
    AUTH_FAILED = "auth_failed"
    REMOTE_RATE_LIMITED = "remote_rate_limited"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"


USER_MESSAGES = {
    ErrorKind.MISSING_CREDENTIAL: "The AI assistant isn't configured yet. Please add an API key and try again.",
    ErrorKind.RATE_LIMITED: "Too many requests right now. Please wait a moment and try again.",
    ErrorKind.PROVIDER_UNAVAILABLE: "The AI assistant is temporarily unavailable. Please try again shortly.",
    ErrorKind.MALFORMED_PROVIDER_RESPONSE: "The AI assistant returned something I couldn't understand. Please rephrase your command.",
    ErrorKind.INVALID_TOOL_CALL: "The AI assistant produced an invalid action, so nothing was changed. Please try again.",
    ErrorKind.CANVAS_NOT_FOUND: "That canvas doesn't exist.",
    ErrorKind.UNKNOWN_TOOL: "That action isn't supported.",
    ErrorKind.INVALID_TOOL_INPUT: "That action was missing some details.",
    ErrorKind.OBJECT_NOT_FOUND: "That object no longer exists on the canvas.",
    ErrorKind.BATCH_INSERT_FAILED: "The new objects couldn't be created, so none were added.",
    ErrorKind.AUTH_FAILED: "The AI assistant rejected its credentials.",
    ErrorKind.REMOTE_RATE_LIMITED: "Too many requests right now. Please wait a moment and try again.",
    ErrorKind.TIMEOUT: "The AI assistant took too long to respond.",
    ErrorKind.PROVIDER_ERROR: "The AI assistant is temporarily unavailable. Please try again shortly.",
}


def user_message(kind: ErrorKind) -> str:
    """User-facing text for an error kind"""
    return USER_MESSAGES.get(kind, "Something went wrong. Please try again.")


class OrchestrationError(Exception):
    """Base error; every subclass carries an ErrorKind"""
    kind: ErrorKind = ErrorKind.PROVIDER_ERROR

    def __init__(self, message: str = "", kind: ErrorKind | None = None, detail: str | None = None):
        if kind is not None:
            self.kind = kind
        self.detail = detail
        super().__init__(message or self.kind.value)


class ProviderError(OrchestrationError):
    """Raised by a provider client; kind is one of the provider taxonomy values"""

    def __init__(self, provider: str, kind: ErrorKind, message: str = "", detail: str | None = None):
        self.provider = provider
        super().__init__(message or f"{provider}: {kind.value}", kind=kind, detail=detail)


class RateLimitExceededError(OrchestrationError):
    """Raised when a provider's local request window is full"""
    kind = ErrorKind.RATE_LIMITED

    def __init__(self, provider: str, retry_after: float | None = None, attempts: list | None = None):
        self.provider = provider
        self.retry_after = retry_after
        self.attempts = attempts or []
        super().__init__(f"Rate limit reached for {provider}")


class ProviderUnavailableError(OrchestrationError):
    """Raised when every routed provider was skipped or failed"""
    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, attempts: list, kind: ErrorKind | None = None):
        self.attempts = attempts
        summary = ", ".join(f"{a.provider}={a.outcome}" for a in attempts) or "no providers"
        super().__init__(f"All providers exhausted ({summary})", kind=kind)


class ToolCallValidationError(OrchestrationError):
    """Structural problem with a provider-returned tool call"""
    kind = ErrorKind.INVALID_TOOL_CALL

    def __init__(self, message: str, missing_fields: list[str] | None = None,
                 parse_error: str | None = None, raw: object = None):
        self.missing_fields = missing_fields or []
        self.parse_error = parse_error
        self.raw = raw
        super().__init__(message)


class CanvasNotFoundError(OrchestrationError):
    kind = ErrorKind.CANVAS_NOT_FOUND

    def __init__(self, canvas_id: str):
        self.canvas_id = canvas_id
        super().__init__(f"Canvas '{canvas_id}' not found")


class ObjectNotFoundError(OrchestrationError):
    kind = ErrorKind.OBJECT_NOT_FOUND

    def __init__(self, object_id):
        self.object_id = object_id
        super().__init__(f"Object '{object_id}' not found")


class BatchInsertError(OrchestrationError):
    """Atomic multi-insert rejected; `index` points at the offending attribute set when known"""
    kind = ErrorKind.BATCH_INSERT_FAILED

    def __init__(self, reason: str, index: int | None = None):
        self.reason = reason
        self.index = index
        where = f" at index {index}" if index is not None else ""
        super().__init__(f"Batch insert failed{where}: {reason}")


class UnknownToolError(OrchestrationError):
    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class InvalidToolInputError(OrchestrationError):
    """Tool input failed its per-tool decoding at execution time"""
    kind = ErrorKind.INVALID_TOOL_INPUT
