"""
Canvas Command Orchestrator
Runs one natural-language command end to end:

    classify → route to a provider → validate tool calls → execute as a batch → telemetry

Command-level failures (no canvas, no credentials, rate limited, every
provider down, malformed tool calls) come back as CommandOutcome(ok=False)
with an ErrorKind and a user-facing message. Per-call failures stay on
their own ExecutionResult.
"""
import time

from registry import TOOLS
from services.canvas_store import CanvasStore, get_canvas_store
from utils import get_logger
from utils.errors import (
    CanvasNotFoundError,
    ErrorKind,
    OrchestrationError,
    ProviderUnavailableError,
    RateLimitExceededError,
    ToolCallValidationError,
    user_message,
)
from .batch_processor import BatchProcessor
from .circuit_breaker import CircuitBreaker, get_circuit_breaker
from .classifier import CommandClassifier, get_classifier
from .rate_limiter import RateLimiter, get_rate_limiter
from .router import ProviderRouter
from .telemetry import CommandEvent, emit_command_event
from .types import Classification, Command, CommandOptions, CommandOutcome, ProviderAttempt
from .validator import ToolCallValidator, get_validator

logger = get_logger(__name__)


class Orchestrator:
    """
    Canvas command orchestrator.

    Collaborators are injectable; by default everything comes from the
    process-wide singletons and settings.
    """

    def __init__(
        self,
        store: CanvasStore | None = None,
        router: ProviderRouter | None = None,
        classifier: CommandClassifier | None = None,
        validator: ToolCallValidator | None = None,
        batch_processor: BatchProcessor | None = None,
        rate_limiter: RateLimiter | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        tools: list[dict] | None = None,
    ):
        self.store = store or get_canvas_store()
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self.circuit_breaker = circuit_breaker or get_circuit_breaker()
        self.router = router or ProviderRouter(
            rate_limiter=self.rate_limiter,
            circuit_breaker=self.circuit_breaker,
        )
        self.classifier = classifier or get_classifier()
        self.validator = validator or get_validator()
        self.batch_processor = batch_processor or BatchProcessor(self.store)
        self.tools = tools if tools is not None else TOOLS

    def execute_command(self, text: str, canvas_id: str, options: CommandOptions | None = None) -> CommandOutcome:
        """Run a command against a canvas; never raises for expected failures"""
        options = options or CommandOptions()
        start = time.monotonic()
        classification: Classification | None = None
        outcome: CommandOutcome

        try:
            # Fail fast before any network I/O
            if self.store.get_canvas(canvas_id) is None:
                raise CanvasNotFoundError(canvas_id)

            command = Command(
                text=text,
                canvas_id=canvas_id,
                selected_ids=tuple(options.selected_ids or ()),
                current_color=options.current_color,
            )

            classification = self.classifier.classify(text, command.selected_ids)

            if not self._has_credentialed_provider(classification):
                logger.error("No provider in the routing plan has a credential configured")
                outcome = self._failure(
                    ErrorKind.MISSING_CREDENTIAL,
                    classification=classification,
                    attempts=[ProviderAttempt(p, "missing_credential", ErrorKind.MISSING_CREDENTIAL)
                              for p in self.router.plan(classification)],
                )
            else:
                route = self.router.route(classification, command, self.tools, timeout=options.timeout)
                tool_calls = self.validator.validate_all(route.raw_tool_calls)
                results = self.batch_processor.execute(
                    tool_calls,
                    canvas_id,
                    {"selected_ids": command.selected_ids, "current_color": command.current_color},
                )
                outcome = CommandOutcome(
                    ok=True,
                    results=results,
                    provider=route.provider,
                    classification=classification,
                    attempts=route.attempts,
                    message=route.text if not tool_calls else None,
                )

        except RateLimitExceededError as e:
            logger.warning(f"Rate limit exceeded: {e}")
            outcome = self._failure(ErrorKind.RATE_LIMITED, classification=classification, attempts=e.attempts)
        except ProviderUnavailableError as e:
            logger.error(f"Routing failed: {e}")
            outcome = self._failure(e.kind, classification=classification, attempts=e.attempts)
        except ToolCallValidationError as e:
            logger.error(f"Provider returned invalid tool calls: {e} (missing={e.missing_fields}, parse_error={e.parse_error})")
            outcome = self._failure(ErrorKind.INVALID_TOOL_CALL, classification=classification)
        except OrchestrationError as e:
            logger.warning(f"Command failed: {e.kind.value}: {e}")
            outcome = self._failure(e.kind, classification=classification)
        except Exception:
            logger.exception("Orchestrator error")
            outcome = self._failure(ErrorKind.PROVIDER_ERROR, classification=classification)

        outcome.duration_ms = (time.monotonic() - start) * 1000
        self._emit(canvas_id, outcome)
        return outcome

    def _has_credentialed_provider(self, classification: Classification) -> bool:
        for provider in self.router.plan(classification):
            client = self.router.clients.get(provider)
            if client is not None and client.descriptor.has_credential:
                return True
        return False

    @staticmethod
    def _failure(kind: ErrorKind, classification=None, attempts=None) -> CommandOutcome:
        provider = attempts[-1].provider if attempts else None
        return CommandOutcome(
            ok=False,
            error_kind=kind,
            message=user_message(kind),
            provider=provider,
            classification=classification,
            attempts=list(attempts or []),
        )

    @staticmethod
    def _emit(canvas_id: str, outcome: CommandOutcome) -> None:
        failed = next((r for r in outcome.results if not r.ok), None)
        error_kind = outcome.error_kind or (failed.error_kind if failed else None)
        emit_command_event(CommandEvent(
            canvas_id=canvas_id,
            provider=outcome.provider,
            classification=outcome.classification.value if outcome.classification else None,
            tool_count=len(outcome.results),
            duration_ms=outcome.duration_ms,
            success=outcome.ok and failed is None,
            error_kind=error_kind.value if error_kind else None,
        ))

    def provider_status(self) -> dict:
        """Breaker and rate-window snapshot for every known provider"""
        status = {}
        for name, client in self.router.clients.items():
            status[name] = {
                "model": client.model,
                "has_credential": client.descriptor.has_credential,
                "circuit": self.circuit_breaker.get_state(name),
                "rate": self.rate_limiter.get_usage_stats(name),
            }
        return status

    def reset_provider(self, name: str) -> None:
        """Operator reset: close the circuit and clear the rate window"""
        self.circuit_breaker.reset(name)
        self.rate_limiter.reset(name)
        logger.info(f"Provider {name} reset by operator")


# Singleton instance
_orchestrator: Orchestrator | None = None


def get_orchestrator() -> Orchestrator:
    """Get or create orchestrator singleton"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = Orchestrator()
    return _orchestrator
