"""
Provider Router
Picks the provider for a command and falls back once when it can't be used.

The plan is always [primary, fallback]: at most two outbound calls, no
recursion. A local rate-limit rejection ends routing immediately.
"""
from config import settings
from services.providers import ProviderClient, build_clients
from utils import get_logger
from utils.errors import ErrorKind, ProviderError, ProviderUnavailableError, RateLimitExceededError
from .circuit_breaker import CircuitBreaker, get_circuit_breaker
from .rate_limiter import RateLimiter, get_rate_limiter
from .types import Classification, Command, ProviderAttempt, RouteResult

logger = get_logger(__name__)


class ProviderRouter:
    """Primary/fallback selection guarded by the rate limiter and circuit breaker"""

    def __init__(
        self,
        clients: dict[str, ProviderClient] | None = None,
        rate_limiter: RateLimiter | None = None,
        circuit_breaker: CircuitBreaker | None = None,
        defaults: dict[Classification, str] | None = None,
        fallback: str | None = None,
        timeout: float | None = None,
    ):
        self.clients = clients if clients is not None else build_clients()
        self.rate_limiter = rate_limiter or get_rate_limiter()
        self.circuit_breaker = circuit_breaker or get_circuit_breaker()
        self.defaults = defaults or {
            Classification.FAST_PATH: settings.FAST_PATH_PROVIDER,
            Classification.COMPLEX_PATH: settings.COMPLEX_PATH_PROVIDER,
        }
        self.fallback = fallback if fallback is not None else settings.FALLBACK_PROVIDER
        self.timeout = timeout

    def plan(self, classification: Classification) -> list[str]:
        primary = self.defaults[classification]
        plan = [primary]
        if self.fallback and self.fallback != primary:
            plan.append(self.fallback)
        return plan

    def route(self, classification: Classification, command: Command, tools: list[dict],
              timeout: float | None = None) -> RouteResult:
        """
        Call providers in plan order until one answers.

        Raises RateLimitExceededError when a provider's local window is full
        and ProviderUnavailableError when every step was skipped or failed.
        """
        attempts: list[ProviderAttempt] = []
        timeout = timeout if timeout is not None else self.timeout

        for position, provider in enumerate(self.plan(classification)):
            role = "primary" if position == 0 else "fallback"
            client = self.clients.get(provider)

            if client is None or not client.descriptor.has_credential:
                logger.warning(f"Skipping {role} {provider}: no credential configured")
                attempts.append(ProviderAttempt(provider, "missing_credential", ErrorKind.MISSING_CREDENTIAL))
                continue

            if self.circuit_breaker.is_open(provider):
                logger.warning(f"Skipping {role} {provider}: circuit open")
                attempts.append(ProviderAttempt(provider, "circuit_open", ErrorKind.PROVIDER_UNAVAILABLE))
                continue

            if not self.rate_limiter.check_rate(provider):
                # is_open may have admitted us as the half-open probe
                self.circuit_breaker.release_probe(provider)
                attempts.append(ProviderAttempt(provider, "rate_limited", ErrorKind.RATE_LIMITED))
                raise RateLimitExceededError(
                    provider, retry_after=self.rate_limiter.retry_after(provider), attempts=attempts
                )

            logger.info(f"Routing {classification.value} command to {role} {provider}")
            try:
                response = client.call(command, tools, timeout=timeout)
            except ProviderError as e:
                if e.kind == ErrorKind.REMOTE_RATE_LIMITED:
                    # The provider throttled us; surfaced like a local rejection
                    self.circuit_breaker.release_probe(provider)
                    attempts.append(ProviderAttempt(provider, "rate_limited", ErrorKind.REMOTE_RATE_LIMITED))
                    raise RateLimitExceededError(provider, attempts=attempts) from e
                if e.kind == ErrorKind.MISSING_CREDENTIAL:
                    self.circuit_breaker.release_probe(provider)
                    attempts.append(ProviderAttempt(provider, "missing_credential", e.kind))
                    continue
                self.circuit_breaker.record_failure(provider)
                logger.warning(f"{role} {provider} failed: {e.kind.value}")
                attempts.append(ProviderAttempt(provider, "failed", e.kind))
                continue
            except Exception:
                # A response the client couldn't parse; counts against the circuit like any failure
                logger.exception(f"{role} {provider} returned a response that could not be handled")
                self.circuit_breaker.record_failure(provider)
                attempts.append(ProviderAttempt(provider, "failed", ErrorKind.MALFORMED_PROVIDER_RESPONSE))
                continue

            self.circuit_breaker.record_success(provider)
            attempts.append(ProviderAttempt(provider, "success"))
            return RouteResult(
                provider=provider,
                model=response.model,
                raw_tool_calls=response.tool_calls,
                attempts=attempts,
                text=response.text,
            )

        raise ProviderUnavailableError(attempts, kind=self._exhaustion_kind(attempts))

    @staticmethod
    def _exhaustion_kind(attempts: list[ProviderAttempt]) -> ErrorKind:
        kinds = {a.error_kind for a in attempts}
        if kinds == {ErrorKind.MISSING_CREDENTIAL}:
            return ErrorKind.MISSING_CREDENTIAL
        if kinds == {ErrorKind.MALFORMED_PROVIDER_RESPONSE}:
            return ErrorKind.MALFORMED_PROVIDER_RESPONSE
        return ErrorKind.PROVIDER_UNAVAILABLE
