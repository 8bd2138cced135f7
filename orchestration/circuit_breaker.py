"""
Circuit Breaker
Stops sending traffic to a provider after repeated failures, then probes it
with a single request once the cool-down has passed.

    closed --(threshold failures)--> open --(cool-down)--> half_open
    half_open --success--> closed
    half_open --failure--> open
"""
from utils import get_logger
from config import settings
from .provider_state import CircuitStatus, ProviderStateRegistry, get_provider_state

logger = get_logger(__name__)


class CircuitBreaker:
    """Per-provider breaker over the shared provider state registry"""

    def __init__(
        self,
        state: ProviderStateRegistry | None = None,
        threshold: int | None = None,
        cooldown_seconds: float | None = None,
        enabled: bool | None = None,
    ):
        self.state = state or get_provider_state()
        self.threshold = threshold if threshold is not None else settings.CIRCUIT_BREAKER_THRESHOLD
        self.cooldown_seconds = (
            cooldown_seconds if cooldown_seconds is not None else settings.CIRCUIT_BREAKER_COOLDOWN_SECONDS
        )
        self.enabled = enabled if enabled is not None else settings.CIRCUIT_BREAKER_ENABLED

    def is_open(self, provider: str) -> bool:
        """
        True when calls to the provider should be short-circuited.

        After the cool-down the first caller to ask is admitted as the probe
        (state moves to half_open); everyone else keeps getting True until
        the probe reports back.
        """
        if not self.enabled:
            return False

        record = self.state.get(provider)
        with record.lock:
            circuit = record.circuit

            if circuit.status == CircuitStatus.CLOSED:
                return False

            if circuit.status == CircuitStatus.HALF_OPEN:
                if circuit.probe_in_flight:
                    return True
                circuit.probe_in_flight = True
                return False

            elapsed = self.state.clock() - (circuit.opened_at or 0.0)
            if elapsed >= self.cooldown_seconds:
                circuit.status = CircuitStatus.HALF_OPEN
                circuit.probe_in_flight = True
                logger.info(f"Circuit half-open for {provider}, admitting one probe")
                return False
            return True

    def record_success(self, provider: str) -> None:
        if not self.enabled:
            return

        record = self.state.get(provider)
        with record.lock:
            circuit = record.circuit
            if circuit.status == CircuitStatus.HALF_OPEN:
                logger.info(f"Circuit closed for {provider}, probe succeeded")
            circuit.status = CircuitStatus.CLOSED
            circuit.consecutive_failures = 0
            circuit.opened_at = None
            circuit.probe_in_flight = False

    def record_failure(self, provider: str) -> None:
        if not self.enabled:
            return

        record = self.state.get(provider)
        with record.lock:
            circuit = record.circuit
            now = self.state.clock()

            if circuit.status == CircuitStatus.HALF_OPEN:
                circuit.status = CircuitStatus.OPEN
                circuit.opened_at = now
                circuit.probe_in_flight = False
                logger.warning(f"Circuit re-opened for {provider}, probe failed")
                return

            if circuit.status == CircuitStatus.OPEN:
                # A call admitted before the circuit opened; nothing to transition
                return

            circuit.consecutive_failures += 1
            if circuit.consecutive_failures >= self.threshold:
                circuit.status = CircuitStatus.OPEN
                circuit.opened_at = now
                logger.warning(
                    f"Circuit opened for {provider} after {circuit.consecutive_failures} consecutive failures"
                )

    def release_probe(self, provider: str) -> None:
        """Hand the probe slot back when an admitted probe never made its call"""
        record = self.state.get(provider)
        with record.lock:
            if record.circuit.status == CircuitStatus.HALF_OPEN:
                record.circuit.probe_in_flight = False

    def reset(self, provider: str) -> None:
        """Operator reset to closed"""
        record = self.state.get(provider)
        with record.lock:
            circuit = record.circuit
            circuit.status = CircuitStatus.CLOSED
            circuit.consecutive_failures = 0
            circuit.opened_at = None
            circuit.probe_in_flight = False
        logger.info(f"Circuit reset for {provider}")

    def get_state(self, provider: str) -> dict:
        record = self.state.get(provider)
        with record.lock:
            circuit = record.circuit
            return {
                "status": circuit.status.value,
                "consecutive_failures": circuit.consecutive_failures,
                "opened_at": circuit.opened_at,
                "probe_in_flight": circuit.probe_in_flight,
                "threshold": self.threshold,
                "enabled": self.enabled,
            }


# Singleton instance
_circuit_breaker: CircuitBreaker | None = None


def get_circuit_breaker() -> CircuitBreaker:
    """Get or create circuit breaker singleton"""
    global _circuit_breaker
    if _circuit_breaker is None:
        _circuit_breaker = CircuitBreaker()
    return _circuit_breaker
