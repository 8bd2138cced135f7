"""
Tests for primary/fallback provider routing.

Usage:
    pytest test_provider_routing.py
"""
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import pytest
import requests

from config import ProviderDescriptor
from conftest import FakeProviderClient
from orchestration.router import ProviderRouter
from orchestration.types import Classification, Command, ProviderAttempt
from registry import TOOLS
from services.providers import OpenAICompatibleClient
from utils.errors import ErrorKind, ProviderError, ProviderUnavailableError, RateLimitExceededError

COMMAND = Command(text="create a red circle", canvas_id="canvas-1")
CIRCLE_CALL = {"id": "call_1", "name": "create_shape", "input": {"type": "circle", "x": 10, "y": 10, "width": 40}}


def make_router(primary, fallback, rate_limiter, breaker, complex_provider=None):
    clients = {primary.name: primary, fallback.name: fallback}
    return ProviderRouter(
        clients=clients,
        rate_limiter=rate_limiter,
        circuit_breaker=breaker,
        defaults={
            Classification.FAST_PATH: primary.name,
            Classification.COMPLEX_PATH: complex_provider or primary.name,
        },
        fallback=fallback.name,
    )


def test_primary_success(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude")
    router = make_router(primary, fallback, rate_limiter, breaker)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "groq"
    assert route.raw_tool_calls == [CIRCLE_CALL]
    assert len(primary.calls) == 1
    assert fallback.calls == []
    assert [a.outcome for a in route.attempts] == ["success"]


def test_primary_failure_falls_back_once(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.PROVIDER_ERROR)])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert [(a.provider, a.outcome) for a in route.attempts] == [("groq", "failed"), ("claude", "success")]
    assert breaker.get_state("groq")["consecutive_failures"] == 1
    assert breaker.get_state("claude")["consecutive_failures"] == 0


@pytest.mark.parametrize("kind", [ErrorKind.TIMEOUT, ErrorKind.AUTH_FAILED, ErrorKind.MALFORMED_PROVIDER_RESPONSE])
def test_failure_kinds_that_trigger_fallback(rate_limiter, breaker, kind):
    primary = FakeProviderClient("groq", [ProviderError("groq", kind)])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)

    assert router.route(Classification.FAST_PATH, COMMAND, TOOLS).provider == "claude"


def test_open_circuit_skips_primary(rate_limiter, breaker):
    """Primary circuit forced open, fallback healthy: command succeeds via fallback"""
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(5):
        breaker.record_failure("groq")

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert primary.calls == []
    assert route.attempts[0].outcome == "circuit_open"


def test_primary_rate_limited_never_falls_back(rate_limiter, breaker):
    """Rate limiter at cap: rate_limited, and the fallback receives no call"""
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(60):
        rate_limiter.check_rate("groq")

    with pytest.raises(RateLimitExceededError) as exc:
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert exc.value.kind == ErrorKind.RATE_LIMITED
    assert primary.calls == []
    assert fallback.calls == []
    assert breaker.get_state("groq")["consecutive_failures"] == 0


def test_remote_rate_limit_is_terminal(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.REMOTE_RATE_LIMITED)])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)

    with pytest.raises(RateLimitExceededError):
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert fallback.calls == []
    assert breaker.get_state("groq")["consecutive_failures"] == 0


def test_exhaustion_names_every_attempt(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.TIMEOUT)])
    fallback = FakeProviderClient("claude", [ProviderError("claude", ErrorKind.PROVIDER_ERROR)])
    router = make_router(primary, fallback, rate_limiter, breaker)

    with pytest.raises(ProviderUnavailableError) as exc:
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert exc.value.kind == ErrorKind.PROVIDER_UNAVAILABLE
    assert [(a.provider, a.error_kind) for a in exc.value.attempts] == [
        ("groq", ErrorKind.TIMEOUT),
        ("claude", ErrorKind.PROVIDER_ERROR),
    ]
    assert "groq" in str(exc.value) and "claude" in str(exc.value)


def test_exhaustion_by_malformed_responses(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.MALFORMED_PROVIDER_RESPONSE)])
    fallback = FakeProviderClient("claude", [ProviderError("claude", ErrorKind.MALFORMED_PROVIDER_RESPONSE)])
    router = make_router(primary, fallback, rate_limiter, breaker)

    with pytest.raises(ProviderUnavailableError) as exc:
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)
    assert exc.value.kind == ErrorKind.MALFORMED_PROVIDER_RESPONSE


def test_missing_credential_is_skipped_without_breaker_failure(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]], credential="")
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert route.attempts[0].outcome == "missing_credential"
    assert breaker.get_state("groq")["consecutive_failures"] == 0


def test_complex_path_uses_its_own_default(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    gemini = FakeProviderClient("gemini", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker, complex_provider="gemini")
    router.clients["gemini"] = gemini

    route = router.route(Classification.COMPLEX_PATH, COMMAND, TOOLS)

    assert route.provider == "gemini"
    assert primary.calls == [] and fallback.calls == []


def test_fallback_same_as_primary_is_not_retried(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.PROVIDER_ERROR)])
    router = ProviderRouter(
        clients={"groq": primary},
        rate_limiter=rate_limiter,
        circuit_breaker=breaker,
        defaults={Classification.FAST_PATH: "groq", Classification.COMPLEX_PATH: "groq"},
        fallback="groq",
    )

    with pytest.raises(ProviderUnavailableError):
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)
    assert len(primary.calls) == 1


def test_half_open_probe_success_closes_circuit(rate_limiter, breaker, clock):
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(5):
        breaker.record_failure("groq")
    clock.advance(60)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "groq"
    assert breaker.get_state("groq")["status"] == "closed"


def test_half_open_probe_failure_reopens(rate_limiter, breaker, clock):
    primary = FakeProviderClient("groq", [ProviderError("groq", ErrorKind.TIMEOUT)])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(5):
        breaker.record_failure("groq")
    clock.advance(60)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert breaker.get_state("groq")["status"] == "open"
    assert breaker.get_state("groq")["opened_at"] == clock.now


def test_rate_limited_probe_gives_slot_back(rate_limiter, breaker, clock):
    primary = FakeProviderClient("groq", [[CIRCLE_CALL]])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(5):
        breaker.record_failure("groq")
    clock.advance(60)
    for _ in range(60):
        rate_limiter.check_rate("groq")

    with pytest.raises(RateLimitExceededError):
        router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    state = breaker.get_state("groq")
    assert state["status"] == "half_open"
    assert state["probe_in_flight"] is False



def test_unparseable_response_falls_back_and_counts_as_failure(rate_limiter, breaker):
    primary = FakeProviderClient("groq", [AttributeError("'str' object has no attribute 'get'")])
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert route.attempts[0] == ProviderAttempt("groq", "failed", ErrorKind.MALFORMED_PROVIDER_RESPONSE)
    assert breaker.get_state("groq")["consecutive_failures"] == 1


def test_unparseable_half_open_response_reopens_circuit(rate_limiter, breaker, clock, monkeypatch):
    """A garbled body on the half-open trial call must not leave the circuit stuck half-open"""
    monkeypatch.setattr(requests, "post", lambda *args, **kwargs: GarbledResponse())
    primary = OpenAICompatibleClient(
        ProviderDescriptor(name="groq", base_url="http://groq.test", model="llama", credential="gsk_test")
    )
    fallback = FakeProviderClient("claude", [[CIRCLE_CALL]])
    router = make_router(primary, fallback, rate_limiter, breaker)
    for _ in range(5):
        breaker.record_failure("groq")
    clock.advance(60)

    route = router.route(Classification.FAST_PATH, COMMAND, TOOLS)

    assert route.provider == "claude"
    assert len(fallback.calls) == 1
    state = breaker.get_state("groq")
    assert state["status"] == "open"
    assert state["probe_in_flight"] is False

    clock.advance(60)
    assert breaker.is_open("groq") is False


class GarbledResponse:
    status_code = 200
    text = "garbled"

    def json(self):
        return {"choices": [{"message": {"tool_calls": [{"id": "c1", "function": "create_shape"}]}}]}


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
