from __future__ import annotations

import pytest

from ai_providers.base import (MalformedResponseError, ProviderError, RateLimitedError,
                               TransportError, UnauthenticatedError)
from config import RetryPolicy, Settings
from helpers import ScriptedProvider
from services.orchestrator import (PROVIDER_ORDER, AllProvidersFailed, build_orchestrator,
                                   build_providers)


def _limited(name: str) -> RateLimitedError:
    return RateLimitedError(name, "Too Many Requests", 429)


def test_primary_success_returns_text_and_name(make_orchestrator) -> None:
    gemini = ScriptedProvider("gemini", ["hello"])
    groq = ScriptedProvider("groq", ["unused"])
    text, name = make_orchestrator(gemini, groq).generate("prompt")
    assert (text, name) == ("hello", "gemini")
    assert groq.prompts == []


def test_primary_rate_limit_retries_twice_with_growing_delay(make_orchestrator, sleeps) -> None:
    gemini = ScriptedProvider("gemini", [_limited("gemini")])
    groq = ScriptedProvider("groq", ["from groq"])
    text, name = make_orchestrator(gemini, groq).generate("prompt")
    assert name == "groq"
    assert len(gemini.prompts) == 3
    assert sleeps == [2.0, 4.0]


def test_primary_recovers_after_one_rate_limit(make_orchestrator, sleeps) -> None:
    gemini = ScriptedProvider("gemini", [_limited("gemini"), "second time lucky"])
    text, name = make_orchestrator(gemini).generate("prompt")
    assert (text, name) == ("second time lucky", "gemini")
    assert sleeps == [2.0]


def test_custom_policy_multiplier(make_orchestrator, sleeps) -> None:
    gemini = ScriptedProvider("gemini", [_limited("gemini")])
    policy = RetryPolicy(max_retries=3, base_delay=1.0, multiplier=2.0)
    with pytest.raises(AllProvidersFailed):
        make_orchestrator(gemini, policy=policy).generate("prompt")
    assert sleeps == [1.0, 4.0, 12.0]
    assert sleeps == sorted(set(sleeps))


def test_secondary_rate_limit_is_not_retried(make_orchestrator, sleeps) -> None:
    gemini = ScriptedProvider("gemini", [ProviderError("gemini", "boom", 500)])
    groq = ScriptedProvider("groq", [_limited("groq")])
    hf = ScriptedProvider("huggingface", ["from hf"])
    text, name = make_orchestrator(gemini, groq, hf).generate("prompt")
    assert name == "huggingface"
    assert len(groq.prompts) == 1
    assert sleeps == []


def test_unconfigured_primary_keeps_retry_privilege_off_for_others(make_orchestrator, sleeps) -> None:
    gemini = ScriptedProvider("gemini", ["unused"], configured=False)
    groq = ScriptedProvider("groq", [_limited("groq")])
    with pytest.raises(AllProvidersFailed):
        make_orchestrator(gemini, groq).generate("prompt")
    assert gemini.prompts == []
    assert len(groq.prompts) == 1
    assert sleeps == []


@pytest.mark.parametrize("error", [
    UnauthenticatedError("gemini", "bad key", 401),
    MalformedResponseError("gemini", "Invalid API response"),
    TransportError("gemini", "connection reset"),
    ProviderError("gemini", "server error", 503),
])
def test_other_failures_advance_without_waiting(make_orchestrator, sleeps, error) -> None:
    gemini = ScriptedProvider("gemini", [error])
    groq = ScriptedProvider("groq", ["ok"])
    assert make_orchestrator(gemini, groq).generate("prompt") == ("ok", "groq")
    assert len(gemini.prompts) == 1
    assert sleeps == []


def test_all_failed_carries_attempts(make_orchestrator) -> None:
    gemini = ScriptedProvider("gemini", [TransportError("gemini", "down")])
    groq = ScriptedProvider("groq", [ProviderError("groq", "nope", 500)])
    with pytest.raises(AllProvidersFailed) as exc:
        make_orchestrator(gemini, groq).generate("prompt")
    attempts = exc.value.attempts
    assert [(a.provider, a.retry, a.outcome) for a in attempts] == [
        ("gemini", 0, "error"), ("groq", 0, "error"),
    ]
    assert attempts[0].error == "down"
    assert all(a.elapsed_ms >= 0 for a in attempts)


def test_no_configured_providers_fails_immediately(offline_orchestrator) -> None:
    assert offline_orchestrator.has_providers is False
    with pytest.raises(AllProvidersFailed) as exc:
        offline_orchestrator.generate("prompt")
    assert exc.value.attempts == []


def test_build_providers_follows_declared_order() -> None:
    providers = build_providers(Settings(groq_api_key="g"))
    assert tuple(p.name for p in providers) == PROVIDER_ORDER == ("gemini", "groq", "huggingface")
    assert [p.is_configured() for p in providers] == [False, True, False]


def test_build_orchestrator_uses_settings_retry() -> None:
    policy = RetryPolicy(max_retries=1, base_delay=0.5)
    orch = build_orchestrator(Settings(retry=policy))
    assert orch.retry_policy is policy
    assert orch.has_providers is False
