from __future__ import annotations

import pytest

from ai_providers.base import AIProvider
from config import RetryPolicy, Settings
from helpers import ScriptedProvider
from services.orchestrator import FallbackOrchestrator


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def make_orchestrator(sleeps):
    def _make(*providers: AIProvider, policy: RetryPolicy | None = None) -> FallbackOrchestrator:
        return FallbackOrchestrator(providers, policy or RetryPolicy(), sleep=sleeps.append)
    return _make


@pytest.fixture
def offline_orchestrator(make_orchestrator) -> FallbackOrchestrator:
    return make_orchestrator(
        ScriptedProvider("gemini", ["unused"], configured=False),
        ScriptedProvider("groq", ["unused"], configured=False),
        ScriptedProvider("huggingface", ["unused"], configured=False),
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database_url=f"sqlite:///{tmp_path / 'test.db'}", request_spacing=0.0)
