# services/orchestrator.py
import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from ai_providers.base import AIProvider, ProviderCallError, RateLimitedError
from ai_providers.gemini_provider import GeminiProvider
from ai_providers.groq_provider import GroqProvider
from ai_providers.huggingface_provider import HuggingFaceProvider
from config import RetryPolicy, Settings

LOGGER = logging.getLogger(__name__)

# Priority order; new providers are appended, never inserted.
PROVIDER_ORDER = ("gemini", "groq", "huggingface")

SUCCESS = "success"
RATE_LIMITED = "rate-limited"
ERROR = "error"


@dataclass
class ProviderAttempt:
    provider: str
    retry: int
    outcome: str
    elapsed_ms: int
    error: Optional[str] = None


class AllProvidersFailed(Exception):
    def __init__(self, attempts: List[ProviderAttempt]):
        tried = ", ".join(f"{a.provider}#{a.retry}:{a.outcome}" for a in attempts) or "none configured"
        super().__init__(f"All providers failed ({tried})")
        self.attempts = attempts


class FallbackOrchestrator:
    """Try providers in order; only the primary one retries after a rate limit."""

    def __init__(self, providers: Sequence[AIProvider], retry_policy: RetryPolicy = None,
                 sleep: Callable[[float], None] = time.sleep):
        self.providers = list(providers)
        self.retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    @property
    def has_providers(self) -> bool:
        return any(p.is_configured() for p in self.providers)

    def _attempt(self, provider: AIProvider, prompt: str, retry: int, attempts: list) -> str:
        start = time.monotonic()
        try:
            text = provider.generate(prompt)
        except ProviderCallError as e:
            outcome = RATE_LIMITED if isinstance(e, RateLimitedError) else ERROR
            attempts.append(ProviderAttempt(provider.name, retry, outcome,
                                            int((time.monotonic() - start) * 1000), e.message))
            LOGGER.warning("Provider %s failed (retry %d, %s): %s",
                           provider.name, retry, type(e).__name__, e.message)
            raise
        elapsed = int((time.monotonic() - start) * 1000)
        attempts.append(ProviderAttempt(provider.name, retry, SUCCESS, elapsed))
        LOGGER.info("Provider %s answered in %d ms (retry %d)", provider.name, elapsed, retry)
        return text

    def generate(self, prompt: str) -> Tuple[str, str]:
        """Return (text, provider name) from the first provider that succeeds."""
        attempts: List[ProviderAttempt] = []
        policy = self.retry_policy

        for position, provider in enumerate(self.providers):
            if not provider.is_configured():
                LOGGER.debug("Skipping %s: no credentials", provider.name)
                continue

            retry = 0
            while True:
                try:
                    return self._attempt(provider, prompt, retry, attempts), provider.name
                except RateLimitedError:
                    if position == 0 and retry < policy.max_retries:
                        delay = policy.delay(retry)
                        LOGGER.info("Rate limit hit on %s, waiting %.1fs...", provider.name, delay)
                        self._sleep(delay)
                        retry += 1
                        continue
                    break
                except ProviderCallError:
                    break

        raise AllProvidersFailed(attempts)


def build_providers(settings: Settings) -> List[AIProvider]:
    """Instantiate every known provider in PROVIDER_ORDER."""
    by_name = {
        "gemini": GeminiProvider(settings.gemini_api_key, model=settings.gemini_model,
                                 base_url=settings.gemini_base_url,
                                 timeout=settings.provider_timeout),
        "groq": GroqProvider(settings.groq_api_key, model=settings.groq_model,
                             timeout=settings.provider_timeout),
        "huggingface": HuggingFaceProvider(settings.huggingface_api_key,
                                           model=settings.huggingface_model,
                                           base_url=settings.huggingface_base_url,
                                           timeout=settings.provider_timeout),
    }
    return [by_name[name] for name in PROVIDER_ORDER]


def build_orchestrator(settings: Settings, sleep: Callable[[float], None] = time.sleep) -> FallbackOrchestrator:
    return FallbackOrchestrator(build_providers(settings), settings.retry, sleep=sleep)
