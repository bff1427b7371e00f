# ai_providers/groq_provider.py
from groq import (APIConnectionError, APIStatusError, AuthenticationError, Groq,
                  PermissionDeniedError, RateLimitError)

from .base import (AIProvider, MalformedResponseError, ProviderError,
                   RateLimitedError, TransportError, UnauthenticatedError)


class GroqProvider(AIProvider):
    name = "groq"

    def __init__(self, api_key=None, model: str = "llama-3.3-70b-versatile",
                 timeout: float = 30.0, client=None):
        super().__init__(api_key, timeout)
        self.model = model
        self._client = client

    def is_configured(self) -> bool:
        return bool(self.api_key) or self._client is not None

    def _get_client(self):
        if self._client is None:
            # retries belong to the orchestrator, so the SDK must not retry on its own
            self._client = Groq(api_key=self._require_key(), max_retries=0, timeout=self.timeout)
        return self._client

    def generate(self, prompt: str) -> str:
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=0.7,
                max_tokens=1024,
            )
        except (AuthenticationError, PermissionDeniedError) as e:
            raise UnauthenticatedError(self.name, str(e), e.status_code) from e
        except RateLimitError as e:
            raise RateLimitedError(self.name, str(e), e.status_code) from e
        except APIStatusError as e:
            raise ProviderError(self.name, str(e), e.status_code) from e
        except APIConnectionError as e:
            raise TransportError(self.name, str(e)) from e

        try:
            text = resp.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise MalformedResponseError(self.name, "Missing choices[0].message.content") from e
        if not text or not text.strip():
            raise MalformedResponseError(self.name, "Empty completion")
        return text
