from abc import ABC, abstractmethod
from typing import Optional


class ProviderCallError(Exception):
    """A single provider call failed; subclasses classify why."""

    def __init__(self, provider: str, message: str, status: Optional[int] = None):
        super().__init__(f"{provider}: {message}")
        self.provider = provider
        self.message = message
        self.status = status


class UnauthenticatedError(ProviderCallError):
    pass


class RateLimitedError(ProviderCallError):
    pass


class MalformedResponseError(ProviderCallError):
    pass


class TransportError(ProviderCallError):
    pass


class ProviderError(ProviderCallError):
    pass


class AIProvider(ABC):
    name = "provider"

    def __init__(self, api_key: Optional[str] = None, timeout: float = 30.0):
        self.api_key = api_key
        self.timeout = timeout

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _require_key(self) -> str:
        if not self.api_key:
            raise UnauthenticatedError(self.name, "API key not configured")
        return self.api_key

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Perform exactly one call and return the provider's raw text.

        Raises a ProviderCallError subclass on any failure.
        """


def classify_status(provider: str, status: int, message: str) -> ProviderCallError:
    """Map a non-2xx HTTP status onto the error taxonomy."""
    if status in (401, 403):
        return UnauthenticatedError(provider, message, status)
    if status == 429:
        return RateLimitedError(provider, message, status)
    return ProviderError(provider, message, status)


def error_message(response, default: str) -> str:
    """Pull a human-readable message out of an error body, whatever its shape."""
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
    return default
