# ai_providers/gemini_provider.py
import requests

from .base import (AIProvider, MalformedResponseError, TransportError,
                   classify_status, error_message)

GEMINI_URL = "https://generativelanguage.googleapis.com/v1beta"

GENERATION_CONFIG = {
    "temperature": 0.7,
    "topK": 40,
    "topP": 0.95,
    "maxOutputTokens": 1024,
}


class GeminiProvider(AIProvider):
    name = "gemini"

    def __init__(self, api_key=None, model: str = "gemini-1.5-flash-latest",
                 base_url: str = GEMINI_URL, timeout: float = 30.0):
        super().__init__(api_key, timeout)
        self.model = model
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def generate(self, prompt: str) -> str:
        key = self._require_key()
        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": GENERATION_CONFIG,
        }
        try:
            # key travels in the query string, not a header
            r = requests.post(self.url, params={"key": key}, json=payload,
                              headers={"Content-Type": "application/json"},
                              timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(self.name, str(e)) from e

        if not r.ok:
            raise classify_status(self.name, r.status_code,
                                  error_message(r, r.reason or f"HTTP {r.status_code}"))

        try:
            data = r.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise MalformedResponseError(self.name, "Invalid API response") from e
        if not isinstance(text, str) or not text.strip():
            raise MalformedResponseError(self.name, "Invalid API response")
        return text
