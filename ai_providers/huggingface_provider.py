# ai_providers/huggingface_provider.py
import requests

from .base import (AIProvider, MalformedResponseError, TransportError,
                   classify_status, error_message)

HF_URL = "https://api-inference.huggingface.co"


def _generated_text(data):
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        return data.get("generated_text")
    return None


class HuggingFaceProvider(AIProvider):
    name = "huggingface"

    def __init__(self, api_key=None, model: str = "mistralai/Mistral-7B-Instruct-v0.2",
                 base_url: str = HF_URL, timeout: float = 30.0):
        super().__init__(api_key, timeout)
        self.model = model
        self.base_url = base_url.rstrip("/")

    @property
    def url(self) -> str:
        return f"{self.base_url}/models/{self.model}"

    def generate(self, prompt: str) -> str:
        key = self._require_key()
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_new_tokens": 1024,
                "temperature": 0.7,
                "return_full_text": False,
            },
        }
        headers = {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}
        try:
            r = requests.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError(self.name, str(e)) from e

        if not r.ok:
            raise classify_status(self.name, r.status_code,
                                  error_message(r, r.reason or f"HTTP {r.status_code}"))

        try:
            text = _generated_text(r.json())
        except ValueError as e:
            raise MalformedResponseError(self.name, "Response is not JSON") from e
        if not isinstance(text, str) or not text.strip():
            raise MalformedResponseError(self.name, "Missing generated_text")
        return text
