import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
load_dotenv(dotenv_path=os.path.join(BASE_DIR, '.env'))


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw not in (None, '') else default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    return int(raw) if raw not in (None, '') else default


@dataclass(frozen=True)
class RetryPolicy:
    """Rate-limit retry schedule for the primary provider."""
    max_retries: int = 2
    base_delay: float = 2.0
    multiplier: float = 1.0

    def delay(self, retry_count: int) -> float:
        return self.base_delay * (retry_count + 1) * (self.multiplier ** retry_count)


@dataclass(frozen=True)
class Settings:
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash-latest"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    groq_api_key: Optional[str] = None
    groq_model: str = "llama-3.3-70b-versatile"

    huggingface_api_key: Optional[str] = None
    huggingface_model: str = "mistralai/Mistral-7B-Instruct-v0.2"
    huggingface_base_url: str = "https://api-inference.huggingface.co"

    provider_timeout: float = 30.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    request_spacing: float = 1.0

    max_text_length: int = 10000
    max_upload_bytes: int = 10 * 1024 * 1024
    database_url: str = "sqlite:///" + os.path.join(BASE_DIR, "runtime", "edubridge.db")
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY") or None,
            gemini_model=os.getenv("GEMINI_MODEL", cls.gemini_model),
            gemini_base_url=os.getenv("GEMINI_BASE_URL", cls.gemini_base_url),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", cls.groq_model),
            huggingface_api_key=os.getenv("HUGGINGFACE_API_KEY") or None,
            huggingface_model=os.getenv("HUGGINGFACE_MODEL", cls.huggingface_model),
            huggingface_base_url=os.getenv("HUGGINGFACE_BASE_URL", cls.huggingface_base_url),
            provider_timeout=_env_float("PROVIDER_TIMEOUT", cls.provider_timeout),
            retry=RetryPolicy(
                max_retries=_env_int("RETRY_MAX", 2),
                base_delay=_env_float("RETRY_BASE_DELAY", 2.0),
                multiplier=_env_float("RETRY_MULTIPLIER", 1.0),
            ),
            request_spacing=_env_float("REQUEST_SPACING", cls.request_spacing),
            max_text_length=_env_int("MAX_TEXT_LENGTH", cls.max_text_length),
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", cls.max_upload_bytes),
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
