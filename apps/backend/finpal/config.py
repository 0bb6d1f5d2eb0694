import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


def _read_key_from_file(path: str | None) -> str | None:
    try:
        if path and os.path.isfile(path):
            with open(path, "r", encoding="utf-8") as f:
                return f.read().strip() or None
    except OSError:
        return None
    return None


def _env(name: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(name, default)


def _alias(primary: str, *fallbacks: str, default: str | None = None) -> str | None:
    """
    Get env var with fallback aliases. Primary name wins if present.
    Example: _alias("HF_API_KEY", "HUGGINGFACE_API_KEY", default=None)
    """
    val = _env(primary)
    if val:
        return val
    for fb in fallbacks:
        v = _env(fb)
        if v:
            return v
    return default


HF_API_KEY_FILE = os.getenv("HF_API_KEY_FILE", "/run/secrets/hf_api_key")

"""CORS allowlist (dev defaults cover the Expo web + metro bundler ports).
Read from env and split on commas; strip whitespace and any stray quotes per item.
"""
_cors_env = os.getenv(
    "CORS_ALLOW_ORIGINS",
    "http://localhost:8081,http://localhost:19006,http://127.0.0.1:8081",
)
ALLOW_ORIGINS = [
    o.strip().strip('"').strip("'")
    for o in (_cors_env.split(",") if _cors_env else [])
    if o and o.strip().strip('"').strip("'")
]


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./data/finpal.db"
    APP_ENV: str = os.getenv("APP_ENV", os.getenv("ENV", "dev"))  # dev | prod | test
    LOG_LEVEL: str = "INFO"

    # Text generation for the general chat path
    LLM_PROVIDER: str = "huggingface"  # "huggingface" | "none"
    HF_API_KEY: str | None = (
        _alias("HF_API_KEY", "HUGGINGFACE_API_KEY")
        or _read_key_from_file(HF_API_KEY_FILE)
    )
    HF_BASE_URL: str = "https://api-inference.huggingface.co/models"
    HF_TEXT_MODEL: str = "mistralai/Mixtral-8x7B-Instruct-v0.1"
    LLM_TIMEOUT_SEC: float = 8.0
    LLM_MAX_NEW_TOKENS: int = 200
    LLM_TEMPERATURE: float = 0.7
    LLM_TOP_P: float = 0.9

    # Chat agent
    CHAT_CONTEXT_TXN_LIMIT: int = 20
    CHAT_HISTORY_PAIRS: int = 10
    CHAT_MAX_MESSAGE_CHARS: int = 2000
    ADVICE_EMERGENCY_TIP: bool = True

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
