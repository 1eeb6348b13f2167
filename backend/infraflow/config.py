import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

# Load .env from project root
load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://host.docker.internal:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "mistral:7b-instruct")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./infraflow.db")


@dataclass
class Settings:
    # Component detector cache
    detector_cache_size: int = int(os.getenv("INFRAFLOW_DETECTOR_CACHE_SIZE", "256"))
    detector_cache_key_length: int = int(os.getenv("INFRAFLOW_DETECTOR_CACHE_KEY_LENGTH", "500"))

    # Conversation history kept per parser
    history_limit: int = int(os.getenv("INFRAFLOW_HISTORY_LIMIT", "10"))

    # LLM modification path
    ollama_base_url: str = OLLAMA_BASE_URL
    ollama_model: str = OLLAMA_MODEL
    llm_timeout: int = int(os.getenv("INFRAFLOW_LLM_TIMEOUT", "120"))

    database_url: str = DATABASE_URL
    cors_origins: List[str] = field(
        default_factory=lambda: os.getenv(
            "INFRAFLOW_CORS_ORIGINS", "http://localhost:5173"
        ).split(",")
    )

    debug: bool = _env_bool("INFRAFLOW_DEBUG")


settings = Settings()


def debug_log(tag: str, message: str) -> None:
    """Print a tagged trace line when INFRAFLOW_DEBUG is on."""
    if settings.debug:
        print(f"[{tag}] {message}")
