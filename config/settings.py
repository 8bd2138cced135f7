"""
Configuration settings for canvas-copilot
Loads environment variables and provides configuration access
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static connection details for one LLM provider"""
    name: str
    base_url: str
    model: str
    credential: str = ""

    @property
    def has_credential(self) -> bool:
        return bool(self.credential and self.credential.strip())


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment"""

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Supabase (canvas store)
    CANVAS_STORE: str = os.getenv("CANVAS_STORE", "supabase")  # supabase | memory
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # Groq (OpenAI-compatible function calling)
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    GROQ_BASE_URL: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")

    # Anthropic Claude
    CLAUDE_API_KEY: str = os.getenv("CLAUDE_API_KEY", "")
    CLAUDE_BASE_URL: str = os.getenv("CLAUDE_BASE_URL", "https://api.anthropic.com/v1")
    CLAUDE_MODEL: str = os.getenv("CLAUDE_MODEL", "claude-3-5-sonnet-20241022")

    # Google Gemini
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

    # Routing
    FAST_PATH_PROVIDER: str = os.getenv("FAST_PATH_PROVIDER", "groq")
    COMPLEX_PATH_PROVIDER: str = os.getenv("COMPLEX_PATH_PROVIDER", "groq")
    FALLBACK_PROVIDER: str = os.getenv("FALLBACK_PROVIDER", "claude")
    PROVIDER_TIMEOUT_SECONDS: float = float(os.getenv("PROVIDER_TIMEOUT_SECONDS", "10"))
    PROVIDER_MAX_TOKENS: int = int(os.getenv("PROVIDER_MAX_TOKENS", "1024"))

    # Rate limiting (fixed window, per provider)
    RATE_LIMIT_MAX_REQUESTS: int = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "60"))
    RATE_LIMIT_WINDOW_SECONDS: float = float(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))

    # Circuit breaker (per provider)
    CIRCUIT_BREAKER_ENABLED: bool = _env_bool("CIRCUIT_BREAKER_ENABLED", "true")
    CIRCUIT_BREAKER_THRESHOLD: int = int(os.getenv("CIRCUIT_BREAKER_THRESHOLD", "5"))
    CIRCUIT_BREAKER_COOLDOWN_SECONDS: float = float(os.getenv("CIRCUIT_BREAKER_COOLDOWN_SECONDS", "60"))

    # Batch execution
    BATCH_MAX_CONCURRENCY: int = int(os.getenv("BATCH_MAX_CONCURRENCY", "10"))
    BATCH_MAX_OBJECTS: int = int(os.getenv("BATCH_MAX_OBJECTS", "600"))
    BATCH_WARN_MS: int = int(os.getenv("BATCH_WARN_MS", "2000"))
    BATCH_EXECUTION_LOG_SIZE: int = int(os.getenv("BATCH_EXECUTION_LOG_SIZE", "500"))
    DEFAULT_COLOR: str = os.getenv("DEFAULT_COLOR", "#000000")

    @classmethod
    def provider_descriptors(cls) -> dict[str, ProviderDescriptor]:
        """Static descriptors for every provider this service knows how to call."""
        return {
            "groq": ProviderDescriptor(
                name="groq",
                base_url=cls.GROQ_BASE_URL,
                model=cls.GROQ_MODEL,
                credential=cls.GROQ_API_KEY,
            ),
            "claude": ProviderDescriptor(
                name="claude",
                base_url=cls.CLAUDE_BASE_URL,
                model=cls.CLAUDE_MODEL,
                credential=cls.CLAUDE_API_KEY,
            ),
            "gemini": ProviderDescriptor(
                name="gemini",
                base_url="",
                model=cls.GEMINI_MODEL,
                credential=cls.GEMINI_API_KEY,
            ),
        }

    @classmethod
    def validate(cls) -> list[str]:
        """Validate required settings, returns list of missing or malformed vars"""
        missing = []
        if cls.CANVAS_STORE == "supabase":
            if not cls.SUPABASE_URL:
                missing.append("SUPABASE_URL")
            if not cls.SUPABASE_KEY:
                missing.append("SUPABASE_KEY")

        descriptors = cls.provider_descriptors()
        for role in ("FAST_PATH_PROVIDER", "COMPLEX_PATH_PROVIDER", "FALLBACK_PROVIDER"):
            name = getattr(cls, role)
            if name and name not in descriptors:
                missing.append(f"{role} (unknown provider '{name}')")

        primary = descriptors.get(cls.FAST_PATH_PROVIDER)
        if primary and not primary.has_credential:
            missing.append(f"{cls.FAST_PATH_PROVIDER.upper()}_API_KEY")

        # Key format checks only catch obvious copy/paste mistakes
        if cls.GROQ_API_KEY and not cls.GROQ_API_KEY.startswith("gsk_"):
            missing.append("GROQ_API_KEY (expected format: gsk_...)")
        if cls.CLAUDE_API_KEY and not cls.CLAUDE_API_KEY.startswith("sk-ant-"):
            missing.append("CLAUDE_API_KEY (expected format: sk-ant-...)")
        return missing


settings = Settings()
