"""BlockPlane configuration settings.

Loads configuration from environment variables with sensible defaults.
Secrets (API keys) are resolved through config.secrets, not stored here.
"""

import os
from typing import Optional
from dataclasses import dataclass, field
from dotenv import load_dotenv

# Load .env file for non-secret configuration (provider choice, emulator hosts, etc.)
load_dotenv()


@dataclass
class Settings:
    """Application settings loaded from environment variables.

    Note: API keys should be accessed via the config.secrets module.
    The openai_api_key / anthropic_api_key properties delegate to it.
    """

    # AI insight configuration
    ai_provider: str = field(default_factory=lambda: os.getenv("AI_PROVIDER", "mock").lower())
    llm_model: str = field(default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o"))
    llm_temperature: float = field(default_factory=lambda: float(os.getenv("LLM_TEMPERATURE", "0.2")))
    claude_model: str = field(default_factory=lambda: os.getenv("CLAUDE_MODEL", "claude-3-5-sonnet-latest"))
    ai_timeout_seconds: float = field(default_factory=lambda: float(os.getenv("AI_TIMEOUT_SECONDS", "30")))

    # Cost-carbon analysis
    carbon_reference_price: float = field(default_factory=lambda: float(os.getenv("CARBON_REFERENCE_PRICE", "50")))

    # Export / sharing
    app_base_url: str = field(default_factory=lambda: os.getenv("APP_BASE_URL", "http://localhost:5173"))

    # Firebase Configuration
    firebase_project_id: Optional[str] = field(default_factory=lambda: os.getenv("FIREBASE_PROJECT_ID"))
    use_firebase_emulators: bool = field(default_factory=lambda: os.getenv("USE_FIREBASE_EMULATORS", "false").lower() == "true")
    insight_cache_collection: str = field(default_factory=lambda: os.getenv("INSIGHT_CACHE_COLLECTION", "insightCache"))

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))

    @property
    def openai_api_key(self) -> Optional[str]:
        """Get OpenAI API key from the secrets module."""
        from config.secrets import get_openai_api_key
        return get_openai_api_key()

    @property
    def anthropic_api_key(self) -> Optional[str]:
        """Get Anthropic API key from the secrets module."""
        from config.secrets import get_anthropic_api_key
        return get_anthropic_api_key()

    def validate(self) -> None:
        """Validate settings.

        Raises:
            ValueError: If the provider name or numeric settings are invalid.
        """
        if self.ai_provider not in ("mock", "openai", "claude"):
            raise ValueError(f"AI_PROVIDER must be one of mock, openai, claude (got {self.ai_provider!r})")
        if self.carbon_reference_price < 0:
            raise ValueError("CARBON_REFERENCE_PRICE must be non-negative")


# Singleton settings instance
settings = Settings()
