"""BlockPlane configuration.

This package contains:
- settings: Environment variables and configuration
- secrets: Unified secret access (API keys)
- errors: Custom exceptions and error codes
"""

from config.settings import settings
from config.errors import BlockPlaneError
from config.secrets import get_secret, get_openai_api_key, get_anthropic_api_key

__all__ = [
    "settings",
    "BlockPlaneError",
    "get_secret",
    "get_openai_api_key",
    "get_anthropic_api_key",
]
