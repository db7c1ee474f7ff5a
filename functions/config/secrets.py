"""Unified secret access for BlockPlane Python functions.

Secrets are read from environment variables (populated by Firebase Secrets
in production and by `.env` / the shell locally).

Usage:
    from config.secrets import get_openai_api_key, get_secret

    api_key = get_openai_api_key()
    custom_secret = get_secret('MY_SECRET_NAME')
"""

import os
from functools import lru_cache
from typing import Optional

import structlog

logger = structlog.get_logger(__name__)


def get_secret(secret_id: str) -> Optional[str]:
    """
    Get a secret value from the environment.

    Args:
        secret_id: The name of the secret (e.g., 'OPENAI_API_KEY')

    Returns:
        The secret value, or None if not set (empty strings count as unset)
    """
    value = os.environ.get(secret_id) or None
    if value:
        logger.debug("secret_loaded", secret_id=secret_id)
    else:
        logger.debug("secret_missing", secret_id=secret_id)
    return value


# Cached accessors; secrets only change on redeploy

@lru_cache(maxsize=1)
def get_openai_api_key() -> Optional[str]:
    """Get OpenAI API key from secrets."""
    return get_secret('OPENAI_API_KEY')


@lru_cache(maxsize=1)
def get_anthropic_api_key() -> Optional[str]:
    """Get Anthropic API key (ANTHROPIC_API_KEY, falling back to CLAUDE_API_KEY)."""
    return get_secret('ANTHROPIC_API_KEY') or get_secret('CLAUDE_API_KEY')


def clear_secret_cache() -> None:
    """Clear cached secrets. Useful for testing or when secrets are rotated."""
    get_openai_api_key.cache_clear()
    get_anthropic_api_key.cache_clear()
