"""Pytest configuration and shared fixtures for BlockPlane tests."""

import os
import sys
import pytest
from unittest.mock import AsyncMock, MagicMock, patch


# ============================================================================
# Ensure local imports work (config/, models/, services/, utils/)
# ============================================================================
#
# Our codebase uses absolute imports like `from models...` / `from services...`.
# This guarantees that `functions/` is importable as the top-level module root.
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


# ============================================================================
# Firebase Mocks
# ============================================================================

@pytest.fixture
def mock_firestore_client():
    """Mock Firestore client with a single reusable document."""
    client = MagicMock()

    collection_mock = MagicMock()
    document_mock = MagicMock()

    # Set up chain: client.collection().document()
    client.collection.return_value = collection_mock
    collection_mock.document.return_value = document_mock

    document_mock.get = AsyncMock(return_value=MagicMock(
        exists=True,
        to_dict=lambda: {"text": "Cached insight text"}
    ))
    document_mock.set = AsyncMock()

    return client


# ============================================================================
# LLM Mocks
# ============================================================================

@pytest.fixture
def mock_chat_openai():
    """Mock ChatOpenAI client."""
    mock = AsyncMock()
    mock.ainvoke.return_value = MagicMock(
        content="Mock response content",
        response_metadata={"token_usage": {"total_tokens": 100}}
    )
    return mock


@pytest.fixture
def mock_llm_service(mock_chat_openai):
    """LLMService whose client is a mock."""
    from services.llm_service import LLMService

    service = LLMService(model="gpt-4o", api_key="test-api-key")
    service._client = mock_chat_openai
    return service


# ============================================================================
# Settings
# ============================================================================

@pytest.fixture(autouse=True)
def fresh_secrets():
    """Secret lookups are cached; start every test from the environment."""
    from config.secrets import clear_secret_cache

    clear_secret_cache()
    yield
    clear_secret_cache()


@pytest.fixture
def no_api_keys():
    """Run with no provider keys configured."""
    with patch("config.secrets.get_openai_api_key", return_value=None), \
            patch("config.secrets.get_anthropic_api_key", return_value=None):
        yield


@pytest.fixture
def openai_key_configured():
    """Run with AI_PROVIDER=openai and an OpenAI key present."""
    from config.settings import settings

    with patch.object(settings, "ai_provider", "openai"), \
            patch("config.secrets.get_openai_api_key", return_value="test-api-key"), \
            patch("config.secrets.get_anthropic_api_key", return_value=None):
        yield settings


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_materials():
    """Three parsed materials: timber, steel and hempcrete."""
    from models.material import parse_materials
    from tests.fixtures.mock_materials import SAMPLE_MATERIAL_RECORDS

    return parse_materials(SAMPLE_MATERIAL_RECORDS)


@pytest.fixture
def baseline_material():
    from tests.fixtures.mock_materials import BASELINE_CONCRETE

    return BASELINE_CONCRETE


@pytest.fixture
def alternative_material():
    from tests.fixtures.mock_materials import ALTERNATIVE_HEMPCRETE

    return ALTERNATIVE_HEMPCRETE


@pytest.fixture
def sample_insight_input():
    from models.insight import MaterialInsightInput

    return MaterialInsightInput(
        material_id="42",
        material_name="Hempcrete",
        lis=12.0,
        ris=78.0,
        cpi=9.1,
    )
