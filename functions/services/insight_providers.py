"""AI insight providers for BlockPlane.

Providers are black-box text generators behind one async interface:

- ``mock``: deterministic placeholder text, no network
- ``openai``: LangChain ChatOpenAI through LLMService
- ``claude``: Anthropic Messages API over httpx

A provider without credentials raises InsightProviderUnavailableError
when asked to generate. Callers treat that like any other generation
failure and keep showing static text.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import httpx
import structlog

from config.errors import (
    ErrorCode,
    InsightProviderError,
    InsightProviderUnavailableError,
)
from config.settings import settings
from models.insight import InsightGenerationResult, MaterialInsightInput
from services.insight_prompts import SYSTEM_PROMPT, build_material_insight_prompt
from services.llm_service import LLMService
from utils.numeric import plain_number

logger = structlog.get_logger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"
INSIGHT_MAX_TOKENS = 400
INSIGHT_TEMPERATURE = 0.2


class InsightProvider(ABC):
    """Generates free-text insight for one material."""

    name: str = ""

    @property
    def model(self) -> Optional[str]:
        """Model identifier reported alongside generated text."""
        return None

    @abstractmethod
    async def generate_material_insight(self, data: MaterialInsightInput) -> InsightGenerationResult:
        """Generate insight text.

        Raises:
            InsightProviderError: If the provider cannot produce text.
        """


class MockInsightProvider(InsightProvider):
    """Echoes the input back as placeholder text."""

    name = "mock"

    @property
    def model(self) -> Optional[str]:
        return "mock"

    async def generate_material_insight(self, data: MaterialInsightInput) -> InsightGenerationResult:
        parts = []
        if data.material_name:
            parts.append(f"Material: {data.material_name}")
        if data.lis is not None:
            parts.append(f"LIS {plain_number(data.lis)}")
        if data.ris is not None:
            parts.append(f"RIS {plain_number(data.ris)}")
        if data.cpi is not None:
            parts.append(f"CPI {plain_number(data.cpi)}")
        if data.context is not None and data.context.region:
            parts.append(f"Region: {data.context.region}")
        summary = " • ".join(parts) if parts else "Mixed material data"
        return InsightGenerationResult(
            text=f"Mock insight: {summary}. Treat this as a placeholder until the backend AI route is configured."
        )


class OpenAIInsightProvider(InsightProvider):
    """OpenAI chat model via LLMService."""

    name = "openai"

    def __init__(self, llm_service: Optional[LLMService] = None, api_key: Optional[str] = None):
        """Initialize the provider.

        Args:
            llm_service: Optional pre-built LLMService (tests inject a mock).
            api_key: OpenAI API key (default from settings).
        """
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._llm_service = llm_service

    @property
    def llm_service(self) -> LLMService:
        """LLMService, created on first use so a missing key never builds a client."""
        if self._llm_service is None:
            self._llm_service = LLMService(api_key=self._api_key)
        return self._llm_service

    @property
    def model(self) -> Optional[str]:
        if self._llm_service is not None:
            return self._llm_service.model
        return settings.llm_model

    async def generate_material_insight(self, data: MaterialInsightInput) -> InsightGenerationResult:
        if not self._api_key and self._llm_service is None:
            raise InsightProviderUnavailableError("OpenAI", "Set OPENAI_API_KEY to enable it.")

        result = await self.llm_service.generate_with_system_prompt(
            SYSTEM_PROMPT,
            build_material_insight_prompt(data),
            max_tokens=INSIGHT_MAX_TOKENS,
        )
        return InsightGenerationResult(text=result["content"].strip())


class ClaudeInsightProvider(InsightProvider):
    """Anthropic Messages API client."""

    name = "claude"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """Initialize the provider.

        Args:
            api_key: Anthropic API key (default from settings).
            model: Claude model id (default from settings).
            timeout: Request timeout in seconds (default from settings).
            http_client: Optional shared AsyncClient; one is opened per call otherwise.
        """
        self._api_key = api_key if api_key is not None else settings.anthropic_api_key
        self._model = model or settings.claude_model
        self._timeout = timeout if timeout is not None else settings.ai_timeout_seconds
        self._http_client = http_client

    @property
    def model(self) -> Optional[str]:
        return self._model

    def _build_payload(self, data: MaterialInsightInput) -> Dict[str, Any]:
        return {
            "model": self._model,
            "max_tokens": INSIGHT_MAX_TOKENS,
            "temperature": INSIGHT_TEMPERATURE,
            "system": SYSTEM_PROMPT,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": build_material_insight_prompt(data)}],
                }
            ],
        }

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "content-type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
        }
        if self._http_client is not None:
            return await self._http_client.post(ANTHROPIC_MESSAGES_URL, json=payload, headers=headers)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(ANTHROPIC_MESSAGES_URL, json=payload, headers=headers)

    @staticmethod
    def _extract_text(body: Dict[str, Any]) -> str:
        """First text block of a messages response, else all blocks joined."""
        content = body.get("content") or []
        if not isinstance(content, list):
            return ""
        if content and isinstance(content[0], dict) and content[0].get("text"):
            return content[0]["text"]
        return "\n".join(
            block.get("text", "") for block in content if isinstance(block, dict)
        ).strip()

    async def generate_material_insight(self, data: MaterialInsightInput) -> InsightGenerationResult:
        if not self._api_key:
            raise InsightProviderUnavailableError("Claude", "Set ANTHROPIC_API_KEY to enable it.")

        try:
            response = await self._post(self._build_payload(data))
        except httpx.HTTPError as e:
            raise InsightProviderError(
                message=f"Claude request failed: {e}",
                provider=self.name,
                details={"original_error": str(e)},
            ) from e

        if response.status_code >= 400:
            logger.error(
                "claude_api_error",
                status_code=response.status_code,
                body=response.text[:500],
            )
            raise InsightProviderError(
                message=f"Claude API error: {response.status_code}",
                provider=self.name,
                code=ErrorCode.LLM_RATE_LIMIT if response.status_code == 429 else ErrorCode.AI_PROVIDER_ERROR,
                details={"status_code": response.status_code},
            )

        try:
            body = response.json()
        except ValueError as e:
            raise InsightProviderError(
                message="Claude returned a non-JSON response",
                provider=self.name,
                code=ErrorCode.AI_INVALID_RESPONSE,
            ) from e

        text = self._extract_text(body) if isinstance(body, dict) else ""
        if not text:
            raise InsightProviderError(
                message="Claude returned empty content",
                provider=self.name,
                code=ErrorCode.AI_INVALID_RESPONSE,
            )

        logger.info("claude_insight_generated", model=self._model, content_length=len(text))
        return InsightGenerationResult(text=text.strip())


# =============================================================================
# PROVIDER RESOLUTION
# =============================================================================


def resolve_provider_name(preference: Optional[str] = None) -> str:
    """Resolve the configured provider, falling back to mock without a key."""
    preference = (preference or settings.ai_provider or "mock").lower()
    if preference == "openai" and settings.openai_api_key:
        return "openai"
    if preference == "claude" and settings.anthropic_api_key:
        return "claude"
    if preference != "mock":
        logger.debug("insight_provider_fallback", preference=preference, resolved="mock")
    return "mock"


def get_insight_provider(name: Optional[str] = None) -> InsightProvider:
    """Get an insight provider.

    Args:
        name: Explicit provider name. When omitted, the configured
            preference is resolved (mock when its key is absent). An
            explicit name is honored even without a key; that provider
            then raises InsightProviderUnavailableError on use.

    Returns:
        InsightProvider instance; unknown names give the mock provider.
    """
    resolved = name.lower() if name else resolve_provider_name()
    if resolved == "openai":
        return OpenAIInsightProvider()
    if resolved == "claude":
        return ClaudeInsightProvider()
    return MockInsightProvider()
