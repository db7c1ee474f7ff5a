"""Insight session state machine for BlockPlane.

One session backs one material's insight box. It owns the static/AI
mode toggle and the AI generation status:

    idle --generate--> loading --ok--> idle
                               --fail--> error --retry--> loading

A generate request while loading is suppressed. Switching to static
mode or closing the session cancels the in-flight request and returns
to idle. Nothing is retried automatically.
"""

import asyncio
from enum import Enum
from typing import Optional

import structlog

from models.insight import MaterialInsightInput
from services.insight_cache import InMemoryInsightCache, InsightCache, build_cache_key
from services.insight_providers import InsightProvider, get_insight_provider
from services.static_insight import build_static_copy

logger = structlog.get_logger(__name__)

AI_UNAVAILABLE_MESSAGE = "AI insight unavailable right now."


class InsightMode(str, Enum):
    STATIC = "static"
    AI = "ai"


class InsightStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


class InsightSession:
    """Static/AI insight state for a single material.

    Attributes:
        mode: Current display mode.
        status: AI generation status.
        error: User-facing error message, set only in the error state.
        ai_content: Text generated during this session.
        cached_content: Text read from, or written to, the cache.
    """

    def __init__(
        self,
        data: MaterialInsightInput,
        provider: Optional[InsightProvider] = None,
        cache: Optional[InsightCache] = None,
        static_insight: Optional[str] = None,
    ):
        """Initialize InsightSession.

        Args:
            data: Material and scores the insight is about.
            provider: AI provider (default: resolved from settings).
            cache: Insight cache (default: in-memory).
            static_insight: Static text overriding the generated one-line summary.
        """
        self.data = data
        self.provider = provider or get_insight_provider()
        self.cache = cache if cache is not None else InMemoryInsightCache()
        self._static_insight = static_insight

        self.mode = InsightMode.STATIC
        self.status = InsightStatus.IDLE
        self.error: Optional[str] = None
        self.ai_content: Optional[str] = None
        self.cached_content: Optional[str] = None
        self.closed = False

        self._task: Optional[asyncio.Task] = None

    # =========================================================================
    # Derived text
    # =========================================================================

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.data.material_id, self.data.lis, self.data.ris, self.data.cpi)

    @property
    def static_copy(self) -> str:
        if self._static_insight:
            return self._static_insight
        return build_static_copy(
            self.data.material_name,
            self.data.lis,
            self.data.ris,
            self.data.cpi,
            self.data.context,
        )

    @property
    def ai_display_text(self) -> Optional[str]:
        """Latest generated text, else the cached text."""
        return self.ai_content or self.cached_content

    @property
    def display_text(self) -> str:
        """Text for the current mode; AI mode shows static copy until text exists."""
        if self.mode == InsightMode.AI and self.ai_display_text:
            return self.ai_display_text
        return self.static_copy

    @property
    def is_loading(self) -> bool:
        return self.status == InsightStatus.LOADING

    # =========================================================================
    # Transitions
    # =========================================================================

    async def load_cached(self) -> Optional[str]:
        """Read previously generated text for these scores from the cache."""
        if not self.data.material_id:
            return None
        try:
            stored = await self.cache.get(self.cache_key)
        except Exception as e:
            logger.warning("insight_cache_read_failed", key=self.cache_key, error=str(e))
            return None
        if stored:
            self.cached_content = stored
            logger.debug("insight_cache_hit", key=self.cache_key)
        return stored

    def set_mode(self, mode: InsightMode) -> None:
        """Switch display mode; leaving AI mode cancels any in-flight request."""
        mode = InsightMode(mode)
        if mode == InsightMode.STATIC:
            self.cancel()
        self.mode = mode

    def cancel(self) -> None:
        """Cancel the in-flight request, if any, and return to idle."""
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            logger.info("insight_generation_cancelled", material_id=self.data.material_id)
        if self.status == InsightStatus.LOADING:
            self.status = InsightStatus.IDLE

    def close(self) -> None:
        """Close the session; later generate calls are ignored."""
        self.cancel()
        self.closed = True

    async def generate(self) -> Optional[str]:
        """Request AI text for the material.

        Returns:
            The generated text, or None when the request was suppressed,
            cancelled, or failed. On failure ``status`` is error and
            ``error`` holds the user-facing message; earlier AI or cached
            text is kept.
        """
        if self.closed:
            logger.debug("insight_generate_ignored", reason="closed")
            return None
        if self.mode != InsightMode.AI:
            logger.debug("insight_generate_ignored", reason="static_mode")
            return None
        if self.status == InsightStatus.LOADING:
            logger.debug("insight_generate_suppressed", material_id=self.data.material_id)
            return None

        self.status = InsightStatus.LOADING
        self.error = None
        task = asyncio.ensure_future(self.provider.generate_material_insight(self.data))
        self._task = task

        try:
            result = await task
        except asyncio.CancelledError:
            if self._task is task:
                # Cancelled from outside the session
                self._task = None
                self.status = InsightStatus.IDLE
                raise
            return None
        except Exception as e:
            if self._task is not task:
                return None
            self._task = None
            logger.warning(
                "insight_generation_failed",
                material_id=self.data.material_id,
                provider=getattr(self.provider, "name", type(self.provider).__name__),
                error=str(e),
            )
            self.error = AI_UNAVAILABLE_MESSAGE
            self.status = InsightStatus.ERROR
            return None

        if self._task is not task:
            # Cancelled after the provider finished; discard
            return None
        self._task = None

        text = result.text
        self.ai_content = text
        self.cached_content = text
        self.status = InsightStatus.IDLE
        if self.data.material_id:
            try:
                await self.cache.set(self.cache_key, text)
            except Exception as e:
                logger.warning("insight_cache_write_failed", key=self.cache_key, error=str(e))

        logger.info(
            "insight_generated",
            material_id=self.data.material_id,
            provider=getattr(self.provider, "name", type(self.provider).__name__),
            content_length=len(text),
        )
        return text

    async def retry(self) -> Optional[str]:
        """Retry after a failure. Only valid from the error state."""
        if self.status != InsightStatus.ERROR:
            logger.debug("insight_retry_ignored", status=self.status.value)
            return None
        return await self.generate()
