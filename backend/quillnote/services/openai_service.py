"""
Quillnote Backend — OpenAI Summarization Provider
===================================================

What:  LLMService implementation using the official `openai` async SDK
       (chat completions, single user message).
Who:   Default provider (LLM_PROVIDER=openai).

The SDK's own retry loop is disabled (max_retries=0) so tenacity and the
circuit breaker see every failed attempt.
"""

import logging
import time
from typing import Optional

from openai import (
    AsyncOpenAI,
    AuthenticationError,
    BadRequestError,
    NotFoundError as OpenAINotFoundError,
    PermissionDeniedError,
)

from quillnote.config import settings
from quillnote.services.llm_base import LLMService, llm_retry

logger = logging.getLogger(__name__)

# Client errors that another attempt cannot fix
NON_RETRYABLE_ERRORS = (
    AuthenticationError,
    BadRequestError,
    PermissionDeniedError,
    OpenAINotFoundError,
)


class OpenAIService(LLMService):
    """Summaries via OpenAI chat completions."""

    provider = "openai"
    display_name = "OpenAI"

    def __init__(self):
        super().__init__()
        # AsyncOpenAI refuses to construct without a key; summarize() reports
        # the missing key as a ConfigurationError instead
        self.client: Optional[AsyncOpenAI] = None
        if self.is_configured:
            self.client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.llm_timeout,
                max_retries=0,
            )

        logger.info(
            "OpenAIService initialized with model=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            settings.openai_model,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    @property
    def api_key(self) -> str:
        return settings.openai_api_key

    @property
    def model_name(self) -> str:
        return settings.openai_model

    @llm_retry(non_retryable=NON_RETRYABLE_ERRORS)
    async def _complete(self, prompt: str, request_id: str) -> str:
        start_time = time.time()
        try:
            response = await self.client.chat.completions.create(
                model=settings.openai_model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=settings.summary_max_tokens,
                temperature=settings.summary_temperature,
            )
        except Exception as e:
            logger.warning(
                "[%s] OpenAI API call failed after %.0fms: %s",
                request_id,
                (time.time() - start_time) * 1000,
                str(e),
            )
            raise

        if not response.choices:
            return ""
        content = response.choices[0].message.content
        return content.strip() if content else ""

    async def health_check(self) -> bool:
        if self.client is None:
            return False
        try:
            await self.client.models.list()
            return True
        except Exception as e:
            logger.warning("OpenAI health check failed: %s", str(e))
            return False
