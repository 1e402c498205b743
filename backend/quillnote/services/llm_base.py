"""
Quillnote Backend — Abstract LLM Service Interface
====================================================

What:  Base class for the summarization providers (OpenAI, Gemini).
Why:   NoteService asks for "a summary of this text" and does not care which
       vendor answers. Swapping providers is a configuration change.
How:   LLMService.summarize() owns the shared flow (configuration check,
       circuit breaker, error translation). Subclasses implement only
       _complete(), the single outbound call, decorated with llm_retry().

Error Handling Chain:
    Provider call fails → tenacity retries (attempts from settings)
    → All retries fail → circuit breaker records a failure
    → LLMServiceError (503) propagates to the global handler
    → Threshold reached → later calls raise CircuitBreakerOpenError instantly
"""

import logging
import time
import uuid
from abc import ABC, abstractmethod
from typing import Tuple, Type

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from quillnote.config import settings
from quillnote.exceptions import ConfigurationError, LLMServiceError
from quillnote.services.circuit_breaker import CircuitBreaker

logger = logging.getLogger(__name__)

SUMMARY_PROMPT = (
    "You are an assistant that summarizes notes.\n\n"
    "Provide:\n"
    "1) A one-line summary.\n"
    "2) 3 bullet points of key ideas.\n\n"
    "Note:\n"
    "{content}\n\n"
    "Return the summary as plain text."
)


def llm_retry(non_retryable: Tuple[Type[BaseException], ...] = ()):
    """
    Tenacity decorator shared by the provider implementations.

    Retries every exception except the ones listed in non_retryable
    (authentication and bad-request errors will not fix themselves).
    Wait: exponential from retry_min_wait up to retry_max_wait, plus 0-1s jitter.
    reraise=True hands the last provider exception to summarize().
    """
    return retry(
        retry=retry_if_not_exception_type(non_retryable),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            multiplier=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )


class LLMService(ABC):
    """
    Abstract summarization provider.

    Contract:
        - summarize() accepts note content and returns plain text ('' when the
          provider answered with nothing)
        - Provider-specific errors are wrapped in LLMServiceError
        - A missing API key raises ConfigurationError without any network call
    """

    provider: str = ""
    display_name: str = ""

    def __init__(self):
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
            name=self.provider,
        )

    @property
    @abstractmethod
    def api_key(self) -> str:
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        ...

    @property
    def is_configured(self) -> bool:
        key = self.api_key
        return bool(key) and not key.startswith("your_")

    def build_prompt(self, content: str) -> str:
        return SUMMARY_PROMPT.format(content=content)

    async def summarize(self, text: str) -> str:
        """
        Produce a summary of `text` through the provider.

        Flow:
            1. Refuse early if the provider has no API key
            2. Check circuit breaker → may raise CircuitBreakerOpenError
            3. Call _complete() (retried by tenacity)
            4. Record success/failure in the circuit breaker

        Raises:
            ConfigurationError: API key missing
            CircuitBreakerOpenError: too many recent failures
            LLMServiceError: provider failed after all retry attempts
        """
        if not self.is_configured:
            logger.error("%s summarization requested but no API key is configured", self.display_name)
            raise ConfigurationError(
                message=f"{self.display_name} API key not configured.",
                context={"provider": self.provider},
            )

        request_id = str(uuid.uuid4())[:8]
        self.circuit_breaker.can_execute()

        logger.info(
            "[%s] Requesting %s summary (model=%s, %d chars)",
            request_id,
            self.provider,
            self.model_name,
            len(text),
        )
        start_time = time.perf_counter()

        try:
            summary = await self._complete(self.build_prompt(text), request_id)
        except Exception as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] %s summarization failed: %s: %s",
                request_id,
                self.display_name,
                type(e).__name__,
                str(e),
            )
            retry_after = None
            if self.circuit_breaker.state == CircuitBreaker.OPEN:
                retry_after = self.circuit_breaker.recovery_timeout
            raise LLMServiceError(
                message="Failed to summarize note. Please try again later.",
                retry_after=retry_after,
                context={
                    "request_id": request_id,
                    "provider": self.provider,
                    "error_type": type(e).__name__,
                },
            ) from e

        self.circuit_breaker.record_success()
        logger.info(
            "[%s] %s summary completed in %.0fms, %d chars",
            request_id,
            self.provider,
            (time.perf_counter() - start_time) * 1000,
            len(summary),
        )
        return summary

    @abstractmethod
    async def _complete(self, prompt: str, request_id: str) -> str:
        """Single outbound call: send the prompt, return the stripped reply text."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Lightweight connectivity test (lists models, no token cost).
        Returns True if the provider is reachable and the key is accepted.
        """
        ...
