"""
Quillnote Backend — Google Gemini Summarization Provider
==========================================================

What:  LLMService implementation backed by the google-generativeai SDK.
Who:   Selected with LLM_PROVIDER=gemini; called by NoteService.summarize_note().

The SDK keeps the API key in module-level state (genai.configure), so the
service configures it once in __init__ and reuses one GenerativeModel.
"""

import logging
import time

import google.generativeai as genai

from quillnote.config import settings
from quillnote.services.llm_base import LLMService, llm_retry

logger = logging.getLogger(__name__)


def _response_text(response) -> str:
    # .text raises ValueError when the candidate was blocked or empty
    try:
        text = response.text
    except ValueError:
        return ""
    return text.strip() if text else ""


class GeminiService(LLMService):
    """Summaries via Gemini generate_content."""

    provider = "gemini"
    display_name = "Gemini"

    def __init__(self):
        super().__init__()
        if self.is_configured:
            genai.configure(api_key=settings.gemini_api_key)

        self.model = genai.GenerativeModel(settings.gemini_model)

        logger.info(
            "GeminiService initialized with model=%s, "
            "circuit_breaker(threshold=%d, recovery=%ds)",
            settings.gemini_model,
            settings.cb_failure_threshold,
            settings.cb_recovery_timeout,
        )

    @property
    def api_key(self) -> str:
        return settings.gemini_api_key

    @property
    def model_name(self) -> str:
        return settings.gemini_model

    @llm_retry()
    async def _complete(self, prompt: str, request_id: str) -> str:
        start_time = time.time()
        try:
            response = await self.model.generate_content_async(
                prompt,
                generation_config={
                    "max_output_tokens": settings.summary_max_tokens,
                    "temperature": settings.summary_temperature,
                },
                request_options={"timeout": settings.llm_timeout},
            )
        except Exception as e:
            logger.warning(
                "[%s] Gemini API call failed after %.0fms: %s",
                request_id,
                (time.time() - start_time) * 1000,
                str(e),
            )
            raise

        return _response_text(response)

    async def health_check(self) -> bool:
        if not self.is_configured:
            return False
        try:
            model_names = [m.name for m in genai.list_models()]
            target = f"models/{settings.gemini_model}"
            if target not in model_names:
                # Reachable and authenticated; the model name may be an alias
                logger.warning("Configured model %s not found in available models", target)
            return True
        except Exception as e:
            logger.warning("Gemini health check failed: %s", str(e))
            return False
