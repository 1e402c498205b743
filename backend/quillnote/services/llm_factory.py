"""
Quillnote Backend — LLM Provider Selection
============================================

One instance per provider per process: the instance owns the circuit
breaker, and a fresh instance per request would reset it.
"""

import logging
from typing import Dict, Optional, Type

from quillnote.config import settings
from quillnote.exceptions import ConfigurationError
from quillnote.services.gemini_service import GeminiService
from quillnote.services.llm_base import LLMService
from quillnote.services.openai_service import OpenAIService

logger = logging.getLogger(__name__)

PROVIDERS: Dict[str, Type[LLMService]] = {
    "openai": OpenAIService,
    "gemini": GeminiService,
}

_instances: Dict[str, LLMService] = {}


def get_llm_service(provider: Optional[str] = None) -> LLMService:
    """Return the shared service for `provider` (default: settings.llm_provider)."""
    name = (provider or settings.llm_provider).lower()
    service = _instances.get(name)
    if service is None:
        service_cls = PROVIDERS.get(name)
        if service_cls is None:
            raise ConfigurationError(
                message=f"Unknown summarization provider '{name}'.",
                context={"provider": name, "supported": sorted(PROVIDERS)},
            )
        service = service_cls()
        _instances[name] = service
        logger.info("Summarization provider ready: %s", name)
    return service


def reset_llm_services() -> None:
    """Drop cached instances (settings changed, or between tests)."""
    _instances.clear()
