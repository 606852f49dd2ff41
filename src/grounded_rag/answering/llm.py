"""LLM initialisation — single place to swap providers.

Any OpenAI-compatible chat endpoint works:

1. **OpenRouter** (default) — ``LLM_BASE_URL=https://openrouter.ai/api/v1``
   and ``OPENAI_API_KEY`` set to the OpenRouter key.
2. **OpenAI cloud** — leave ``LLM_BASE_URL`` empty.
3. **Self-hosted vLLM / Ollama** — point ``LLM_BASE_URL`` at its ``/v1``
   endpoint; a dummy key is used when none is configured.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from langchain_openai import ChatOpenAI

if TYPE_CHECKING:
    from grounded_rag.config import Settings

logger = logging.getLogger(__name__)


def get_llm(settings: Settings) -> ChatOpenAI:
    """Return the configured chat model."""
    kwargs: dict = {
        "model": settings.llm_model_name,
        "temperature": settings.llm_temperature,
    }

    if settings.llm_base_url:
        logger.info("Using chat endpoint: %s (%s)", settings.llm_base_url, settings.llm_model_name)
        kwargs["base_url"] = settings.llm_base_url
        # Self-hosted endpoints don't need a real key; LangChain requires a non-empty value.
        kwargs["api_key"] = settings.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = settings.openai_api_key

    return ChatOpenAI(**kwargs)
