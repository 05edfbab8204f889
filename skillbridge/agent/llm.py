"""LLM provider configuration."""

from functools import lru_cache

from langchain_openai import ChatOpenAI

from skillbridge.core.config import get_settings
from skillbridge.core.logging import get_logger

logger = get_logger(__name__)


class LLMResponseError(RuntimeError):
    """The model answered, but not in a shape the caller can use."""


def _base_kwargs() -> dict:
    settings = get_settings()
    kwargs: dict = {"timeout": settings.LLM_TIMEOUT_SECONDS}
    if settings.OPENAI_API_KEY:
        kwargs["api_key"] = settings.OPENAI_API_KEY
    if settings.OPENAI_API_BASE_URL:
        kwargs["base_url"] = settings.OPENAI_API_BASE_URL
    return kwargs


@lru_cache
def get_llm() -> ChatOpenAI:
    """Get configured LLM instance for roadmap and quiz generation."""
    settings = get_settings()
    logger.info("Initializing LLM", model=settings.OPENAI_MODEL)
    return ChatOpenAI(
        model=settings.OPENAI_MODEL,
        temperature=settings.OPENAI_TEMPERATURE,
        **_base_kwargs(),
    )


@lru_cache
def get_fast_llm() -> ChatOpenAI:
    """Get a cheaper, short-answer LLM for conversational replies."""
    settings = get_settings()
    model = settings.OPENAI_FAST_MODEL or settings.OPENAI_MODEL
    logger.info("Initializing fast LLM", model=model)
    return ChatOpenAI(model=model, temperature=0.5, max_tokens=512, **_base_kwargs())
