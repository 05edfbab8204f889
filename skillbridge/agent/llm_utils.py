"""LLM utility functions."""

import json
import re
from typing import Any

from skillbridge.core.logging import get_logger

logger = get_logger(__name__)


def _fix_trailing_commas(text: str) -> str:
    """Remove commas directly before a closing bracket or brace."""
    return re.sub(r",(\s*[}\]])", r"\1", text)


def _try_parse_json(text: str) -> dict[str, Any] | list[Any] | None:
    try:
        return json.loads(_fix_trailing_commas(text.strip()))
    except (json.JSONDecodeError, ValueError):
        return None


def _extract_from_code_block(text: str) -> str | None:
    """Content of the first fenced code block (```json, ``` ...), if any."""
    match = re.search(r"```(?:json|python|javascript|js|text)?\s*\n(.*?)\n\s*```", text, re.DOTALL | re.IGNORECASE)
    return match.group(1) if match else None


def _extract_json_substring(text: str) -> str | None:
    """First complete JSON object or array found by bracket counting.

    Brackets inside string literals are ignored.
    """
    start = next((i for i, ch in enumerate(text) if ch in "{["), -1)
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
            continue
        if ch == "\\":
            escaped = True
            continue
        if ch == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if ch in "{[":
            depth += 1
        elif ch in "}]":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def parse_llm_json_response(content: str | None) -> dict[str, Any] | list[Any]:
    """Parse JSON out of a model reply.

    Tries, in order: the whole reply, the first fenced code block, and the
    first bracket-balanced substring. Trailing commas are tolerated.

    Raises:
        ValueError: If content is empty or no strategy yields valid JSON
    """
    if not content:
        raise ValueError("Empty LLM response")

    result = _try_parse_json(content)
    if result is not None:
        return result

    code_block = _extract_from_code_block(content)
    if code_block:
        result = _try_parse_json(code_block)
        if result is not None:
            logger.debug("Parsed JSON from code block")
            return result

    substring = _extract_json_substring(content.strip())
    if substring:
        result = _try_parse_json(substring)
        if result is not None:
            logger.debug("Parsed JSON from mixed text")
            return result

    logger.error("Failed to parse LLM JSON response", content_preview=content[:200])
    raise ValueError("Failed to parse LLM JSON response: no valid JSON found")


def message_text(response: Any) -> str:
    """Text content of a chat model response."""
    content = getattr(response, "content", response)
    if isinstance(content, list):
        return "".join(part.get("text", "") if isinstance(part, dict) else str(part) for part in content)
    return str(content or "")
