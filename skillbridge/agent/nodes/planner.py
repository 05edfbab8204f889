"""Planner Agent Node - generates curriculum roadmaps."""

from typing import Any

from langchain_core.messages import HumanMessage, SystemMessage
from pydantic import ValidationError

from skillbridge.agent.llm import get_llm
from skillbridge.agent.llm_utils import message_text, parse_llm_json_response
from skillbridge.agent.state import ChatState
from skillbridge.core.logging import get_logger
from skillbridge.schemas.graph import ChatFallback, GeneratedRoadmap
from skillbridge.schemas.roadmap import RoadmapPreferences

logger = get_logger(__name__)

FALLBACK_MESSAGE = (
    "I couldn't turn that into a roadmap. Tell me what you want to learn, "
    "for example: \"Create a roadmap to learn React\"."
)

PLANNER_SYSTEM_PROMPT = """\
You are SkillBridge, an AI that creates structured learning roadmaps.

When given a learning goal, return a roadmap in this EXACT JSON format:
{
  "title": "Roadmap Title",
  "nodes": [
    {
      "id": "1",
      "label": "Step Name",
      "type": "input|default|output",
      "category": "core|optional|advanced|project",
      "data": {
        "description": "What to learn and why",
        "resources": ["https://resource1.com", "https://resource2.com"]
      }
    }
  ],
  "edges": [
    { "id": "e1-2", "source": "1", "target": "2", "edgeType": "main|branch" }
  ]
}

Rules:
- The first node is type "input" (starting point), the last core node is type "output"
- Core nodes form the main path, connected by "main" edges, beginner to advanced
- Optional, advanced and project nodes hang off exactly one core node via a "branch" edge
- 10-15 nodes in total
- Include real, well-known learning resources

If the message is not a learning goal, reply with:
{"type": "chat", "message": "<short helpful reply>"}

Return JSON only, no markdown."""


def _user_prompt(prompt: str, preferences: RoadmapPreferences) -> str:
    parts = [
        f"Learning goal: {prompt}",
        f"Learner level: {preferences.level}",
        f"Write titles and descriptions in {preferences.language}.",
    ]
    if preferences.focus:
        parts.append(f"Focus the roadmap on: {preferences.focus}")
    return "\n".join(parts)


def interpret_roadmap_reply(content: str) -> GeneratedRoadmap | ChatFallback:
    """Turn a raw model reply into a roadmap or a conversational fallback.

    A reply without a title or without a non-empty node list is not a
    roadmap; the model's own chat message is used when it sent one.
    """
    try:
        parsed: Any = parse_llm_json_response(content)
    except ValueError:
        # Plain prose: the model chose to talk rather than plan
        text = content.strip()
        return ChatFallback(message=text or FALLBACK_MESSAGE)

    if not isinstance(parsed, dict):
        return ChatFallback(message=FALLBACK_MESSAGE)

    if parsed.get("type") == "chat" and parsed.get("message"):
        return ChatFallback(message=str(parsed["message"]))

    nodes = parsed.get("nodes")
    if not parsed.get("title") or not isinstance(nodes, list) or not nodes:
        logger.warning("Roadmap reply missing title or nodes", keys=list(parsed.keys()))
        return ChatFallback(message=str(parsed.get("message") or FALLBACK_MESSAGE))

    try:
        return GeneratedRoadmap.model_validate(parsed)
    except ValidationError as e:
        logger.warning("Roadmap reply failed validation", errors=e.error_count())
        return ChatFallback(message=FALLBACK_MESSAGE)


async def generate_roadmap(
    prompt: str,
    preferences: RoadmapPreferences | None = None,
    llm: Any = None,
) -> GeneratedRoadmap | ChatFallback:
    """Ask the model for a roadmap for a learning goal."""
    preferences = preferences or RoadmapPreferences()
    llm = llm or get_llm()

    response = await llm.ainvoke(
        [
            SystemMessage(content=PLANNER_SYSTEM_PROMPT),
            HumanMessage(content=_user_prompt(prompt, preferences)),
        ]
    )
    result = interpret_roadmap_reply(message_text(response))

    if isinstance(result, GeneratedRoadmap):
        logger.info(
            "Roadmap generated",
            title=result.title,
            nodes=len(result.nodes),
            edges=len(result.edges),
        )
    else:
        logger.info("Roadmap request answered conversationally")
    return result


async def planner_agent_node(state: ChatState) -> ChatState:
    """Generate a roadmap for the message, or a chat reply when that fails."""
    message = state.get("raw_message", "")
    preferences = RoadmapPreferences.model_validate(state.get("preferences") or {})

    try:
        result = await generate_roadmap(message, preferences)
    except Exception as e:
        logger.error("Roadmap generation failed", error=str(e))
        result = ChatFallback(message=FALLBACK_MESSAGE)

    if isinstance(result, GeneratedRoadmap):
        state["roadmap"] = result.to_json()
        state["response"] = {
            "type": "roadmap",
            "content": f"Here is your roadmap: {result.title}",
        }
    else:
        state["roadmap"] = None
        state["response"] = {"type": "chat", "content": result.message}
    return state
