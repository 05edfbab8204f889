"""Intent node - decides whether a message asks for a new roadmap."""

from skillbridge.agent.state import ChatState
from skillbridge.core.logging import get_logger

logger = get_logger(__name__)

# Questions about the current roadmap, not requests for a new one
QUESTION_PATTERNS = (
    "apa ini",
    "ini apa",
    "ini roadmap",
    "roadmap ini",
    "roadmap apa",
    "roadmapnya apa",
    "tentang apa",
    "what is this",
    "what roadmap",
    "this roadmap",
)

CREATE_KEYWORDS = (
    "buat",  # buat, buatkan, buatin
    "bikin",
    "create",
    "generate",
    "ingin belajar",
    "mau belajar",
    "want to learn",
    "cara belajar",
    "jalur belajar",
    "learning path",
    "ajari",
    "ajarkan",
    "teach me",
)

TOPIC_KEYWORDS = ("roadmap", "belajar")


def is_roadmap_request(message: str) -> bool:
    """True when the message asks to create a roadmap.

    Needs both a creation keyword and a mention of a roadmap or of learning
    ("belajar"); questions about an existing roadmap never match.
    """
    lower = message.lower()
    if any(pattern in lower for pattern in QUESTION_PATTERNS):
        return False

    has_create_intent = any(keyword in lower for keyword in CREATE_KEYWORDS)
    mentions_topic = any(keyword in lower for keyword in TOPIC_KEYWORDS)
    return has_create_intent and mentions_topic


async def intent_agent_node(state: ChatState) -> ChatState:
    message = state.get("raw_message", "")
    # Node chat panels only discuss the node they belong to
    wants_roadmap = state.get("node_id") is None and is_roadmap_request(message)
    logger.info("Intent classified", roadmap_request=wants_roadmap, message_preview=message[:50])
    state["is_roadmap_request"] = wants_roadmap
    return state


def route_by_intent(state: ChatState) -> str:
    return "planner_agent" if state.get("is_roadmap_request") else "chitchat_agent"
