"""Chitchat Agent Node - conversational replies in the project and node panels."""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from skillbridge.agent.llm import get_fast_llm
from skillbridge.agent.llm_utils import message_text
from skillbridge.agent.state import ChatState
from skillbridge.core.logging import get_logger

logger = get_logger(__name__)

CHITCHAT_SYSTEM_PROMPT = """\
You are the SkillBridge learning assistant.

- Be friendly and brief (2-4 sentences).
- Help the learner understand topics, pick resources and stay motivated.
- If they have no roadmap yet, suggest asking for one, e.g. "Create a roadmap to learn Python".
- Never invent course links you are unsure about."""

NODE_SYSTEM_PROMPT = """\
You are the SkillBridge tutor for one topic of a learning roadmap.

Topic: {label}
Description: {description}

Answer questions about this topic only, clearly and concisely, with a short
example when it helps."""

FALLBACK_REPLY = "Sorry, I can't answer right now. Please try again in a moment."


def _build_messages(state: ChatState) -> list[BaseMessage]:
    node_context = state.get("node_context")
    if node_context:
        system = NODE_SYSTEM_PROMPT.format(
            label=node_context.get("label", ""),
            description=node_context.get("description", ""),
        )
    else:
        system = CHITCHAT_SYSTEM_PROMPT

    messages: list[BaseMessage] = [SystemMessage(content=system)]
    for item in state.get("history") or []:
        if item.get("role") == "assistant":
            messages.append(AIMessage(content=item.get("content", "")))
        else:
            messages.append(HumanMessage(content=item.get("content", "")))
    messages.append(HumanMessage(content=state.get("raw_message", "")))
    return messages


async def chitchat_agent_node(state: ChatState) -> ChatState:
    """Answer a message without generating a roadmap."""
    try:
        response = await get_fast_llm().ainvoke(_build_messages(state))
        reply = message_text(response)
        logger.info("Chat reply generated", reply_preview=reply[:100])
    except Exception as e:
        logger.error("Chat generation failed", error=str(e))
        reply = FALLBACK_REPLY

    state["response"] = {"type": "chat", "content": reply}
    return state
