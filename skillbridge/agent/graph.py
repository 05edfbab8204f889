"""LangGraph chat graph definition."""

from langgraph.graph import END, StateGraph
from langgraph.graph.state import CompiledStateGraph

from skillbridge.agent.nodes import (
    chitchat_agent_node,
    intent_agent_node,
    planner_agent_node,
    route_by_intent,
)
from skillbridge.agent.state import ChatState
from skillbridge.core.logging import get_logger

logger = get_logger(__name__)


def create_chat_graph() -> CompiledStateGraph:
    """Create the chat workflow graph.

    Flow:
    1. intent_agent - Is this a request for a new roadmap?
    2. [conditional] -> planner_agent (roadmap request)
                     -> chitchat_agent (anything else)
    """
    workflow = StateGraph(ChatState)

    workflow.add_node("intent_agent", intent_agent_node)
    workflow.add_node("planner_agent", planner_agent_node)
    workflow.add_node("chitchat_agent", chitchat_agent_node)

    workflow.set_entry_point("intent_agent")

    workflow.add_conditional_edges(
        "intent_agent",
        route_by_intent,
        {
            "planner_agent": "planner_agent",
            "chitchat_agent": "chitchat_agent",
        },
    )

    workflow.add_edge("planner_agent", END)
    workflow.add_edge("chitchat_agent", END)

    return workflow.compile()


_graph = None


def get_graph() -> CompiledStateGraph:
    """Get or create the global graph instance."""
    global _graph
    if _graph is None:
        _graph = create_chat_graph()
        logger.info("Chat graph created")
    return _graph
