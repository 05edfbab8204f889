"""Agent nodes."""

from skillbridge.agent.nodes.chitchat import chitchat_agent_node
from skillbridge.agent.nodes.intent import intent_agent_node, route_by_intent
from skillbridge.agent.nodes.planner import planner_agent_node

__all__ = [
    "intent_agent_node",
    "route_by_intent",
    "planner_agent_node",
    "chitchat_agent_node",
]
