"""LLM agent modules."""

from skillbridge.agent.graph import create_chat_graph, get_graph

__all__ = ["create_chat_graph", "get_graph"]
