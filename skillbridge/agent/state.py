"""LangGraph chat state definition."""

from typing import Annotated, TypedDict


class ChatState(TypedDict, total=False):
    """State passed between the nodes of the chat graph."""

    # === Input ===
    raw_message: str
    user_id: int
    project_id: Annotated[int | None, "Project whose panel the message came from"]
    node_id: Annotated[str | None, "Set for a single node's chat panel"]
    node_context: Annotated[dict | None, "Label and description of that node"]
    preferences: Annotated[dict, "Roadmap preferences (level, language, focus)"]
    history: Annotated[list[dict], "Recent {role, content} pairs, oldest first"]

    # === Intent ===
    is_roadmap_request: bool

    # === Output ===
    roadmap: Annotated[dict | None, "Generated roadmap (unpositioned)"]
    response: Annotated[dict, "{type, content} reply for the user"]
