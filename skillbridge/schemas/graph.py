"""Roadmap graph data model.

Node and edge payloads travel between the editor, the layout engine and the
database as camelCase JSON (``isCompleted``, ``edgeType`` ...). Unknown keys
written by the canvas (``selected``, ``measured`` ...) are kept so a save
round-trips them untouched.
"""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class NodeType(str, Enum):
    """Rendering shape of a node. Purely presentational."""

    INPUT = "input"
    DEFAULT = "default"
    OUTPUT = "output"
    DECISION = "decision"
    START_END = "start-end"
    PROJECT = "project"
    IMAGE = "image"
    CIRCLE = "circle"
    ROADMAP_CARD = "roadmapCard"


class NodeCategory(str, Enum):
    """Curriculum role of a node. Drives layout placement and styling."""

    CORE = "core"
    OPTIONAL = "optional"
    ADVANCED = "advanced"
    PROJECT = "project"


class EdgeType(str, Enum):
    MAIN = "main"
    BRANCH = "branch"
    OPTIONAL = "optional"


def _known_or(enum: type[Enum], value: Any, fallback: Any) -> Any:
    """Pass a known enum value through, replace anything else with ``fallback``."""
    if value is None or isinstance(value, enum):
        return value
    if isinstance(value, str) and value in {m.value for m in enum}:
        return value
    return fallback


def _str_id(value: Any) -> Any:
    return str(value) if isinstance(value, int) else value


class GraphModel(BaseModel):
    """Base for camelCase graph payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json(self) -> dict[str, Any]:
        """Serialize to the camelCase shape stored in roadmap JSON columns."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0


class NodeData(GraphModel):
    label: str = ""
    description: str = ""
    resources: list[str] = Field(default_factory=list)
    category: NodeCategory | None = None
    is_completed: bool = False
    quiz_passed: bool = False
    step_number: int | None = None
    is_start_node: bool = False

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_is_core(cls, value: Any) -> Any:
        return _known_or(NodeCategory, value, None)

    @property
    def is_done(self) -> bool:
        """A topic counts as done when toggled manually or passed by quiz."""
        return self.is_completed or self.quiz_passed


class Node(GraphModel):
    id: str
    type: NodeType = NodeType.DEFAULT
    position: Position = Field(default_factory=Position)
    data: NodeData = Field(default_factory=NodeData)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return _str_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_default(cls, value: Any) -> Any:
        # Stored graphs may carry shapes this version does not render
        return _known_or(NodeType, value, NodeType.DEFAULT)

    @property
    def category(self) -> NodeCategory:
        return self.data.category or NodeCategory.CORE

    @property
    def is_core(self) -> bool:
        return self.category == NodeCategory.CORE

    @property
    def is_done(self) -> bool:
        return self.data.is_done


class Edge(GraphModel):
    id: str
    source: str
    target: str
    edge_type: EdgeType | None = None
    label: str | None = None
    animated: bool = False
    style: dict[str, Any] | None = None

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return _str_id(value)

    @field_validator("edge_type", mode="before")
    @classmethod
    def _unknown_edge_type_is_main(cls, value: Any) -> Any:
        return _known_or(EdgeType, value, None)

    @property
    def effective_type(self) -> EdgeType:
        return self.edge_type or EdgeType.MAIN

    @property
    def is_main(self) -> bool:
        return self.effective_type == EdgeType.MAIN


# ============================================================================
# LLM roadmap shape (unpositioned)
# ============================================================================


class GeneratedNodeData(GraphModel):
    description: str = ""
    resources: list[str] = Field(default_factory=list)


class GeneratedNode(GraphModel):
    """Node as returned by the roadmap generator, before layout."""

    id: str
    label: str
    type: NodeType = NodeType.DEFAULT
    category: NodeCategory | None = None
    data: GeneratedNodeData = Field(default_factory=GeneratedNodeData)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Models sometimes emit numeric ids
        return _str_id(value)

    @field_validator("type", mode="before")
    @classmethod
    def _unknown_type_is_default(cls, value: Any) -> Any:
        return _known_or(NodeType, value, NodeType.DEFAULT)

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_is_core(cls, value: Any) -> Any:
        return _known_or(NodeCategory, value, None)

    @property
    def is_core(self) -> bool:
        return self.category in (None, NodeCategory.CORE)


class GeneratedEdge(GraphModel):
    id: str
    source: str
    target: str
    edge_type: EdgeType | None = None

    @field_validator("id", "source", "target", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return _str_id(value)

    @field_validator("edge_type", mode="before")
    @classmethod
    def _unknown_edge_type_is_main(cls, value: Any) -> Any:
        return _known_or(EdgeType, value, None)

    @property
    def is_main(self) -> bool:
        return self.edge_type in (None, EdgeType.MAIN)


class GeneratedRoadmap(GraphModel):
    title: str
    nodes: list[GeneratedNode]
    edges: list[GeneratedEdge] = Field(default_factory=list)


class ChatFallback(BaseModel):
    """Conversational reply used when the model did not return a usable roadmap."""

    type: Literal["chat"] = "chat"
    message: str
