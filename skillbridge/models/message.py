"""Chat message model."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from skillbridge.core.database import Base


class ChatMessage(Base):
    """Chat message in a project's assistant panel or a node's chat panel."""

    __tablename__ = "chat_messages"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"))
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    role: Mapped[str] = mapped_column(String)  # user, assistant
    content: Mapped[str] = mapped_column(Text)
    message_type: Mapped[str] = mapped_column(String, default="chat")  # chat, roadmap

    # Set when the message belongs to a single node's chat panel
    node_id: Mapped[str | None] = mapped_column(String)

    timestamp: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
