"""Chat message entity — one immutable turn half, user or assistant."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal['user', 'assistant']


class ChatMessage(BaseModel):
    """A single message in the chat log."""

    model_config = ConfigDict(frozen=True)

    role: Role
    content: str
    model_id: str | None = None
    tokens: int | None = None
    cost: float | None = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def is_user(self) -> bool:
        return self.role == 'user'

    def to_export_dict(self) -> dict[str, Any]:
        """Export shape: ``{role, content, modelId, tokens?, cost?, timestamp}``."""
        data: dict[str, Any] = {
            'role': self.role,
            'content': self.content,
            'modelId': self.model_id,
        }
        if self.tokens is not None:
            data['tokens'] = self.tokens
        if self.cost is not None:
            data['cost'] = self.cost
        data['timestamp'] = self.timestamp.isoformat()
        return data
