"""Port: durable chat history store."""

from __future__ import annotations

from typing import Any, Protocol

from router_chat.l1_entities.chat_message import ChatMessage


class HistoryStore(Protocol):
    """Append-only message log with aggregate queries."""

    def get_messages(self) -> list[ChatMessage]:
        """All messages in insertion order."""
        ...

    def save_message(self, message: ChatMessage) -> None: ...

    def clear_history(self) -> None: ...

    def get_statistics(self) -> dict[str, Any]:
        """Aggregate counts: total messages, total tokens, per-model usage."""
        ...

    def get_daily_expenses(self, days: int) -> dict[str, Any]:
        """Raw ``{'daily': [{'date', 'cost'}], 'total'}`` for the last *days* days."""
        ...
