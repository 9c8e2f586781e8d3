"""Port: key-value settings store."""

from __future__ import annotations

from typing import Protocol

from router_chat.l1_entities.config import ChatSettings


class SettingsStore(Protocol):
    """Persistent chat settings."""

    @property
    def settings(self) -> ChatSettings:
        """Current settings snapshot."""
        ...

    def reload(self) -> ChatSettings:
        """Re-read settings from backing storage."""
        ...

    def set_model(self, model_id: str) -> None:
        """Persist the selected model id."""
        ...

    def update(self, **changes: object) -> ChatSettings:
        """Validate, apply and persist a partial update."""
        ...
