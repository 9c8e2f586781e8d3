"""Port: OpenAI-compatible completion client."""

from __future__ import annotations

from typing import Any, Protocol

from router_chat.l1_entities.model_descriptor import ModelDescriptor


class CompletionClient(Protocol):
    """Abstract completion API. Responses stay loosely typed; reconciliation owns the schema."""

    async def get_models(self) -> list[ModelDescriptor]:
        """Fetch the model catalog."""
        ...

    async def get_balance(self) -> str:
        """Fetch the account balance, preformatted for display."""
        ...

    async def send_message(
        self,
        message: str,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        """Single-turn completion. Returns the raw JSON body; raises on transport or non-2xx."""
        ...

    def format_pricing(self, price: float) -> str:
        """Format a per-token price in the provider's customary unit."""
        ...

    def check_connectivity(self) -> tuple[bool, str]:
        """Pre-flight connectivity check. Returns (ok, error_message)."""
        ...
