"""Model catalog entry entity."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

from router_chat.l1_entities.safe_parsing import parse_float, parse_int


class ModelDescriptor(BaseModel):
    """One entry of the aggregator's model catalog. Prices are per token."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    prompt_price: float | None = None
    completion_price: float | None = None
    context_length: int | None = None

    @classmethod
    def from_api(cls, entry: dict[str, Any]) -> ModelDescriptor:
        """Build from an OpenRouter/VseGPT ``/models`` item; pricing may be str, number, or absent."""
        model_id = str(entry['id'])
        pricing = entry.get('pricing')
        if not isinstance(pricing, dict):
            pricing = {}
        return cls(
            id=model_id,
            name=str(entry.get('name') or model_id),
            prompt_price=parse_float(pricing.get('prompt')),
            completion_price=parse_float(pricing.get('completion')),
            context_length=parse_int(entry.get('context_length')),
        )

    def cost_for(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Compute turn cost; missing prices count as zero."""
        return prompt_tokens * (self.prompt_price or 0.0) + completion_tokens * (self.completion_price or 0.0)
