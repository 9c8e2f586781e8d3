"""Chat settings Pydantic model — pure schema, no infrastructure defaults."""

from __future__ import annotations

from pydantic import BaseModel, field_validator

DEFAULT_BASE_URL = 'https://openrouter.ai/api/v1'


class ChatSettings(BaseModel):
    api_key: str | None = None
    base_url: str = DEFAULT_BASE_URL
    model: str
    max_tokens: int
    temperature: float

    @field_validator('max_tokens', mode='before')
    @classmethod
    def _truncate_max_tokens(cls, value: object) -> object:
        if isinstance(value, float):
            return int(value)
        return value

    @field_validator('base_url', mode='before')
    @classmethod
    def _blank_base_url_is_default(cls, value: object) -> object:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_BASE_URL
        return value

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key and self.api_key.strip())
