"""Settings defaults and builder — lives in L4, not domain."""

from __future__ import annotations

import copy
import os

from router_chat.l1_entities.config import DEFAULT_BASE_URL, ChatSettings
from router_chat.l3_interface_adapters.gateways.yaml_settings_store import deep_merge

API_KEY_ENV = 'ROUTER_CHAT_API_KEY'

SETTINGS_DEFAULTS: dict = {
    'api_key': None,
    'base_url': DEFAULT_BASE_URL,
    'model': 'openai/gpt-4o-mini',
    'max_tokens': 1024,
    'temperature': 0.7,
}


def build_settings(raw: dict) -> ChatSettings:
    """Merge *raw* user overrides on top of defaults, fill the key from env if unset, then validate."""
    merged = copy.deepcopy(SETTINGS_DEFAULTS)
    deep_merge(merged, raw)
    if not merged.get('api_key'):
        merged['api_key'] = os.environ.get(API_KEY_ENV) or None
    return ChatSettings.model_validate(merged)
