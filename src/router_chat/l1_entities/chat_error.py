"""L1 entity: single-slot categorical chat error state."""

from __future__ import annotations

import enum


class ChatError(enum.Enum):
    NONE = 'none'
    API_KEY_MISSING = 'api_key_missing'
    INVALID_API_KEY = 'invalid_api_key'
    NETWORK_ERROR = 'network_error'
    SERVER_ERROR = 'server_error'

    @property
    def message(self) -> str:
        """User-facing banner text. Empty for NONE."""
        return _MESSAGES[self]

    @property
    def severity(self) -> str:
        """'info' | 'warning' | 'error', drives banner styling."""
        return _SEVERITIES[self]


_MESSAGES = {
    ChatError.NONE: '',
    ChatError.API_KEY_MISSING: 'Please enter your API key in the settings',
    ChatError.INVALID_API_KEY: 'The API key is invalid',
    ChatError.NETWORK_ERROR: 'Network error. Check your internet connection',
    ChatError.SERVER_ERROR: 'Server error. Please try again later',
}

_SEVERITIES = {
    ChatError.NONE: 'info',
    ChatError.API_KEY_MISSING: 'warning',
    ChatError.INVALID_API_KEY: 'error',
    ChatError.NETWORK_ERROR: 'warning',
    ChatError.SERVER_ERROR: 'error',
}
