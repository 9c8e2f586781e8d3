"""Use case: map a send-path exception onto the closed ChatError set.

Best-effort only. The transport guarantees no structured error codes, so the
classification matches substrings of ``"<ExceptionType>: <message>"``.
"""

from __future__ import annotations

from router_chat.l1_entities.chat_error import ChatError

INVALID_KEY_MARKERS = (
    'INVALID_API_KEY',
    'InvalidApiKeyError',
    'AuthenticationError',
    'Invalid API key',
)

NETWORK_MARKERS = (
    'SocketException',
    'Connection refused',
    'Network is unreachable',
    'ConnectionError',
    'ConnectError',
    'Name or service not known',
    'Temporary failure in name resolution',
    'nodename nor servname provided',
    'APITimeoutError',
    'timed out',
)


def describe_error(exc: BaseException) -> str:
    return f'{type(exc).__name__}: {exc}'


def classify_error(exc: BaseException) -> ChatError:
    """Invalid-key markers win over network markers; everything else is SERVER_ERROR."""
    description = describe_error(exc)
    if any(marker in description for marker in INVALID_KEY_MARKERS):
        return ChatError.INVALID_API_KEY
    if any(marker in description for marker in NETWORK_MARKERS):
        return ChatError.NETWORK_ERROR
    return ChatError.SERVER_ERROR
