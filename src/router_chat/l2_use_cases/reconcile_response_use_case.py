"""Use case: reconcile a raw completion response into a typed assistant message."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from router_chat.l1_entities.chat_message import ChatMessage
from router_chat.l1_entities.errors import InvalidResponseFormatError
from router_chat.l1_entities.model_descriptor import ModelDescriptor
from router_chat.l1_entities.safe_parsing import normalize_text, parse_float, parse_int

log = logging.getLogger('rc.chat')


@dataclass(frozen=True)
class ReconciledTurn:
    """Assistant message plus the figures it was derived from."""

    message: ChatMessage
    is_error: bool = False
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def tokens(self) -> int:
        return self.message.tokens or 0

    @property
    def cost(self) -> float:
        return self.message.cost or 0.0


def reconcile_response(
    response: dict[str, Any],
    model_id: str,
    models: list[ModelDescriptor],
) -> ReconciledTurn:
    """Convert a loosely-typed OpenAI-compatible response into a ReconciledTurn.

    An in-band ``error`` field yields an error-tagged assistant message (not an
    exception). A missing or non-text ``choices[0].message.content`` raises
    InvalidResponseFormatError. Usage and pricing gaps never fail the turn.
    """
    error = response.get('error')
    if error is not None:
        return ReconciledTurn(
            message=ChatMessage(
                role='assistant',
                content=normalize_text(f'Error: {_error_text(error)}'),
                model_id=model_id,
            ),
            is_error=True,
        )

    content = _extract_content(response)
    usage = response.get('usage')
    if not isinstance(usage, dict):
        usage = {}

    tokens = parse_int(usage.get('total_tokens')) or 0
    prompt_tokens = parse_int(usage.get('prompt_tokens')) or 0
    completion_tokens = parse_int(usage.get('completion_tokens')) or 0

    total_cost = parse_float(usage.get('total_cost'))
    if total_cost is not None:
        cost = total_cost
    else:
        descriptor = next((m for m in models if m.id == model_id), None)
        cost = descriptor.cost_for(prompt_tokens, completion_tokens) if descriptor else 0.0
    log.debug('Cost for %s: %s (prompt=%d, completion=%d)', model_id, cost, prompt_tokens, completion_tokens)

    return ReconciledTurn(
        message=ChatMessage(
            role='assistant',
            content=normalize_text(content),
            model_id=model_id,
            tokens=tokens,
            cost=cost,
        ),
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
    )


def _error_text(error: Any) -> str:
    if isinstance(error, dict) and isinstance(error.get('message'), str):
        return error['message']
    return str(error)


def _extract_content(response: dict[str, Any]) -> str:
    choices = response.get('choices')
    if not isinstance(choices, list) or not choices:
        raise InvalidResponseFormatError('Invalid API response format: no choices')
    first = choices[0]
    message = first.get('message') if isinstance(first, dict) else None
    if not isinstance(message, dict) or not isinstance(message.get('content'), str):
        raise InvalidResponseFormatError('Invalid API response format: no message content')
    return message['content']
