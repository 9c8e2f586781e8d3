"""Gateway: OpenAI-compatible completion client — implements CompletionClient port.

Targets aggregators (OpenRouter, VseGPT) whose payloads extend the OpenAI
schema with pricing and cost fields, so bodies are returned as raw JSON.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
import openai

from router_chat.l1_entities.config import DEFAULT_BASE_URL
from router_chat.l1_entities.errors import InvalidApiKeyError
from router_chat.l1_entities.model_descriptor import ModelDescriptor
from router_chat.l1_entities.safe_parsing import parse_float

log = logging.getLogger('rc.api')

APP_TITLE = 'router-chat'


class OpenAICompatCompletionClient:
    """Wraps openai.AsyncOpenAI raw requests to implement the CompletionClient protocol."""

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url
        self._transport = transport

    @property
    def is_vsegpt(self) -> bool:
        return 'vsegpt' in self._base_url.lower()

    def _async_client(self) -> openai.AsyncOpenAI:
        return openai.AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            default_headers={'X-Title': APP_TITLE},
            # Exactly one HTTP request per call.
            max_retries=0,
            http_client=openai.DefaultAsyncHttpxClient(transport=self._transport) if self._transport else None,
        )

    async def get_models(self) -> list[ModelDescriptor]:
        payload = await self._request('get', '/models')
        entries = payload.get('data', []) if isinstance(payload, dict) else []
        return [ModelDescriptor.from_api(e) for e in entries if isinstance(e, dict) and 'id' in e]

    async def get_balance(self) -> str:
        if self.is_vsegpt:
            payload = await self._request('get', '/balance')
            credits = parse_float((payload.get('data') or {}).get('credits')) or 0.0
            return f'{credits:.2f}₽'
        payload = await self._request('get', '/credits')
        data = payload.get('data') or {}
        remaining = (parse_float(data.get('total_credits')) or 0.0) - (parse_float(data.get('total_usage')) or 0.0)
        return f'${remaining:.2f}'

    async def send_message(
        self,
        message: str,
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> dict[str, Any]:
        body = {
            'model': model,
            'messages': [{'role': 'user', 'content': message}],
            'max_tokens': max_tokens,
            'temperature': temperature,
            'stream': False,
        }
        return await self._request('post', '/chat/completions', body=body)

    def format_pricing(self, price: float) -> str:
        """Per-token *price* as ₽ per 1K tokens (VseGPT) or $ per 1M tokens (OpenRouter)."""
        if self.is_vsegpt:
            return f'{price * 1000:.3f}₽/K'
        return f'${price * 1_000_000:.3f}/M'

    def check_connectivity(self) -> tuple[bool, str]:
        try:
            client = openai.OpenAI(api_key=self._api_key, base_url=self._base_url, max_retries=0)
            client.get('/models', cast_to=httpx.Response)
            return True, ''
        except openai.AuthenticationError as e:
            return False, f'Authentication failed: {e}'
        except Exception as e:
            return False, f'Cannot connect to {self._base_url}: {e}'

    async def _request(self, method: str, path: str, body: dict[str, Any] | None = None) -> Any:
        log.debug('%s %s', method.upper(), path)
        async with self._async_client() as client:
            try:
                if method == 'post':
                    resp = await client.post(path, body=body, cast_to=httpx.Response)
                else:
                    resp = await client.get(path, cast_to=httpx.Response)
            except (openai.AuthenticationError, openai.PermissionDeniedError) as e:
                log.warning('Authentication rejected for %s: %s', path, e)
                raise InvalidApiKeyError(f'INVALID_API_KEY: {e}') from e
            return resp.json()
