"""Shared test fixtures and protocol-conforming fakes."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from router_chat.l1_entities.chat_message import ChatMessage
from router_chat.l1_entities.config import ChatSettings
from router_chat.l1_entities.expenses import EMPTY_EXPENSES, ExpensesData
from router_chat.l1_entities.model_descriptor import ModelDescriptor
from router_chat.l3_interface_adapters.controllers.chat_controller import ChatController
from router_chat.l4_frameworks_and_drivers.config import build_settings

# --- Protocol-conforming Fakes ---


def make_completion(
    content: str = 'Fake reply',
    prompt_tokens: int = 100,
    completion_tokens: int = 50,
    total_cost: float | None = None,
) -> dict[str, Any]:
    usage: dict[str, Any] = {
        'prompt_tokens': prompt_tokens,
        'completion_tokens': completion_tokens,
        'total_tokens': prompt_tokens + completion_tokens,
    }
    if total_cost is not None:
        usage['total_cost'] = total_cost
    return {
        'id': 'gen-1',
        'choices': [{'index': 0, 'message': {'role': 'assistant', 'content': content}}],
        'usage': usage,
    }


DEFAULT_MODELS = [
    ModelDescriptor(id='openai/gpt-4o-mini', name='OpenAI: GPT-4o-mini', prompt_price=0.001, completion_price=0.002),
    ModelDescriptor(id='anthropic/claude-3-haiku', name='Anthropic: Claude 3 Haiku', prompt_price=0.0005),
]


class FakeCompletionClient:
    """Fake completion client for controller tests."""

    def __init__(
        self,
        models: list[ModelDescriptor] | None = None,
        response: dict[str, Any] | None = None,
        balance: str = '$12.34',
    ) -> None:
        self._models = list(DEFAULT_MODELS if models is None else models)
        self._response = response if response is not None else make_completion()
        self._balance = balance
        self._send_error: Exception | None = None
        self._models_error: Exception | None = None
        self._balance_error: Exception | None = None
        self.send_calls: list[dict[str, Any]] = []
        self.balance_calls = 0
        self.connectivity: tuple[bool, str] = (True, '')

    async def get_models(self) -> list[ModelDescriptor]:
        if self._models_error is not None:
            raise self._models_error
        return list(self._models)

    async def get_balance(self) -> str:
        self.balance_calls += 1
        if self._balance_error is not None:
            raise self._balance_error
        return self._balance

    async def send_message(self, message: str, model: str, max_tokens: int, temperature: float) -> dict[str, Any]:
        self.send_calls.append(
            {'message': message, 'model': model, 'max_tokens': max_tokens, 'temperature': temperature}
        )
        if self._send_error is not None:
            raise self._send_error
        return self._response

    def format_pricing(self, price: float) -> str:
        return f'${price * 1_000_000:.3f}/M'

    def check_connectivity(self) -> tuple[bool, str]:
        return self.connectivity

    def set_response(self, response: dict[str, Any]) -> None:
        self._response = response

    def fail_send(self, error: Exception) -> None:
        self._send_error = error

    def fail_models(self, error: Exception) -> None:
        self._models_error = error

    def fail_balance(self, error: Exception) -> None:
        self._balance_error = error


class FakeHistoryStore:
    """In-memory HistoryStore."""

    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        self.saved: list[ChatMessage] = list(messages or [])
        self.fail_save = False
        self.fail_clear = False
        self.fail_load = False
        self.clear_calls = 0

    def get_messages(self) -> list[ChatMessage]:
        if self.fail_load:
            raise OSError('database is locked')
        return list(self.saved)

    def save_message(self, message: ChatMessage) -> None:
        if self.fail_save:
            raise OSError('disk full')
        self.saved.append(message)

    def clear_history(self) -> None:
        self.clear_calls += 1
        if self.fail_clear:
            raise OSError('database is locked')
        self.saved.clear()

    def get_statistics(self) -> dict[str, Any]:
        return {'total_messages': len(self.saved), 'total_tokens': sum(m.tokens or 0 for m in self.saved)}

    def get_daily_expenses(self, days: int) -> dict[str, Any]:
        return {}


class FakeSettingsStore:
    """SettingsStore held in memory; build_settings applies the real defaults."""

    def __init__(self, **overrides: object) -> None:
        self._raw = dict(overrides)
        self._settings = build_settings(self._raw)
        self.reload_calls = 0

    @property
    def settings(self) -> ChatSettings:
        return self._settings

    def reload(self) -> ChatSettings:
        self.reload_calls += 1
        return self._settings

    def set_model(self, model_id: str) -> None:
        self.update(model=model_id)

    def update(self, **changes: object) -> ChatSettings:
        self._raw.update(changes)
        self._settings = build_settings(self._raw)
        return self._settings


class FakeAnalytics:
    def __init__(self) -> None:
        self.tracked: list[dict[str, Any]] = []
        self.clear_calls = 0
        self.fail_track = False

    def track_message(self, model: str, message_length: int, response_time: float, tokens_used: int) -> None:
        if self.fail_track:
            raise RuntimeError('analytics backend down')
        self.tracked.append(
            {'model': model, 'message_length': message_length, 'response_time': response_time, 'tokens_used': tokens_used}
        )

    def clear_data(self) -> None:
        self.clear_calls += 1
        self.tracked.clear()

    def get_statistics(self) -> dict[str, Any]:
        return {'total_messages': len(self.tracked)}

    def export_session_data(self) -> list[dict[str, Any]]:
        return list(self.tracked)

    def get_model_efficiency(self) -> dict[str, dict[str, float]]:
        return {}

    def get_response_time_stats(self) -> dict[str, float]:
        return {'average': 0.0, 'min': 0.0, 'max': 0.0}

    def get_message_length_stats(self) -> dict[str, float]:
        return {'average': 0.0, 'min': 0.0, 'max': 0.0}


class FakeExpenseAggregator:
    def __init__(self, error: Exception | None = None) -> None:
        self.refresh_calls = 0
        self._error = error

    async def refresh(self) -> None:
        self.refresh_calls += 1
        if self._error is not None:
            raise self._error


class FakeExpensesRepository:
    def __init__(self, data: ExpensesData = EMPTY_EXPENSES) -> None:
        self.data = data
        self.error: Exception | None = None
        self.calls: list[int] = []

    def get_daily_expenses(self, days: int) -> ExpensesData:
        self.calls.append(days)
        if self.error is not None:
            raise self.error
        return self.data


# --- Standard Fixtures ---


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def fake_history() -> FakeHistoryStore:
    return FakeHistoryStore()


@pytest.fixture
def fake_settings() -> FakeSettingsStore:
    return FakeSettingsStore(api_key='sk-test')


@pytest.fixture
def fake_analytics() -> FakeAnalytics:
    return FakeAnalytics()


@pytest.fixture
def fake_expenses() -> FakeExpenseAggregator:
    return FakeExpenseAggregator()


@pytest.fixture
def controller(fake_settings, fake_client, fake_history, fake_analytics, fake_expenses) -> ChatController:
    return ChatController(
        settings=fake_settings,
        client_factory=lambda _settings: fake_client,
        history=fake_history,
        analytics=fake_analytics,
        expenses=fake_expenses,
    )


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    d = tmp_path / 'output'
    d.mkdir()
    return d


@pytest.fixture(autouse=True)
def _no_env_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv('ROUTER_CHAT_API_KEY', raising=False)
