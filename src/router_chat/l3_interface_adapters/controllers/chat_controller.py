"""ChatController — drives the chat turn lifecycle and owns the observable chat state."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from router_chat.l1_entities.chat_error import ChatError
from router_chat.l1_entities.chat_message import ChatMessage
from router_chat.l1_entities.config import ChatSettings
from router_chat.l1_entities.model_descriptor import ModelDescriptor
from router_chat.l1_entities.safe_parsing import normalize_text
from router_chat.l2_use_cases.classify_error_use_case import classify_error, describe_error
from router_chat.l2_use_cases.ports.analytics import AnalyticsTracker
from router_chat.l2_use_cases.ports.completion_client import CompletionClient
from router_chat.l2_use_cases.ports.expense_aggregator import ExpenseAggregator
from router_chat.l2_use_cases.ports.history_store import HistoryStore
from router_chat.l2_use_cases.ports.settings_store import SettingsStore
from router_chat.l2_use_cases.reconcile_response_use_case import reconcile_response
from router_chat.l2_use_cases.utils.session_export import build_json_snapshot, build_text_log, export_stamp
from router_chat.l3_interface_adapters.controllers.observable import Observable

log = logging.getLogger('rc.chat')

ClientFactory = Callable[[ChatSettings], CompletionClient]


class ChatController(Observable):
    """Central orchestrator between the front end and the completion API.

    Owns the message log, model selection, balance, loading flag and the
    single-slot ChatError. Every mutating operation ends with one notify.
    Transport and parsing failures surface only through ``error``; in-band
    server errors become visible assistant messages.
    """

    def __init__(
        self,
        settings: SettingsStore,
        client_factory: ClientFactory,
        history: HistoryStore,
        analytics: AnalyticsTracker,
        expenses: ExpenseAggregator | None = None,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._client_factory = client_factory
        self._history = history
        self._analytics = analytics
        self._expenses = expenses

        self._messages: list[ChatMessage] = []
        self._available_models: list[ModelDescriptor] = []
        self._current_model: str | None = None
        self._balance = '$0.00'
        self._is_loading = False
        self._error = ChatError.NONE
        self._debug_logs: list[str] = []
        self._background: set[asyncio.Task[None]] = set()

    # --- Observable state ---

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def available_models(self) -> tuple[ModelDescriptor, ...]:
        return tuple(self._available_models)

    @property
    def current_model(self) -> str | None:
        return self._current_model

    @property
    def balance(self) -> str:
        return self._balance

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def error(self) -> ChatError:
        return self._error

    @property
    def debug_logs(self) -> tuple[str, ...]:
        return tuple(self._debug_logs)

    @property
    def base_url(self) -> str:
        return self._settings.settings.base_url

    def set_expenses_aggregator(self, expenses: ExpenseAggregator) -> None:
        self._expenses = expenses

    # --- Lifecycle ---

    async def initialize(self) -> None:
        """Load catalog, balance and history. Missing API key skips silently."""
        if not self._settings.settings.has_api_key:
            self._log('API key not set, skipping initialization')
            return

        self._log('Initializing chat controller...')
        await self._load_models()
        await self._load_balance()
        self.load_history()

    async def reinitialize(self) -> None:
        """Re-read settings and rerun initialization (e.g. after a new API key)."""
        self._log('Reinitializing after settings update...')
        self._settings.reload()
        await self.initialize()

    async def _load_models(self) -> None:
        try:
            client = self._client_or_none()
            if client is None:
                return
            models = await client.get_models()
            self._available_models = sorted(models, key=lambda m: m.name)
            if self._available_models:
                saved = self._settings.settings.model
                known = any(m.id == saved for m in self._available_models)
                self._current_model = saved if known else self._available_models[0].id
            self._log(f'Loaded {len(self._available_models)} models, current={self._current_model}')
            self._notify()
        except Exception as e:
            self._log(f'Error loading models: {describe_error(e)}', level=logging.WARNING)

    async def _load_balance(self) -> None:
        try:
            client = self._client_or_none()
            if client is None:
                return
            self._balance = await client.get_balance()
            self._notify()
        except Exception as e:
            self._log(f'Error loading balance: {describe_error(e)}', level=logging.WARNING)

    def load_history(self) -> None:
        """Replace the in-memory log with the stored history."""
        try:
            messages = self._history.get_messages()
            self._messages = list(messages)
            self._notify()
        except Exception as e:
            self._log(f'Error loading history: {describe_error(e)}', level=logging.WARNING)

    # --- Chat turn ---

    async def send_message(self, content: str, *, track_analytics: bool = True) -> None:
        """Run one chat turn. Blank input, no selected model, or an in-flight send are no-ops."""
        if not content.strip() or self._current_model is None:
            return
        if self._is_loading:
            self._log('Send rejected: a request is already in flight', level=logging.WARNING)
            return

        model = self._current_model
        self._is_loading = True
        self._notify()

        try:
            content = normalize_text(content)
            user_message = ChatMessage(role='user', content=content, model_id=model)
            self._messages.append(user_message)
            self._notify()
            await asyncio.to_thread(self._save_message, user_message)

            started = time.monotonic()

            client = self._client_or_none()
            if client is None:
                return

            settings = self._settings.settings
            response = await client.send_message(
                message=content,
                model=model,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
            )
            self._log(f'API Response: {response}', level=logging.DEBUG)
            response_time = time.monotonic() - started

            turn = reconcile_response(response, model, self._available_models)
            self._messages.append(turn.message)
            await asyncio.to_thread(self._save_message, turn.message)

            if not turn.is_error:
                if track_analytics:
                    self._track(model, len(content), response_time, turn.tokens)
                self._log(f'Cost Response: {turn.cost}')
                if turn.cost > 0:
                    self._schedule_expenses_refresh()
                await self._load_balance()
        except Exception as e:
            self._log(f'Error sending message: {describe_error(e)}', level=logging.ERROR)
            # Surfaced as a banner via ``error``; never appended to the conversation.
            self._set_error(classify_error(e))
        finally:
            self._is_loading = False
            self._notify()

    def set_current_model(self, model_id: str) -> None:
        """Select *model_id* and persist it. Not validated against the catalog."""
        self._current_model = model_id
        try:
            self._settings.set_model(model_id)
        except Exception as e:
            self._log(f'Error saving model: {describe_error(e)}', level=logging.WARNING)
        self._notify()

    def clear_history(self) -> None:
        """Best-effort sequential clear of log, store and analytics; notifies once."""
        self._messages.clear()
        try:
            self._history.clear_history()
        except Exception as e:
            self._log(f'Error clearing history store: {describe_error(e)}', level=logging.WARNING)
        try:
            self._analytics.clear_data()
        except Exception as e:
            self._log(f'Error clearing analytics: {describe_error(e)}', level=logging.WARNING)
        self._notify()

    def clear_error(self) -> None:
        self._error = ChatError.NONE
        self._notify()

    async def wait_background_tasks(self) -> None:
        """Await pending fire-and-forget work (expense refreshes)."""
        if self._background:
            await asyncio.gather(*list(self._background))

    # --- Export ---

    def export_logs(self, directory: Path) -> Path:
        """Write debug and chat logs to a timestamped text file. Returns its path."""
        now = datetime.now()
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f'chat_logs_{export_stamp(now)}.txt'
        path.write_text(build_text_log(self._debug_logs, self._messages, now), encoding='utf-8')
        return path

    def export_messages_as_json(self, directory: Path) -> Path:
        """Write the message log as a JSON array. Returns its path."""
        now = datetime.now()
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f'chat_history_{export_stamp(now)}.json'
        path.write_text(build_json_snapshot(self._messages), encoding='utf-8')
        return path

    def export_history(self) -> dict[str, Any]:
        return {
            'database_stats': self._history.get_statistics(),
            'analytics_stats': self._analytics.get_statistics(),
            'session_data': self._analytics.export_session_data(),
            'model_efficiency': self._analytics.get_model_efficiency(),
            'response_time_stats': self._analytics.get_response_time_stats(),
            'message_length_stats': self._analytics.get_message_length_stats(),
        }

    def format_pricing(self, price: float) -> str:
        settings = self._settings.settings
        if not settings.has_api_key:
            return f'{price:.6f}'
        return self._client_factory(settings).format_pricing(price)

    # --- Internals ---

    def _client_or_none(self) -> CompletionClient | None:
        settings = self._settings.settings
        if not settings.has_api_key:
            self._set_error(ChatError.API_KEY_MISSING)
            return None
        return self._client_factory(settings)

    def _set_error(self, error: ChatError) -> None:
        if self._error == error:
            return
        self._error = error
        self._notify()

    def _save_message(self, message: ChatMessage) -> None:
        try:
            self._history.save_message(message)
        except Exception as e:
            self._log(f'Error saving message: {describe_error(e)}', level=logging.WARNING)

    def _track(self, model: str, message_length: int, response_time: float, tokens: int) -> None:
        try:
            self._analytics.track_message(
                model=model,
                message_length=message_length,
                response_time=response_time,
                tokens_used=tokens,
            )
        except Exception as e:
            self._log(f'Error tracking analytics: {describe_error(e)}', level=logging.WARNING)

    def _schedule_expenses_refresh(self) -> None:
        if self._expenses is None:
            return
        task = asyncio.get_running_loop().create_task(self._refresh_expenses(self._expenses))
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def _refresh_expenses(self, expenses: ExpenseAggregator) -> None:
        try:
            await expenses.refresh()
        except Exception as e:
            self._log(f'Error refreshing expenses: {describe_error(e)}', level=logging.WARNING)

    def _log(self, message: str, *, level: int = logging.INFO) -> None:
        self._debug_logs.append(f'{datetime.now()}: {message}')
        log.log(level, message)
