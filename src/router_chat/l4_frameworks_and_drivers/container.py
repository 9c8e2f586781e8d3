"""Dependency container — composition root for wiring all layers together."""

from __future__ import annotations

from pathlib import Path

from router_chat.l1_entities.config import ChatSettings
from router_chat.l2_use_cases.ports.analytics import AnalyticsTracker
from router_chat.l2_use_cases.ports.completion_client import CompletionClient
from router_chat.l2_use_cases.ports.history_store import HistoryStore
from router_chat.l2_use_cases.ports.settings_store import SettingsStore
from router_chat.l3_interface_adapters.controllers.chat_controller import ChatController
from router_chat.l3_interface_adapters.controllers.expenses_controller import ExpensesController
from router_chat.l3_interface_adapters.gateways.history_expenses_repository import HistoryExpensesRepository
from router_chat.l3_interface_adapters.gateways.memory_analytics_tracker import InMemoryAnalyticsTracker
from router_chat.l3_interface_adapters.gateways.openai_completion_client import OpenAICompatCompletionClient
from router_chat.l3_interface_adapters.gateways.paths import HISTORY_DB_PATH, SETTINGS_PATH
from router_chat.l3_interface_adapters.gateways.sqlite_history_store import SqliteHistoryStore
from router_chat.l3_interface_adapters.gateways.yaml_settings_store import YamlSettingsStore
from router_chat.l4_frameworks_and_drivers.config import build_settings


def make_completion_client(settings: ChatSettings) -> CompletionClient:
    return OpenAICompatCompletionClient(api_key=(settings.api_key or '').strip(), base_url=settings.base_url)


class DependencyContainer:
    """Creates and wires all concrete instances. Easy to override for testing."""

    def __init__(
        self,
        settings_path: Path = SETTINGS_PATH,
        db_path: Path = HISTORY_DB_PATH,
    ) -> None:
        self.settings_store: SettingsStore = YamlSettingsStore(settings_path, build_settings)
        self.history: HistoryStore = SqliteHistoryStore(db_path)
        self.analytics: AnalyticsTracker = InMemoryAnalyticsTracker()

        self.expenses = ExpensesController(HistoryExpensesRepository(self.history))
        self.controller = ChatController(
            settings=self.settings_store,
            client_factory=make_completion_client,
            history=self.history,
            analytics=self.analytics,
            expenses=self.expenses,
        )

    def completion_client(self) -> CompletionClient:
        return make_completion_client(self.settings_store.settings)
