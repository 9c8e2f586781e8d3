"""Tests for the dependency container."""

from __future__ import annotations

from pathlib import Path

from router_chat.l1_entities.config import ChatSettings
from router_chat.l3_interface_adapters.gateways.openai_completion_client import OpenAICompatCompletionClient
from router_chat.l4_frameworks_and_drivers.container import DependencyContainer, make_completion_client


class TestDependencyContainer:
    def test_creates_all_components(self, tmp_path: Path):
        container = DependencyContainer(settings_path=tmp_path / 'settings.yaml', db_path=tmp_path / 'h.sqlite3')

        assert container.settings_store.settings.model == 'openai/gpt-4o-mini'
        assert container.history.get_messages() == []
        assert container.expenses is not None
        assert container.controller.current_model is None
        assert (tmp_path / 'h.sqlite3').exists()

    def test_completion_client_uses_current_settings(self, tmp_path: Path):
        container = DependencyContainer(settings_path=tmp_path / 'settings.yaml', db_path=tmp_path / 'h.sqlite3')
        container.settings_store.update(api_key='sk-abc', base_url='https://api.vsegpt.ru/v1')

        client = container.completion_client()

        assert isinstance(client, OpenAICompatCompletionClient)
        assert client.is_vsegpt


def test_make_completion_client_strips_key():
    settings = ChatSettings(api_key='  sk-abc \n', model='m', max_tokens=1, temperature=0.0)
    client = make_completion_client(settings)
    assert client._api_key == 'sk-abc'  # noqa: SLF001 -- no public accessor
