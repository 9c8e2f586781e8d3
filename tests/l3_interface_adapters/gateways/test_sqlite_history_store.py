"""Tests for the SQLite history store gateway."""

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from router_chat.l1_entities.chat_message import ChatMessage
from router_chat.l3_interface_adapters.gateways.sqlite_history_store import SqliteHistoryStore


@pytest.fixture
def store(tmp_path: Path) -> SqliteHistoryStore:
    return SqliteHistoryStore(tmp_path / 'nested' / 'history.sqlite3')


class TestMessages:
    def test_creates_parent_dirs(self, store: SqliteHistoryStore):
        assert store.db_path.exists()

    def test_round_trip_preserves_order_and_fields(self, store: SqliteHistoryStore):
        ts = datetime(2026, 2, 15, 10, 0, 0)
        store.save_message(ChatMessage(role='user', content='Привет', model_id='m', timestamp=ts))
        store.save_message(
            ChatMessage(role='assistant', content='Hi', model_id='m', tokens=12, cost=0.5, timestamp=ts)
        )

        user, assistant = store.get_messages()
        assert user.content == 'Привет'
        assert user.tokens is None
        assert user.cost is None
        assert assistant.tokens == 12
        assert assistant.cost == 0.5
        assert assistant.timestamp == ts

    def test_clear_history(self, store: SqliteHistoryStore):
        store.save_message(ChatMessage(role='user', content='x'))
        store.clear_history()
        assert store.get_messages() == []

    def test_reopen_keeps_data(self, tmp_path: Path):
        path = tmp_path / 'h.sqlite3'
        SqliteHistoryStore(path).save_message(ChatMessage(role='user', content='persisted'))
        assert SqliteHistoryStore(path).get_messages()[0].content == 'persisted'


class TestStatistics:
    def test_empty(self, store: SqliteHistoryStore):
        stats = store.get_statistics()
        assert stats['total_messages'] == 0
        assert stats['total_tokens'] == 0
        assert stats['model_usage'] == {}

    def test_aggregates_per_model(self, store: SqliteHistoryStore):
        store.save_message(ChatMessage(role='user', content='a', model_id='m1'))
        store.save_message(ChatMessage(role='assistant', content='b', model_id='m1', tokens=10, cost=0.1))
        store.save_message(ChatMessage(role='assistant', content='c', model_id='m2', tokens=5, cost=0.2))

        stats = store.get_statistics()

        assert stats['total_messages'] == 3
        assert stats['total_tokens'] == 15
        assert stats['total_cost'] == pytest.approx(0.3)
        assert stats['model_usage'] == {'m1': {'count': 2, 'tokens': 10}, 'm2': {'count': 1, 'tokens': 5}}


class TestDailyExpenses:
    def test_no_costs_returns_empty(self, store: SqliteHistoryStore):
        store.save_message(ChatMessage(role='user', content='a'))
        assert store.get_daily_expenses(30) == {}

    def test_groups_by_day_within_window(self, store: SqliteHistoryStore):
        now = datetime.now()
        store.save_message(ChatMessage(role='assistant', content='a', cost=0.1, timestamp=now))
        store.save_message(ChatMessage(role='assistant', content='b', cost=0.2, timestamp=now))
        store.save_message(ChatMessage(role='assistant', content='c', cost=0.4, timestamp=now - timedelta(days=1)))
        store.save_message(ChatMessage(role='assistant', content='old', cost=9.0, timestamp=now - timedelta(days=45)))

        raw = store.get_daily_expenses(30)

        assert [row['date'] for row in raw['daily']] == [
            (now - timedelta(days=1)).date().isoformat(),
            now.date().isoformat(),
        ]
        assert raw['daily'][1]['cost'] == pytest.approx(0.3)
        assert raw['total'] == pytest.approx(0.7)
