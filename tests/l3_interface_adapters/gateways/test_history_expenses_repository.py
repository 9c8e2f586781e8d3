"""Tests for HistoryExpensesRepository."""

import pytest

from router_chat.l1_entities.errors import ExpensesFormatError
from router_chat.l1_entities.expenses import EMPTY_EXPENSES
from router_chat.l3_interface_adapters.gateways.history_expenses_repository import HistoryExpensesRepository
from tests.conftest import FakeHistoryStore


class _RawHistory(FakeHistoryStore):
    def __init__(self, raw):
        super().__init__()
        self.raw = raw
        self.days: list[int] = []

    def get_daily_expenses(self, days):
        self.days.append(days)
        return self.raw


class TestHistoryExpensesRepository:
    @pytest.mark.parametrize('days', [0, -3])
    def test_non_positive_days_raise(self, days):
        with pytest.raises(ValueError):
            HistoryExpensesRepository(_RawHistory({})).get_daily_expenses(days)

    def test_empty_raw_returns_empty(self):
        assert HistoryExpensesRepository(_RawHistory({})).get_daily_expenses(7) is EMPTY_EXPENSES

    def test_converts_rows(self):
        history = _RawHistory({'daily': [{'date': '2026-02-15', 'cost': 0.5}], 'total': 0.5})
        data = HistoryExpensesRepository(history).get_daily_expenses(7)
        assert data.total == 0.5
        assert history.days == [7]

    def test_malformed_rows_raise_format_error(self):
        history = _RawHistory({'daily': [{'date': 'yesterday', 'cost': 0.5}], 'total': 0.5})
        with pytest.raises(ExpensesFormatError):
            HistoryExpensesRepository(history).get_daily_expenses(7)
