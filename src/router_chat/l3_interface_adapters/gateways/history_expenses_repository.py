"""Gateway: expenses repository backed by the history store."""

from __future__ import annotations

from router_chat.l1_entities.expenses import EMPTY_EXPENSES, ExpensesData
from router_chat.l2_use_cases.ports.history_store import HistoryStore


class HistoryExpensesRepository:
    """Converts the store's raw daily aggregation into ExpensesData."""

    def __init__(self, history: HistoryStore) -> None:
        self._history = history

    def get_daily_expenses(self, days: int) -> ExpensesData:
        if days <= 0:
            raise ValueError(f'days must be greater than 0, got {days}')
        raw = self._history.get_daily_expenses(days)
        if not raw:
            return EMPTY_EXPENSES
        return ExpensesData.from_mapping(raw)
