"""Port: expenses repository."""

from __future__ import annotations

from typing import Protocol

from router_chat.l1_entities.expenses import ExpensesData


class ExpensesRepository(Protocol):
    def get_daily_expenses(self, days: int) -> ExpensesData:
        """Daily expenses over the last *days* days. Raises ValueError if days <= 0."""
        ...
