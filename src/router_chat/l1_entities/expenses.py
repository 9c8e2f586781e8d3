"""Expense aggregation entities — daily cost buckets and their total."""

from __future__ import annotations

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from router_chat.l1_entities.errors import ExpensesFormatError


class DailyExpense(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    cost: float

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> DailyExpense:
        raw_date = data.get('date')
        raw_cost = data.get('cost')
        if not isinstance(raw_date, str):
            raise ExpensesFormatError(f'Invalid date type in DailyExpense: expected str, got {type(raw_date).__name__}')
        try:
            day = date.fromisoformat(raw_date)
        except ValueError:
            raise ExpensesFormatError(
                f'Invalid date format in DailyExpense: {raw_date!r}. Expected format: YYYY-MM-DD'
            ) from None
        if isinstance(raw_cost, bool) or not isinstance(raw_cost, (int, float)):
            raise ExpensesFormatError(f'Invalid cost type in DailyExpense: expected number, got {type(raw_cost).__name__}')
        return cls(day=day, cost=float(raw_cost))

    @property
    def formatted_date(self) -> str:
        """Short chart label, e.g. ``15.02``."""
        return self.day.strftime('%d.%m')

    def to_mapping(self) -> dict[str, Any]:
        return {'date': self.day.isoformat(), 'cost': self.cost}


class ExpensesData(BaseModel):
    model_config = ConfigDict(frozen=True)

    daily: tuple[DailyExpense, ...] = Field(default_factory=tuple)
    total: float = 0.0

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ExpensesData:
        raw_daily = data.get('daily')
        raw_total = data.get('total')
        if not isinstance(raw_daily, list):
            raise ExpensesFormatError(f'Invalid daily type in ExpensesData: expected list, got {type(raw_daily).__name__}')
        if isinstance(raw_total, bool) or not isinstance(raw_total, (int, float)):
            raise ExpensesFormatError(f'Invalid total type in ExpensesData: expected number, got {type(raw_total).__name__}')
        rows = []
        for item in raw_daily:
            if not isinstance(item, dict):
                raise ExpensesFormatError(f'Invalid item type in daily list: expected dict, got {type(item).__name__}')
            rows.append(DailyExpense.from_mapping(item))
        return cls(daily=tuple(rows), total=float(raw_total))

    @property
    def has_data(self) -> bool:
        return bool(self.daily) or self.total > 0

    def to_mapping(self) -> dict[str, Any]:
        return {'daily': [d.to_mapping() for d in self.daily], 'total': self.total}


EMPTY_EXPENSES = ExpensesData()
