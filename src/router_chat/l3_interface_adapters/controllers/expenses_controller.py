"""ExpensesController — cost-over-time aggregator refreshed after costed chat turns."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, replace

from router_chat.l1_entities.errors import ExpensesFormatError
from router_chat.l1_entities.expenses import EMPTY_EXPENSES, DailyExpense, ExpensesData
from router_chat.l2_use_cases.ports.expenses_repository import ExpensesRepository
from router_chat.l3_interface_adapters.controllers.observable import Observable

log = logging.getLogger('rc.expenses')

DEFAULT_ANALYSIS_DAYS = 30


class ExpensesLoadingState(enum.Enum):
    INITIAL = 'initial'
    LOADING = 'loading'
    LOADED = 'loaded'
    ERROR = 'error'


@dataclass(frozen=True)
class ExpensesState:
    loading_state: ExpensesLoadingState = ExpensesLoadingState.INITIAL
    data: ExpensesData = EMPTY_EXPENSES
    error_message: str | None = None

    @property
    def daily_expenses(self) -> tuple[DailyExpense, ...]:
        return self.data.daily

    @property
    def total_expenses(self) -> float:
        return self.data.total

    @property
    def has_data(self) -> bool:
        return self.data.has_data


class ExpensesController(Observable):
    """Loads daily expenses from the repository and exposes them as observable state."""

    def __init__(self, repository: ExpensesRepository, analysis_days: int = DEFAULT_ANALYSIS_DAYS) -> None:
        super().__init__()
        self._repository = repository
        self._analysis_days = analysis_days
        self._state = ExpensesState()

    @property
    def state(self) -> ExpensesState:
        return self._state

    @property
    def analysis_days(self) -> int:
        return self._analysis_days

    @property
    def expenses_data(self) -> ExpensesData:
        return self._state.data

    async def set_analysis_days(self, days: int) -> None:
        """Change the analysis window and reload. Non-positive or unchanged values are ignored."""
        if days != self._analysis_days and days > 0:
            self._analysis_days = days
            await self.load_expenses()

    async def load_expenses(self) -> None:
        self._state = replace(self._state, loading_state=ExpensesLoadingState.LOADING)
        self._notify()

        try:
            data = self._repository.get_daily_expenses(self._analysis_days)
            self._state = ExpensesState(loading_state=ExpensesLoadingState.LOADED, data=data)
        except ExpensesFormatError as e:
            self._fail(f'Data format error: {e}')
        except ValueError as e:
            self._fail(f'Invalid parameters: {e}')
        except Exception as e:
            log.error('Error loading expenses: %s', e, exc_info=True)
            self._fail(f'Failed to load expenses: {e}')
        finally:
            self._notify()

    async def refresh(self) -> None:
        """Reload without flashing the loading state. Failures keep the current state."""
        if self._state.loading_state != ExpensesLoadingState.LOADED:
            await self.load_expenses()
            return

        try:
            data = self._repository.get_daily_expenses(self._analysis_days)
        except Exception as e:
            log.error('Error refreshing expenses: %s', e, exc_info=True)
            return
        self._state = replace(self._state, data=data, error_message=None)
        self._notify()

    def reset(self) -> None:
        self._state = ExpensesState()
        self._notify()

    def _fail(self, message: str) -> None:
        self._state = replace(self._state, loading_state=ExpensesLoadingState.ERROR, error_message=message)
