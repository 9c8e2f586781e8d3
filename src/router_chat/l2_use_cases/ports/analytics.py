"""Port: usage analytics tracker."""

from __future__ import annotations

from typing import Any, Protocol


class AnalyticsTracker(Protocol):
    """Per-session usage accumulation."""

    def track_message(
        self,
        model: str,
        message_length: int,
        response_time: float,
        tokens_used: int,
    ) -> None: ...

    def clear_data(self) -> None: ...

    def get_statistics(self) -> dict[str, Any]: ...

    def export_session_data(self) -> list[dict[str, Any]]: ...

    def get_model_efficiency(self) -> dict[str, dict[str, float]]: ...

    def get_response_time_stats(self) -> dict[str, float]: ...

    def get_message_length_stats(self) -> dict[str, float]: ...
