"""Gateway: in-memory session analytics — implements AnalyticsTracker port."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from statistics import mean
from typing import Any


@dataclass(frozen=True)
class TrackedMessage:
    model: str
    message_length: int
    response_time: float
    tokens_used: int
    timestamp: datetime = field(default_factory=datetime.now)


class InMemoryAnalyticsTracker:
    """Accumulates per-turn usage for the current session only."""

    def __init__(self) -> None:
        self._records: list[TrackedMessage] = []
        self._session_start = datetime.now()

    def track_message(
        self,
        model: str,
        message_length: int,
        response_time: float,
        tokens_used: int,
    ) -> None:
        self._records.append(
            TrackedMessage(
                model=model,
                message_length=message_length,
                response_time=response_time,
                tokens_used=tokens_used,
            )
        )

    def clear_data(self) -> None:
        self._records.clear()
        self._session_start = datetime.now()

    def get_statistics(self) -> dict[str, Any]:
        model_usage: dict[str, dict[str, int]] = {}
        for rec in self._records:
            usage = model_usage.setdefault(rec.model, {'count': 0, 'tokens': 0})
            usage['count'] += 1
            usage['tokens'] += rec.tokens_used
        return {
            'total_messages': len(self._records),
            'total_tokens': sum(r.tokens_used for r in self._records),
            'session_duration': (datetime.now() - self._session_start).total_seconds(),
            'messages_per_session': len(self._records),
            'model_usage': model_usage,
        }

    def export_session_data(self) -> list[dict[str, Any]]:
        return [{**asdict(r), 'timestamp': r.timestamp.isoformat()} for r in self._records]

    def get_model_efficiency(self) -> dict[str, dict[str, float]]:
        """Per model: mean response time, mean tokens, tokens per second."""
        by_model: dict[str, list[TrackedMessage]] = {}
        for rec in self._records:
            by_model.setdefault(rec.model, []).append(rec)
        result = {}
        for model, recs in by_model.items():
            total_time = sum(r.response_time for r in recs)
            total_tokens = sum(r.tokens_used for r in recs)
            result[model] = {
                'avg_response_time': total_time / len(recs),
                'avg_tokens': total_tokens / len(recs),
                'tokens_per_second': total_tokens / total_time if total_time > 0 else 0.0,
            }
        return result

    def get_response_time_stats(self) -> dict[str, float]:
        return _summary([r.response_time for r in self._records])

    def get_message_length_stats(self) -> dict[str, float]:
        return _summary([float(r.message_length) for r in self._records])


def _summary(values: list[float]) -> dict[str, float]:
    if not values:
        return {'average': 0.0, 'min': 0.0, 'max': 0.0}
    return {'average': mean(values), 'min': min(values), 'max': max(values)}
