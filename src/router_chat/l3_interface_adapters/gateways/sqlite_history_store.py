"""Gateway: SQLite chat history — implements HistoryStore port."""

from __future__ import annotations

import logging
import sqlite3
from contextlib import closing
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any

from router_chat.l1_entities.chat_message import ChatMessage

log = logging.getLogger('rc.persist')

_SCHEMA = """
CREATE TABLE IF NOT EXISTS messages (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    role TEXT NOT NULL,
    content TEXT NOT NULL,
    model_id TEXT,
    tokens INTEGER,
    cost REAL,
    timestamp TEXT NOT NULL
)
"""


class SqliteHistoryStore:
    """Persists chat messages to a single SQLite file; one connection per call."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as conn, conn:
            conn.execute(_SCHEMA)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def get_messages(self) -> list[ChatMessage]:
        with closing(self._connect()) as conn:
            rows = conn.execute(
                'SELECT role, content, model_id, tokens, cost, timestamp FROM messages ORDER BY id'
            ).fetchall()
        return [
            ChatMessage(
                role=row['role'],
                content=row['content'],
                model_id=row['model_id'],
                tokens=row['tokens'],
                cost=row['cost'],
                timestamp=datetime.fromisoformat(row['timestamp']),
            )
            for row in rows
        ]

    def save_message(self, message: ChatMessage) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute(
                'INSERT INTO messages (role, content, model_id, tokens, cost, timestamp) VALUES (?, ?, ?, ?, ?, ?)',
                (
                    message.role,
                    message.content,
                    message.model_id,
                    message.tokens,
                    message.cost,
                    message.timestamp.isoformat(),
                ),
            )
        log.debug('Saved %s message (%d chars)', message.role, len(message.content))

    def clear_history(self) -> None:
        with closing(self._connect()) as conn, conn:
            conn.execute('DELETE FROM messages')
        log.info('Cleared chat history at %s', self._db_path)

    def get_statistics(self) -> dict[str, Any]:
        with closing(self._connect()) as conn:
            totals = conn.execute(
                'SELECT COUNT(*) AS total_messages, COALESCE(SUM(tokens), 0) AS total_tokens, '
                'COALESCE(SUM(cost), 0.0) AS total_cost FROM messages'
            ).fetchone()
            per_model = conn.execute(
                'SELECT model_id, COUNT(*) AS count, COALESCE(SUM(tokens), 0) AS tokens '
                'FROM messages WHERE model_id IS NOT NULL GROUP BY model_id ORDER BY model_id'
            ).fetchall()
        return {
            'total_messages': totals['total_messages'],
            'total_tokens': totals['total_tokens'],
            'total_cost': totals['total_cost'],
            'model_usage': {row['model_id']: {'count': row['count'], 'tokens': row['tokens']} for row in per_model},
        }

    def get_daily_expenses(self, days: int) -> dict[str, Any]:
        """Cost per calendar day over the last *days* days, today inclusive."""
        since = (date.today() - timedelta(days=days - 1)).isoformat()
        with closing(self._connect()) as conn:
            rows = conn.execute(
                'SELECT substr(timestamp, 1, 10) AS day, SUM(cost) AS cost FROM messages '
                'WHERE cost IS NOT NULL AND substr(timestamp, 1, 10) >= ? '
                'GROUP BY day ORDER BY day',
                (since,),
            ).fetchall()
        if not rows:
            return {}
        daily = [{'date': row['day'], 'cost': row['cost']} for row in rows]
        return {'daily': daily, 'total': sum(row['cost'] for row in rows)}
