"""Pure builders for session export files."""

from __future__ import annotations

import json
from datetime import datetime

from router_chat.l1_entities.chat_message import ChatMessage


def export_stamp(now: datetime) -> str:
    return now.strftime('%Y%m%d_%H%M%S')


def build_text_log(debug_logs: list[str], messages: list[ChatMessage], now: datetime) -> str:
    """Plain-text dump: debug log lines, then one block per chat message."""
    lines = ['=== Debug Logs ===', '']
    lines.extend(debug_logs)
    lines += ['', '=== Chat Logs ===', '', f'Generated: {now.isoformat(sep=" ", timespec="seconds")}', '']
    for msg in messages:
        speaker = 'User' if msg.is_user else 'AI'
        lines.append(f'{speaker} ({msg.model_id}):')
        lines.append(msg.content)
        if msg.tokens is not None:
            lines.append(f'Tokens: {msg.tokens}')
        if msg.cost is not None:
            lines.append(f'Cost: {msg.cost:.6f}')
        lines.append(f'Time: {msg.timestamp.isoformat(sep=" ", timespec="seconds")}')
        lines += ['---', '']
    return '\n'.join(lines) + '\n'


def build_json_snapshot(messages: list[ChatMessage]) -> str:
    """JSON array of ``{role, content, modelId, tokens?, cost?, timestamp}``."""
    return json.dumps([m.to_export_dict() for m in messages], ensure_ascii=False, indent=2)
