"""Shared path constants for settings, history and exports."""

from __future__ import annotations

from platformdirs import user_config_path, user_data_path, user_documents_path

APP_NAME = 'router-chat'

CONFIG_DIR = user_config_path(APP_NAME)
DATA_DIR = user_data_path(APP_NAME)

SETTINGS_PATH = CONFIG_DIR / 'settings.yaml'
HISTORY_DB_PATH = DATA_DIR / 'chat_history.sqlite3'
EXPORT_DIR = user_documents_path() / APP_NAME
