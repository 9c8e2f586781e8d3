"""Gateway: YAML-backed settings store — implements SettingsStore port."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import yaml

from router_chat.l1_entities.config import ChatSettings

log = logging.getLogger('rc.settings')

SettingsBuilder = Callable[[dict], ChatSettings]


class YamlSettingsStore:
    """Keeps user overrides in a YAML file; *builder* merges them with defaults and validates.

    Only the user's own keys are written back, so changed defaults still apply.
    """

    def __init__(self, path: Path, builder: SettingsBuilder) -> None:
        self._path = path
        self._builder = builder
        self._raw: dict = {}
        self._settings = self.reload()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def settings(self) -> ChatSettings:
        return self._settings

    def reload(self) -> ChatSettings:
        self._raw = load_raw(self._path)
        self._settings = self._builder(self._raw)
        return self._settings

    def set_model(self, model_id: str) -> None:
        self.update(model=model_id)

    def update(self, **changes: object) -> ChatSettings:
        """Validate *changes* on top of the current overrides, then persist them."""
        candidate = {**self._raw, **changes}
        settings = self._builder(candidate)
        self._raw = candidate
        self._settings = settings
        self._save()
        return settings

    def _save(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(yaml.safe_dump(self._raw, allow_unicode=True, sort_keys=True), encoding='utf-8')
        log.debug('Saved settings to %s (keys=%s)', self._path, sorted(self._raw))


def load_raw(path: Path) -> dict:
    """Read the YAML overrides file; missing or empty file → {}."""
    if not path.exists():
        return {}
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ValueError(f'Settings file must contain a mapping: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
