"""CLI の既定値を保存する設定ストア。"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Mapping, Optional

SCHEMA_VERSION = 1
CONFIG_DIR_ENV = "IMAGE_GLIDER_CONFIG_DIR"
_SETTINGS_FILENAME = "settings.json"
_APP_DIR_NAME = "ImageGlider"


def default_tool_settings() -> dict[str, Any]:
    """設定のデフォルト値を返す。"""
    return {
        "schema_version": SCHEMA_VERSION,
        "quality": 90,
        "compression_level": 75,
        "thumbnail_size": 150,
        "watermark_margin": 20,
        "watermark_opacity": 50,
        "watermark_font_size": 24,
        "watermark_font_color": "#FFFFFF",
        "max_workers": 1,
        "recursive": False,
        "show_progress": True,
        "log_retention_days": 30,
        "log_max_files": 100,
    }


class ToolSettingsStore:
    """設定のロード/保存を行う。"""

    def __init__(self, settings_path: Optional[Path] = None) -> None:
        self.settings_path = settings_path or self._build_default_settings_path()

    def load(self) -> dict[str, Any]:
        """設定を読み込む。ファイルがない・壊れている場合はデフォルト値。"""
        defaults = default_tool_settings()

        loaded = self._read_json(self.settings_path)
        if loaded is not None:
            defaults.update(self._known_keys(loaded))
            defaults["schema_version"] = SCHEMA_VERSION
        return defaults

    def save(self, settings: Mapping[str, Any]) -> None:
        """設定を保存する。"""
        payload = default_tool_settings()
        payload.update(self._known_keys(settings))
        payload["schema_version"] = SCHEMA_VERSION

        self.settings_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.settings_path.with_suffix(f"{self.settings_path.suffix}.tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        tmp_path.replace(self.settings_path)

    @staticmethod
    def _known_keys(data: Mapping[str, Any]) -> dict[str, Any]:
        known = default_tool_settings().keys()
        return {k: v for k, v in data.items() if k in known}

    @staticmethod
    def _read_json(path: Path) -> Optional[dict[str, Any]]:
        if not path.exists():
            return None
        try:
            with path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError):
            return None
        if not isinstance(data, dict):
            return None
        return data

    @staticmethod
    def _build_default_settings_path() -> Path:
        override = os.environ.get(CONFIG_DIR_ENV)
        if override:
            return Path(override) / _SETTINGS_FILENAME

        if os.name == "nt":
            app_data = os.environ.get("APPDATA")
            if app_data:
                return Path(app_data) / _APP_DIR_NAME / _SETTINGS_FILENAME
            return Path.home() / ".imageglider" / _SETTINGS_FILENAME

        config_home = os.environ.get("XDG_CONFIG_HOME")
        if config_home:
            return Path(config_home) / "imageglider" / _SETTINGS_FILENAME
        return Path.home() / ".config" / "imageglider" / _SETTINGS_FILENAME
