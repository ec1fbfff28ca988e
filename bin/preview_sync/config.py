"""Centralized configuration management."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional, Union

import yaml

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    'scroll_debounce_ms': 'PREVIEW_SYNC_SCROLL_DEBOUNCE_MS',
    'highlight_debounce_ms': 'PREVIEW_SYNC_HIGHLIGHT_DEBOUNCE_MS',
    'content_match_threshold': 'PREVIEW_SYNC_CONTENT_THRESHOLD',
    'click_match_threshold': 'PREVIEW_SYNC_CLICK_THRESHOLD',
}

_DEFAULTS = {
    'scroll_debounce_ms': 50,
    'highlight_debounce_ms': 100,
    'content_match_threshold': 0.5,
    'click_match_threshold': 0.3,
}


class ConfigError(ValueError):
    """Raised for invalid configuration values or unknown keys."""


@dataclass
class SyncConfig:
    """Tunables of the sync engine"""
    scroll_debounce_ms: Optional[int] = None  # Coalesces rapid keystrokes before scrolling the preview (default 50)
    highlight_debounce_ms: Optional[int] = None  # Highlight lags behind scrolling to avoid flicker (default 100)
    content_match_threshold: Optional[float] = None  # Editor -> preview content matching (default 0.5)
    click_match_threshold: Optional[float] = None  # Preview click -> source line fuzzy pass (default 0.3)

    def __post_init__(self):
        # 명시적으로 넘긴 값(YAML 포함) > 환경 변수 > 기본값
        for field_name, env_name in _ENV_OVERRIDES.items():
            if getattr(self, field_name) is not None:
                continue
            value = os.environ.get(env_name)
            if value is None or value == '':
                value = _DEFAULTS[field_name]
            setattr(self, field_name, value)
        self._coerce_and_validate()

    def _coerce_and_validate(self):
        for field_name in ('scroll_debounce_ms', 'highlight_debounce_ms'):
            value = _coerce(field_name, getattr(self, field_name), int)
            if value < 0:
                raise ConfigError(f"{field_name} must be >= 0: {value}")
            setattr(self, field_name, value)
        for field_name in ('content_match_threshold', 'click_match_threshold'):
            value = _coerce(field_name, getattr(self, field_name), float)
            if not 0.0 <= value < 1.0:
                raise ConfigError(f"{field_name} must be in [0, 1): {value}")
            setattr(self, field_name, value)

    @property
    def scroll_debounce_seconds(self) -> float:
        return self.scroll_debounce_ms / 1000.0

    @property
    def highlight_debounce_seconds(self) -> float:
        return self.highlight_debounce_ms / 1000.0


def _coerce(field_name: str, value, kind):
    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be a number: {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{field_name} must be a number: {value!r}") from e


def load_config(config_path: Optional[Union[str, Path]] = None) -> SyncConfig:
    """YAML 설정 파일을 로드하여 SyncConfig 를 반환한다.

    최상위 키 또는 `preview_sync:` 섹션 아래의 키를 읽는다.
    config_path 가 None 이면 기본값(+ 환경 변수)을 사용한다.
    """
    if config_path is None:
        return SyncConfig()

    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {config_path}\n"
            f"설정 파일 경로를 확인하거나 --config 옵션 없이 실행하세요."
        )
    data = yaml.safe_load(path.read_text(encoding='utf-8')) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")
    section = data.get('preview_sync', data)
    if not isinstance(section, dict):
        raise ConfigError(f"'preview_sync' section must be a mapping: {config_path}")

    known = {f.name for f in fields(SyncConfig)}
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    config = SyncConfig(**section)
    logger.info(f"Config 로드 완료: {path} ({config})")
    return config
