"""Environment-backed configuration and feature flags.

Dotted keys map to upper-snake environment variables:
``features.mention_analysis.enabled`` reads ``FEATURES_MENTION_ANALYSIS_ENABLED``.
"""

from __future__ import annotations

import os
from typing import Any, Mapping, Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def env_name(key: str) -> str:
    return key.replace(".", "_").replace("-", "_").upper()


class EnvConfig:
    """Reads settings from ``os.environ`` with in-process overrides."""

    def __init__(
        self,
        overrides: Optional[Mapping[str, Any]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._overrides = dict(overrides or {})
        self._environ = environ if environ is not None else os.environ

    def set(self, key: str, value: Any) -> None:
        self._overrides[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._overrides:
            return self._overrides[key]
        raw = self._environ.get(env_name(key))
        if raw is None:
            return default
        if isinstance(default, bool):
            lowered = raw.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
            return default
        if isinstance(default, int):
            try:
                return int(raw)
            except ValueError:
                return default
        if isinstance(default, float):
            try:
                return float(raw)
            except ValueError:
                return default
        return raw

    def get_list(self, key: str) -> list[str]:
        value = self.get(key, "")
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return [item.strip() for item in str(value).split(",") if item.strip()]
