# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.
"""Central configuration for local action / workflow reference checks.

All values have sensible defaults and can be overridden via environment variables
using the ``LOCAL_GITHUB_ACTIONS_`` prefix:

  LOCAL_GITHUB_ACTIONS_FILE_EXIST_ERRORS      Report references whose target is missing
                                              (default: true)
  LOCAL_GITHUB_ACTIONS_FILE_PLACEMENT_ERRORS  Report actions under .github/workflows and
                                              workflows under .github/actions
                                              (default: true)
  LOCAL_GITHUB_ACTIONS_LOG_LEVEL              Log level (default: WARNING)

Editors address the two checks by their setting names, ``file-exist-errors`` and
``file-placement-errors`` (optionally prefixed with ``local-github-actions.``);
:meth:`LocalActionsConfig.get` accepts both spellings.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_SECTION = "local-github-actions"

_VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "WARN", "ERROR", "CRITICAL"})


class LocalActionsConfig(BaseSettings):
    """Settings read from defaults and ``LOCAL_GITHUB_ACTIONS_*`` env vars."""

    model_config = SettingsConfigDict(env_prefix="LOCAL_GITHUB_ACTIONS_")

    file_exist_errors: bool = True
    file_placement_errors: bool = True

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _valid_log_level(cls, v: str) -> str:
        if v.upper() not in _VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level={v!r} is not a valid log level. "
                f"Valid values: {', '.join(sorted(_VALID_LOG_LEVELS))}"
            )
        return v.upper()

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a setting by its editor key, e.g. ``file-exist-errors``."""
        if key.startswith(CONFIG_SECTION + "."):
            key = key[len(CONFIG_SECTION) + 1:]
        name = key.replace("-", "_")
        if name not in type(self).model_fields:
            return default
        value = getattr(self, name)
        return default if value is None else value


# ── Module-level singleton ─────────────────────────────────────────────────────

_config: Optional[LocalActionsConfig] = None


def get_config() -> LocalActionsConfig:
    """Return the process-wide config singleton.

    Creates a fresh ``LocalActionsConfig`` on first call (reading env vars).
    Subsequent calls return the cached instance.
    """
    global _config
    if _config is None:
        _config = LocalActionsConfig()
    return _config


def load_and_validate_config(**overrides: Any) -> LocalActionsConfig:
    """Build, validate, cache and return the config.

    Keyword *overrides* take precedence over environment variables.  Raises
    ``pydantic.ValidationError`` if any value is invalid.
    """
    global _config
    cfg = LocalActionsConfig(**overrides)
    _config = cfg
    return cfg


def reset_config() -> None:
    """Drop the cached singleton so the next ``get_config()`` re-reads the env."""
    global _config
    _config = None
