"""Load agent configuration from the environment and an optional YAML file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from loguru import logger

from .constants import (
    DEFAULT_AUTOMATION_LOG_LIMIT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODEL,
    DEFAULT_NAVIGATE_DELAY_SECONDS,
    DEFAULT_STEP_DELAY_SECONDS,
    DEFAULT_USER_ID,
)


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring {}={!r}: not a number", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring {}={!r}: must not be negative", name, raw)
        return default
    return value


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring {}={!r}: not an integer", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring {}={!r}: must be positive", name, raw)
        return default
    return value


class AgentConfig:
    """Runtime settings for the agent backend."""

    _FLOAT_FIELDS = {"step_delay_seconds", "navigate_delay_seconds"}
    _INT_FIELDS = {"automation_log_limit"}
    _STR_FIELDS = {
        "openai_api_key",
        "openai_model",
        "log_level",
        "default_user_id",
        "wp_site_url",
        "wp_username",
        "wp_app_password",
    }
    _OPTIONAL_FIELDS = {"openai_api_key", "wp_site_url", "wp_username", "wp_app_password"}

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        env = os.environ if environ is None else environ

        # Completion service
        self.openai_api_key: Optional[str] = env.get("OPENAI_API_KEY") or None
        self.openai_model: str = env.get("OPENAI_MODEL") or DEFAULT_MODEL

        # Task execution and simulated browser timing
        self.step_delay_seconds = _env_float(env, "AGENT_STEP_DELAY_SECONDS", DEFAULT_STEP_DELAY_SECONDS)
        self.navigate_delay_seconds = _env_float(env, "AGENT_NAVIGATE_DELAY_SECONDS", DEFAULT_NAVIGATE_DELAY_SECONDS)

        self.automation_log_limit = _env_int(env, "AGENT_AUTOMATION_LOG_LIMIT", DEFAULT_AUTOMATION_LOG_LIMIT)
        self.log_level: str = (env.get("AGENT_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
        self.default_user_id: str = env.get("AGENT_DEFAULT_USER_ID") or DEFAULT_USER_ID

        # WordPress integration defaults
        self.wp_site_url: Optional[str] = env.get("WP_SITE_URL") or None
        self.wp_username: Optional[str] = env.get("WP_ADMIN_USER") or None
        self.wp_app_password: Optional[str] = env.get("WP_APP_PASSWORD") or None

    @property
    def has_wordpress_defaults(self) -> bool:
        return bool(self.wp_site_url and self.wp_username and self.wp_app_password)

    def apply(self, overrides: Mapping[str, Any]) -> list[str]:
        """Overlay values from a config mapping.

        Args:
            overrides: Keys matching attribute names.

        Returns:
            Human-readable problems for keys that were skipped.
        """
        problems: list[str] = []
        for key, value in overrides.items():
            if key in self._FLOAT_FIELDS:
                try:
                    number = float(value)
                except (TypeError, ValueError):
                    problems.append(f"{key}: expected a number, got {value!r}")
                    continue
                if number < 0:
                    problems.append(f"{key}: must not be negative")
                    continue
                setattr(self, key, number)
            elif key in self._INT_FIELDS:
                try:
                    number = int(value)
                except (TypeError, ValueError):
                    problems.append(f"{key}: expected an integer, got {value!r}")
                    continue
                if number < 1:
                    problems.append(f"{key}: must be positive")
                    continue
                setattr(self, key, number)
            elif key in self._STR_FIELDS:
                if key not in self._OPTIONAL_FIELDS and (value is None or not str(value).strip()):
                    problems.append(f"{key}: must not be empty")
                    continue
                setattr(self, key, None if value is None else str(value))
            else:
                problems.append(f"{key}: unknown setting")
        if self.log_level:
            self.log_level = self.log_level.upper()
        return problems

    def to_dict(self, *, redact: bool = True) -> dict[str, Any]:
        data = {
            key: getattr(self, key)
            for key in sorted(self._FLOAT_FIELDS | self._INT_FIELDS | self._STR_FIELDS)
        }
        if redact:
            for secret in ("openai_api_key", "wp_app_password"):
                if data.get(secret):
                    data[secret] = "***"
        return data


def _load_config_file(path: Path) -> tuple[dict[str, Any], str | None]:
    if not path.exists():
        return {}, f"{path.name}: file not found"
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        return {}, f"{path.name}: {exc.__class__.__name__}: {exc}"
    except yaml.YAMLError as exc:
        return {}, f"{path.name}: YAMLError: {exc}"
    if data is None:
        return {}, None
    if not isinstance(data, dict):
        return {}, f"{path.name}: expected mapping, got {type(data).__name__}"
    return data, None


def load_agent_config(
    config_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AgentConfig:
    """Build the agent config from the environment, then overlay a YAML file.

    Args:
        config_file: Optional YAML file. Falls back to ``AGENT_CONFIG_FILE``.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        The resolved config. File problems are logged, never raised.
    """
    env = os.environ if environ is None else environ
    config = AgentConfig(env)
    path = config_file or (Path(env["AGENT_CONFIG_FILE"]) if env.get("AGENT_CONFIG_FILE") else None)
    if path is None:
        return config
    data, err = _load_config_file(Path(path))
    if err:
        logger.warning("Config file ignored: {}", err)
        return config
    for problem in config.apply(data):
        logger.warning("Config setting ignored: {}", problem)
    return config
