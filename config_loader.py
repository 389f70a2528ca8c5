"""Helpers for resolving configuration files and export settings."""

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from history_export.assembly import DEFAULT_ARTIFACT_NAME
from history_export.capture import MIN_CAPTURE_SCALE
from history_export.document import DEFAULT_BOT_NAME

DEFAULT_CONFIG_NAME = "config.json"
CONFIG_ENV_VAR = "CHAT_HISTORY_EXPORT_CONFIG"
DEFAULT_SETTLE_DELAY_MS = 300
DEFAULT_SETTLE_TIMEOUT_MS = 5000
DEFAULT_CAPTURE_SCALE = 2


class ConfigError(Exception):
    """Raised when runtime configuration cannot be loaded."""


@dataclass(slots=True)
class ExportSettings:
    """Resolved knobs for one chat history export run."""

    turns_json: Optional[str]
    output_dir: str
    progress_path: str
    artifact_name: str = DEFAULT_ARTIFACT_NAME
    bot_name: str = DEFAULT_BOT_NAME
    settle_delay_ms: int = DEFAULT_SETTLE_DELAY_MS
    settle_timeout_ms: int = DEFAULT_SETTLE_TIMEOUT_MS
    capture_scale: int = DEFAULT_CAPTURE_SCALE


def _resolve_config_path(path: Optional[str]) -> Optional[str]:
    """Return the absolute config path, or None when no default exists.

    An explicit ``path`` or environment override must exist; the default
    ``config.json`` is optional.
    """
    env_override = os.environ.get(CONFIG_ENV_VAR)
    candidate = path or env_override or DEFAULT_CONFIG_NAME
    expanded = os.path.expanduser(candidate)
    if os.path.isabs(expanded) and os.path.isfile(expanded):
        return expanded

    search_roots = [os.getcwd(), os.path.dirname(__file__)]
    for root in search_roots:
        resolved = os.path.abspath(os.path.join(root, expanded))
        if os.path.isfile(resolved):
            return resolved

    if path or env_override:
        raise ConfigError(f"Configuration file not found: {candidate}")
    return None


def _resolve_path(value: str, base_dir: str) -> str:
    """Resolve ``value`` into an absolute path relative to ``base_dir``."""
    expanded = os.path.expanduser(value)
    if os.path.isabs(expanded):
        return expanded
    return os.path.abspath(os.path.join(base_dir, expanded))


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load a JSON config file and normalize any filesystem paths."""
    config_path = _resolve_config_path(path)
    if config_path is None:
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as config_file:
            data = json.load(config_file)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config must be a JSON object: {config_path}")

    base_dir = os.path.dirname(config_path)
    resolved: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str) and key.endswith(("_dir", "_path", "_json")):
            resolved[key] = _resolve_path(value, base_dir)
        else:
            resolved[key] = value

    return resolved


def _as_int(config: Dict[str, Any], key: str, default: int) -> int:
    value = config.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{key} must be an integer, got {value!r}") from exc


def resolve_export_settings(
    *,
    config_path: Optional[str] = None,
    turns_json: Optional[str] = None,
    output_dir: Optional[str] = None,
    progress_path: Optional[str] = None,
) -> ExportSettings:
    """Resolve export settings by combining CLI overrides with config."""
    config = load_config(config_path)
    cwd = os.getcwd()

    resolved_turns = turns_json or config.get("turns_json")
    resolved_output = output_dir or config.get("output_dir") or "exports"
    resolved_progress = (
        progress_path or config.get("progress_path") or "progress.json"
    )

    settings = ExportSettings(
        turns_json=(
            _resolve_path(resolved_turns, cwd) if resolved_turns else None
        ),
        output_dir=_resolve_path(resolved_output, cwd),
        progress_path=_resolve_path(resolved_progress, cwd),
        artifact_name=str(
            config.get("artifact_name", DEFAULT_ARTIFACT_NAME)
        ),
        bot_name=str(config.get("bot_name", DEFAULT_BOT_NAME)),
        settle_delay_ms=_as_int(
            config, "settle_delay_ms", DEFAULT_SETTLE_DELAY_MS
        ),
        settle_timeout_ms=_as_int(
            config, "settle_timeout_ms", DEFAULT_SETTLE_TIMEOUT_MS
        ),
        capture_scale=_as_int(
            config, "capture_scale", DEFAULT_CAPTURE_SCALE
        ),
    )

    if settings.capture_scale < MIN_CAPTURE_SCALE:
        raise ConfigError(
            f"capture_scale must be at least {MIN_CAPTURE_SCALE}"
        )
    if settings.settle_delay_ms < 0 or settings.settle_timeout_ms <= 0:
        raise ConfigError(
            "settle_delay_ms must be >= 0 and settle_timeout_ms > 0"
        )
    if not settings.artifact_name.endswith(".pdf"):
        raise ConfigError("artifact_name must end with .pdf")

    return settings
