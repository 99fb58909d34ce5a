from __future__ import annotations

import json
from pathlib import Path

GLOBAL_CONFIG = Path.home() / ".wikipreserve_config.json"


class ConfigUnavailable(RuntimeError):
    pass


def init_settings() -> None:
    GLOBAL_CONFIG.parent.mkdir(parents=True, exist_ok=True)


def _read_global_config() -> dict:
    """Return the parsed global config, or an empty dict on error/missing."""
    if not GLOBAL_CONFIG.exists():
        return {}
    try:
        payload = json.loads(GLOBAL_CONFIG.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return payload if isinstance(payload, dict) else {}


def _read_global_config_strict() -> dict:
    """Like _read_global_config, but an unreadable file raises ConfigUnavailable."""
    if not GLOBAL_CONFIG.exists():
        return {}
    try:
        payload = json.loads(GLOBAL_CONFIG.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise ConfigUnavailable(f"Cannot read {GLOBAL_CONFIG}: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigUnavailable(f"{GLOBAL_CONFIG} does not hold a JSON object")
    return payload


def _update_global_config(updates: dict) -> None:
    payload = _read_global_config()
    payload.update(updates)
    init_settings()
    GLOBAL_CONFIG.write_text(json.dumps(payload, indent=2), encoding="utf-8")


def load_use_markdown_links() -> bool:
    """Return True when new links are written as [label](target) instead of [[target]].

    Defaults to False. A config that exists but cannot be trusted raises
    ConfigUnavailable instead of falling back to the default.
    """
    payload = _read_global_config_strict()
    val = payload.get("use_markdown_links")
    if val is None:
        return False
    if not isinstance(val, bool):
        raise ConfigUnavailable(f"use_markdown_links must be true or false, got {val!r}")
    return val


def save_use_markdown_links(enabled: bool) -> None:
    _update_global_config({"use_markdown_links": bool(enabled)})


def load_preserve_wikilinks() -> bool:
    """Return whether the wikilink guard is installed in new editors (default: True)."""
    payload = _read_global_config()
    val = payload.get("preserve_wikilinks")
    if val is None:
        return True
    return bool(val)


def save_preserve_wikilinks(enabled: bool) -> None:
    _update_global_config({"preserve_wikilinks": bool(enabled)})
