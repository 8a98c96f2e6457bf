from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping


DEFAULT_CONFIG_PATH = Path("config.toml")


def load_raw_config(path: str | Path | None = None) -> Dict[str, Any]:
    """
    Load the bot's ``config.toml`` (working directory by default).

    Returns an empty dict when the file is missing so every setting falls
    back to its environment variable.
    """
    target = Path(path) if path is not None else DEFAULT_CONFIG_PATH
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        return tomllib.load(handle)


def section(config: Mapping[str, Any] | None, name: str) -> Mapping[str, Any]:
    """Return the ``[intro_curator.<name>]`` table, or an empty mapping."""
    return (config or {}).get("intro_curator", {}).get(name, {})


def setting(table: Mapping[str, Any], key: str, env: str, default: Any = None) -> Any:
    """
    Resolve one setting.

    A key present in ``config.toml`` wins; otherwise the environment variable
    ``env`` is used, then ``default``. Empty strings count as unset.
    """
    value = table.get(key)
    if value is not None and value != "":
        return value
    value = os.getenv(env)
    if value is not None and value != "":
        return value
    return default


__all__ = ["load_raw_config", "section", "setting", "DEFAULT_CONFIG_PATH"]
