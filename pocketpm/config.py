"""
Config loader for pocketpm.
Reads config.yaml once at startup. All other modules import from here.
Set POCKETPM_CONFIG to point at a different file.
"""

import os
import re
import yaml
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

_CONFIG_PATH = Path(
    os.environ.get("POCKETPM_CONFIG", str(Path(__file__).parent.parent / "config.yaml"))
)

_config: dict | None = None

DEFAULTS = {
    "storage": {
        "backend": "sqlite",
        "sqlite_path": "./data/pocketpm.db",
        "key_prefix": "conversations",
    },
    "server": {"host": "0.0.0.0", "port": 8000},
    "logging": {"level": "INFO", "file": None},
    "history": {"default_user": "default"},
}


def _resolve_env_vars(value: str) -> str:
    """Replace ${ENV_VAR} patterns with actual environment variable values."""
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, "")
    return re.sub(r"\$\{(\w+)\}", replacer, value)


def _walk_and_resolve(obj):
    """Recursively resolve env vars in all string values."""
    if isinstance(obj, dict):
        return {k: _walk_and_resolve(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_walk_and_resolve(v) for v in obj]
    elif isinstance(obj, str):
        return _resolve_env_vars(obj)
    return obj


def _merge_defaults(raw: dict) -> dict:
    """Fill in missing sections/keys from DEFAULTS (one level deep)."""
    merged = {}
    for section, values in DEFAULTS.items():
        merged[section] = {**values, **(raw.get(section) or {})}
    for key, value in raw.items():
        if key not in merged:
            merged[key] = value
    return merged


def load_config(path: Path | None = None) -> dict:
    """Load and cache config from YAML file."""
    global _config
    if _config is not None:
        return _config

    config_path = path or _CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    _config = _merge_defaults(_walk_and_resolve(raw))
    return _config


def get_config() -> dict:
    """Return cached config, loading if necessary."""
    if _config is None:
        return load_config()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the file."""
    global _config
    _config = None
