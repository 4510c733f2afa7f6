import json
import os
from typing import Optional

# Set to True (or DATA_MINER_DEBUG=1) to see per-asset diagnostics
DEBUG = os.environ.get("DATA_MINER_DEBUG", "").lower() in ("1", "true", "yes")

_CORE_DIR = os.path.dirname(__file__)
_TOOL_DIR = os.path.dirname(_CORE_DIR)
DEFAULT_CONFIG_FILE = os.path.join(_TOOL_DIR, "config.json")

DEFAULT_OUTPUT_DIR = "out"
DEFAULT_WORKERS = 4
MAX_WORKERS = 32

# Keys persisted in config.json. Anything else is ignored on save.
CONFIG_KEYS = ("content_path", "output_path", "parser_path", "miners", "workers")


def get_config_path() -> str:
    """Return the config.json location, honouring DATA_MINER_CONFIG."""
    return os.environ.get("DATA_MINER_CONFIG") or DEFAULT_CONFIG_FILE


def load_config(config_path: str = None) -> dict:
    """Load saved settings from config.json. Missing or unreadable files give {}."""
    config_path = config_path or get_config_path()
    if not os.path.exists(config_path):
        return {}
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except (json.JSONDecodeError, OSError):
        return {}
    if not isinstance(config, dict):
        return {}
    return {k: v for k, v in config.items() if k in CONFIG_KEYS}


def save_config_values(values: dict, config_path: str = None) -> dict:
    """Merge values into config.json. A value of None removes the key."""
    config_path = config_path or get_config_path()

    existing = load_config(config_path)
    for key, value in values.items():
        if key not in CONFIG_KEYS:
            raise ValueError(
                f"Unknown config key '{key}'. Valid keys: {', '.join(CONFIG_KEYS)}"
            )
        if value is None:
            existing.pop(key, None)
        else:
            existing[key] = value

    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(existing, f, indent=2)
    return existing


def _clamp_workers(value) -> int:
    try:
        return max(1, min(MAX_WORKERS, int(value)))
    except (TypeError, ValueError):
        return DEFAULT_WORKERS


def _split_miners(value) -> Optional[list[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        names = [m.strip() for m in value.split(",")]
    else:
        names = [str(m).strip() for m in value]
    names = [m for m in names if m]
    return names or None


def resolve_run_options(args=None, saved: dict = None) -> dict:
    """Resolve CLI args + saved config + env into effective run options.

    Cascade: explicit CLI arg > saved config > env var > hardcoded default.
    """
    if saved is None:
        saved = load_config()

    def pick(attr: str, env_name: Optional[str], default=None):
        cli_value = getattr(args, attr, None) if args is not None else None
        if cli_value is not None:
            return cli_value
        if saved.get(attr) is not None:
            return saved[attr]
        if env_name and os.environ.get(env_name):
            return os.environ[env_name]
        return default

    content_path = pick("content_path", "DATA_MINER_CONTENT")
    output_path = pick("output_path", "DATA_MINER_OUTPUT", DEFAULT_OUTPUT_DIR)
    parser_path = pick("parser_path", "DATA_MINER_PARSER")
    workers = _clamp_workers(pick("workers", "DATA_MINER_WORKERS", DEFAULT_WORKERS))
    miners = _split_miners(pick("miners", None))

    return {
        "content_path": os.path.abspath(os.path.expanduser(content_path))
        if content_path
        else None,
        "output_path": os.path.abspath(os.path.expanduser(output_path)),
        "parser_path": parser_path,
        "workers": workers,
        "miners": miners,
    }
