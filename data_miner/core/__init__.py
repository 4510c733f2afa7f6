from .config import (
    DEBUG,
    get_config_path,
    load_config,
    save_config_values,
    resolve_run_options,
)
from .log import get_logger, configure_logging, LogCounter

__all__ = [
    "DEBUG",
    "get_config_path",
    "load_config",
    "save_config_values",
    "resolve_run_options",
    "get_logger",
    "configure_logging",
    "LogCounter",
]
