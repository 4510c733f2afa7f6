"""Locate the AssetParser binary.

Candidates, first existing one wins:
1. DATA_MINER_PARSER environment variable
2. ``asset_parser_path`` in local_config.json (next to the package)
3. In-tree build output: self-contained publish, then framework-dependent

When nothing exists the self-contained path is returned so error messages
can say where the binary was expected.
"""

import json
import os
import platform
from pathlib import Path
from typing import Optional

LOCAL_CONFIG_NAME = "local_config.json"


def _local_config_parser(config_dir: Path) -> Optional[str]:
    config_file = config_dir / LOCAL_CONFIG_NAME
    if not config_file.exists():
        return None
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError):
        return None
    if not isinstance(data, dict):
        return None
    return data.get("asset_parser_path")


def _runtime_id() -> str:
    """.NET runtime identifier of this machine (non-Windows)."""
    machine = platform.machine()
    if platform.system() == "Darwin":
        return "osx-arm64" if machine == "arm64" else "osx-x64"
    return "linux-arm64" if machine == "aarch64" else "linux-x64"


def resolve_parser_path(local_config_dir: Path | None = None) -> str | None:
    """Resolve the AssetParser binary path.

    Args:
        local_config_dir: Directory holding local_config.json. Defaults to
            the data_miner package directory; the in-tree build is looked up
            in ``<local_config_dir>/../AssetParser``.
    """
    config_dir = Path(local_config_dir) if local_config_dir is not None else Path(__file__).parent
    build_dir = config_dir / ".." / "AssetParser" / "bin" / "Release" / "net8.0"

    if platform.system() == "Windows":
        in_tree = [build_dir / "AssetParser.exe"]
    else:
        in_tree = [build_dir / _runtime_id() / "publish" / "AssetParser", build_dir / "AssetParser"]

    candidates = [os.environ.get("DATA_MINER_PARSER"), _local_config_parser(config_dir)]
    candidates.extend(str(p) for p in in_tree)
    for candidate in candidates:
        if candidate and os.path.exists(candidate):
            return candidate
    return str(in_tree[0])
