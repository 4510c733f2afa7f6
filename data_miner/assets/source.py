"""
Asset sources - enumerate packages and blueprint classes from the corpus.

Two sources share one interface:
- JsonAssetSource: reads inspect JSON exported ahead of time
  (``<root>/Blueprints/BP_Axe.json`` is ``/Game/Blueprints/BP_Axe``)
- ParserAssetSource: runs ``AssetParser inspect`` on each .uasset under a
  Content folder

Environment variables:
- DATA_MINER_ASSET_TIMEOUT: Timeout in seconds for single asset parsing (default: 60)
"""

import json
import os
import subprocess
from pathlib import Path
from typing import Iterator, Optional

from data_miner.core.log import get_logger
from data_miner.errors import AssetSourceError
from data_miner.pathutil import normalize_game_path, to_game_path_sep

from .package import AssetClass, AssetPackage, DefaultObject, PropertyTag, DATA_TABLE_CLASS

logger = get_logger(__name__)


def get_asset_timeout() -> int:
    """Resolve single-asset timeout from env with a safe fallback."""
    raw = os.environ.get("DATA_MINER_ASSET_TIMEOUT", "60")
    try:
        return max(1, int(raw))
    except (TypeError, ValueError):
        return 60


class AssetSource:
    """Base class for asset corpora.

    Subclasses provide ``_iter_files``, ``_load_file`` and the game path
    mapping; everything else is shared.
    """

    file_suffix = ""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    # -- Subclass hooks ------------------------------------------------- #

    def _load_file(self, fs_path: Path) -> Optional[dict]:
        raise NotImplementedError

    # -- Path mapping --------------------------------------------------- #

    def _game_path_to_fs(self, game_path: str) -> Path:
        """Convert game path to filesystem path."""
        path = normalize_game_path(game_path)
        path = path.replace("/Game/", "", 1) if path.startswith("/Game/") else path.lstrip("/")
        return (self.root / path).with_suffix(self.file_suffix)

    def _fs_to_game_path(self, fs_path: Path) -> str:
        """Convert filesystem path to game path."""
        try:
            rel = fs_path.relative_to(self.root)
        except ValueError:
            return to_game_path_sep(str(fs_path))
        game_path = "/Game/" + to_game_path_sep(str(rel))
        if game_path.endswith(self.file_suffix):
            game_path = game_path[: -len(self.file_suffix)]
        return game_path

    # -- Enumeration ---------------------------------------------------- #

    def _iter_files(self) -> Iterator[Path]:
        if not self.root.is_dir():
            raise AssetSourceError(f"Asset corpus not found: {self.root}")
        try:
            files = sorted(self.root.rglob(f"*{self.file_suffix}"))
        except OSError as e:
            raise AssetSourceError(f"Unable to enumerate {self.root}: {e}") from e
        yield from files

    def _read_package(self, fs_path: Path) -> Optional[AssetPackage]:
        data = self._load_file(fs_path)
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning("Unexpected package data in %s", fs_path)
            return None
        try:
            return AssetPackage.from_dict(data, path=self._fs_to_game_path(fs_path))
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Unexpected package data in %s: %s", fs_path, e)
            return None

    def iter_packages(self) -> Iterator[AssetPackage]:
        """Yield every readable package. Unreadable packages are logged and skipped."""
        for fs_path in self._iter_files():
            package = self._read_package(fs_path)
            if package is not None:
                yield package

    def find_package(self, game_path: str) -> Optional[AssetPackage]:
        """Load one package by game path, or None if it does not exist."""
        fs_path = self._game_path_to_fs(game_path)
        if not fs_path.exists():
            return None
        return self._read_package(fs_path)

    def iter_classes(self) -> Iterator[AssetClass]:
        """Yield one AssetClass per package that defines a blueprint class."""
        for package in self.iter_packages():
            export = package.blueprint_class_export()
            if export is None:
                continue

            def loader(package=package, export=export):
                return package.find_default_object(export)

            yield AssetClass(
                name=export.name,
                super_name=export.super_name,
                package_path=package.path,
                defaults_loader=loader,
            )


class JsonAssetSource(AssetSource):
    """Reads pre-exported inspect JSON files from a directory tree."""

    file_suffix = ".json"

    def _load_file(self, fs_path: Path) -> Optional[dict]:
        try:
            with open(fs_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Unable to read %s: %s", fs_path, e)
            return None


class ParserAssetSource(AssetSource):
    """Runs AssetParser ``inspect`` against each .uasset under a Content folder."""

    file_suffix = ".uasset"

    def __init__(self, content_path: str | Path, parser_path: str | Path = None):
        super().__init__(content_path)
        if parser_path is None:
            from data_miner.parser_resolver import resolve_parser_path

            parser_path = resolve_parser_path()
        self.parser_path = Path(parser_path) if parser_path else None

    def _iter_files(self) -> Iterator[Path]:
        if not self.parser_path or not self.parser_path.exists():
            raise AssetSourceError(
                f"AssetParser not found at {self.parser_path}. "
                "Set parser_path in config.json or DATA_MINER_PARSER."
            )
        yield from super()._iter_files()

    def _run_parser(self, command: str, fs_path: Path) -> Optional[str]:
        """Run an AssetParser command and return its stdout, or None on failure."""
        try:
            result = subprocess.run(
                [str(self.parser_path), command, str(fs_path)],
                capture_output=True,
                text=True,
                timeout=get_asset_timeout(),
            )
        except subprocess.TimeoutExpired:
            logger.warning("AssetParser timed out on %s", fs_path)
            return None
        except OSError as e:
            logger.warning("Failed to run AssetParser on %s: %s", fs_path, e)
            return None

        if result.returncode != 0:
            logger.warning(
                "AssetParser %s failed on %s: %s",
                command,
                fs_path,
                (result.stderr or "")[:500],
            )
            return None
        return result.stdout

    def _load_file(self, fs_path: Path) -> Optional[dict]:
        output = self._run_parser("inspect", fs_path)
        if not output:
            return None
        try:
            return json.loads(output)
        except json.JSONDecodeError:
            logger.warning("AssetParser returned invalid JSON for %s", fs_path)
            return None


def open_source(content_path: str | Path, parser_path: str | Path = None) -> AssetSource:
    """Pick the source for a corpus folder.

    Folders holding .uasset files are read through AssetParser; anything
    else is treated as pre-exported JSON.
    """
    root = Path(content_path)
    if not root.is_dir():
        raise AssetSourceError(f"Asset corpus not found: {root}")
    if parser_path or next(root.rglob("*.uasset"), None) is not None:
        return ParserAssetSource(root, parser_path)
    return JsonAssetSource(root)


def load_data_table(
    source: AssetSource, game_path: str
) -> Optional[list[tuple[str, dict[str, PropertyTag]]]]:
    """Load a data table as ``[(row_name, {property_name: PropertyTag})]``.

    Returns None (after logging an error) when the table cannot be found.
    """
    package = source.find_package(game_path)
    if package is None:
        logger.error("Unable to locate asset %s.", game_path.rsplit("/", 1)[-1])
        return None

    table = next((e for e in package.exports if e.class_name == DATA_TABLE_CLASS), None)
    if table is None:
        logger.error("Error loading %s", game_path.rsplit("/", 1)[-1])
        return None

    rows = []
    for row_name, props in table.rows.items():
        by_name: dict[str, PropertyTag] = {}
        for prop in props:
            by_name.setdefault(prop.name, prop)
        rows.append((row_name, by_name))
    return rows


def load_default_object(source: AssetSource, game_path: str) -> Optional[DefaultObject]:
    """Load the default object of the blueprint class in ``game_path``.

    Used for singleton manager blueprints whose defaults hold game-wide
    settings. Returns None (after logging an error) when it cannot be found.
    """
    asset = game_path.rsplit("/", 1)[-1]
    package = source.find_package(game_path)
    if package is None:
        logger.error("Unable to locate asset %s.", asset)
        return None

    class_export = package.blueprint_class_export()
    defaults = package.find_default_object(class_export) if class_export else None
    if defaults is None:
        logger.error("Unable to load the default object of %s", asset)
    return defaults
