"""Shared fixtures: in-memory classes and on-disk JSON corpora."""

import json

import pytest

from data_miner.assets.package import AssetClass, DefaultObject, PropertyTag


def _props(values: dict) -> list[dict]:
    return [{"name": k, "type": "", "value": v} for k, v in values.items()]


class CorpusBuilder:
    """Writes inspect-style JSON packages under ``root``."""

    def __init__(self, root):
        self.root = root
        self.root.mkdir(parents=True, exist_ok=True)

    def _write(self, game_path: str, data: dict):
        rel = game_path.replace("/Game/", "", 1)
        path = self.root / f"{rel}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    def add_blueprint(self, game_path: str, super_ref: str, **props):
        """Add a blueprint package; the class is ``<asset name>_C``."""
        asset = game_path.rsplit("/", 1)[-1]
        class_name = f"{asset}_C"
        self._write(
            game_path,
            {
                "path": game_path,
                "exports": [
                    {
                        "name": class_name,
                        "class": "BlueprintGeneratedClass",
                        "super": super_ref,
                        "default_object": f"Default__{class_name}",
                        "properties": [],
                    },
                    {
                        "name": f"Default__{class_name}",
                        "class": class_name,
                        "properties": _props(props),
                    },
                ],
            },
        )
        return class_name

    def add_package(self, game_path: str, exports: list[dict]):
        """Add a package with hand-written exports."""
        self._write(game_path, {"path": game_path, "exports": exports})

    def add_table(self, game_path: str, rows: dict):
        """Add a DataTable package. ``rows`` maps row name -> {property: value}."""
        asset = game_path.rsplit("/", 1)[-1]
        self._write(
            game_path,
            {
                "path": game_path,
                "exports": [
                    {
                        "name": asset,
                        "class": "DataTable",
                        "rows": {name: _props(values) for name, values in rows.items()},
                    }
                ],
            },
        )


@pytest.fixture
def corpus(tmp_path):
    return CorpusBuilder(tmp_path / "Content")


@pytest.fixture
def make_class():
    """Factory for AssetClass instances with an in-memory default object.

    ``props=None`` gives a class whose default object cannot be found.
    """

    def _make(name, super_name=None, props=None):
        if props is None:
            return AssetClass(name, super_name, defaults_loader=lambda: None)
        defaults = DefaultObject(
            name=f"Default__{name}",
            properties=tuple(PropertyTag(k, "", v) for k, v in props.items()),
        )
        return AssetClass(name, super_name, defaults_loader=lambda: defaults)

    return _make
