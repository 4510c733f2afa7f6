"""
Asset package schemas.

Packages arrive as the JSON emitted by ``AssetParser inspect`` (or the same
shape exported ahead of time). The fields used by the miner:

    {
        "path": "/Game/Blueprints/DaoJu/BP_DaoJu_Axe",
        "exports": [
            {
                "name": "BP_DaoJu_Axe_C",
                "class": "BlueprintGeneratedClass",
                "super": "HDaoJuWuQi",
                "default_object": "Default__BP_DaoJu_Axe_C",
                "properties": []
            },
            {
                "name": "Default__BP_DaoJu_Axe_C",
                "class": "BP_DaoJu_Axe_C",
                "properties": [
                    {"name": "Name", "type": "TextProperty", "value": "Stone Axe"}
                ]
            }
        ]
    }

Data tables carry their rows on the table export:

    {"name": "DT_Fashion", "class": "DataTable",
     "rows": {"1001": [{"name": "FashionName", ...}, ...]}}
"""

import threading
from dataclasses import dataclass, field
from typing import Callable, Optional

BLUEPRINT_CLASS = "BlueprintGeneratedClass"
DATA_TABLE_CLASS = "DataTable"
DEFAULT_OBJECT_PREFIX = "Default__"


def class_name_from_ref(ref: Optional[str]) -> Optional[str]:
    """Reduce a class reference to its object name.

    ``/Script/WS.HDaoJuWuQi`` becomes ``HDaoJuWuQi`` and
    ``/Game/BP/BP_Parent.BP_Parent_C`` becomes ``BP_Parent_C``. Blueprint
    ``_C`` suffixes are kept because class exports are named with them.
    """
    if not ref or ref == "None":
        return None
    if "." in ref:
        ref = ref.rsplit(".", 1)[-1]
    elif "/" in ref:
        ref = ref.rsplit("/", 1)[-1]
    return ref or None


@dataclass(frozen=True)
class PropertyTag:
    """A single named property value from an export."""

    name: str
    type: str = ""
    value: object = None

    @classmethod
    def from_dict(cls, data: dict) -> "PropertyTag":
        return cls(
            name=str(data.get("name", "")),
            type=str(data.get("type", "")),
            value=data.get("value"),
        )


@dataclass(frozen=True)
class DefaultObject:
    """The class default object holding inherited property values."""

    name: str
    properties: tuple[PropertyTag, ...] = ()

    def find(self, property_name: str) -> Optional[PropertyTag]:
        """Return the first property matching ``property_name`` case-insensitively."""
        wanted = property_name.lower()
        for prop in self.properties:
            if prop.name.lower() == wanted:
                return prop
        return None


@dataclass
class AssetExport:
    """One export entry of a package."""

    name: str
    class_name: str
    properties: list[PropertyTag] = field(default_factory=list)
    super_name: Optional[str] = None
    default_object: Optional[str] = None
    rows: dict[str, list[PropertyTag]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict) -> "AssetExport":
        rows = {}
        for row_name, row_props in (data.get("rows") or {}).items():
            rows[str(row_name)] = [PropertyTag.from_dict(p) for p in row_props or []]
        return cls(
            name=str(data.get("name", "")),
            class_name=str(data.get("class", "")),
            properties=[PropertyTag.from_dict(p) for p in data.get("properties") or []],
            super_name=class_name_from_ref(data.get("super")),
            default_object=data.get("default_object") or None,
            rows=rows,
        )

    @property
    def is_blueprint_class(self) -> bool:
        return self.class_name == BLUEPRINT_CLASS


@dataclass
class AssetPackage:
    """A parsed asset package (one .uasset)."""

    path: str
    exports: list[AssetExport] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict, path: str = None) -> "AssetPackage":
        return cls(
            path=path or str(data.get("path", "")),
            exports=[AssetExport.from_dict(e) for e in data.get("exports") or []],
        )

    def find_export(self, name: str) -> Optional[AssetExport]:
        for export in self.exports:
            if export.name == name:
                return export
        return None

    def blueprint_class_export(self) -> Optional[AssetExport]:
        """Return the first BlueprintGeneratedClass export, if any."""
        for export in self.exports:
            if export.is_blueprint_class:
                return export
        return None

    def find_default_object(self, class_export: AssetExport) -> Optional[DefaultObject]:
        """Locate the default object for a blueprint class export."""
        candidates = []
        if class_export.default_object:
            candidates.append(class_export.default_object)
        candidates.append(f"{DEFAULT_OBJECT_PREFIX}{class_export.name}")

        for candidate in candidates:
            export = self.find_export(candidate)
            if export is not None:
                return DefaultObject(name=export.name, properties=tuple(export.properties))
        return None


class AssetClass:
    """A blueprint class definition known to the hierarchy.

    ``super_name`` names the immediate ancestor (None for roots). The default
    object is loaded lazily through ``defaults_loader`` the first time it is
    asked for, then cached. Placeholders stand in for native (code) classes
    that only appear as ancestors and have no default object.
    """

    __slots__ = (
        "name",
        "super_name",
        "package_path",
        "_defaults_loader",
        "_defaults",
        "_loaded",
        "_lock",
        "is_placeholder",
    )

    def __init__(
        self,
        name: str,
        super_name: Optional[str] = None,
        package_path: Optional[str] = None,
        defaults_loader: Optional[Callable[[], Optional[DefaultObject]]] = None,
    ):
        self.name = name
        self.super_name = super_name or None
        self.package_path = package_path
        self._defaults_loader = defaults_loader
        self._defaults: Optional[DefaultObject] = None
        self._loaded = defaults_loader is None
        self._lock = threading.Lock()
        self.is_placeholder = False

    @classmethod
    def placeholder(cls, name: str) -> "AssetClass":
        instance = cls(name)
        instance.is_placeholder = True
        return instance

    def load_defaults(self) -> Optional[DefaultObject]:
        """Return the default object, loading it on first use.

        Loader failures are reported by the caller as a missing default
        object; the exception is not cached so a later call may retry.
        """
        if self._loaded:
            return self._defaults
        with self._lock:
            if not self._loaded:
                self._defaults = self._defaults_loader()
                self._loaded = True
        return self._defaults

    def __repr__(self) -> str:
        return f"AssetClass({self.name!r}, super={self.super_name!r})"
