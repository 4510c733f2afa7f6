"""
Miner base classes and registry.

A miner turns one slice of the asset corpus into a table. Miners register
themselves with ``@register_miner`` and are picked up by the runner by name:

    @register_miner
    class FashionMiner(MinerBase):
        name = "Fashion"

        def run(self, context):
            ...
            return self.finish(rows=len(data))
"""

import os
from dataclasses import dataclass
from typing import Iterable, Optional

from data_miner.assets.package import PropertyTag
from data_miner.assets.properties import TextureRef
from data_miner.assets.source import AssetSource
from data_miner.core.log import get_logger
from data_miner.errors import HierarchyError
from data_miner.hierarchy import AttributeResolver, ClassHierarchyIndex, QuerySpec
from data_miner.output import SqlWriter

logger = get_logger(__name__)

# Lowercased miner name -> miner class
_MINER_REGISTRY: dict[str, type] = {}


def register_miner(cls):
    """Class decorator that registers a miner under its lowercased name."""
    key = cls.name.lower()
    if key in _MINER_REGISTRY and _MINER_REGISTRY[key] is not cls:
        raise ValueError(f"Miner name '{cls.name}' is already registered")
    _MINER_REGISTRY[key] = cls
    return cls


def get_miner_class(name: str) -> Optional[type]:
    return _MINER_REGISTRY.get(name.lower())


def iter_miner_classes() -> list[type]:
    """All registered miners, sorted by name."""
    return sorted(_MINER_REGISTRY.values(), key=lambda c: c.name.lower())


def list_miners() -> tuple[list[str], list[str]]:
    """Return (default miners, additional miners) by name."""
    defaults = [c.name for c in iter_miner_classes() if c.default_enabled]
    extras = [c.name for c in iter_miner_classes() if not c.default_enabled]
    return defaults, extras


@dataclass
class MinerContext:
    """Everything a miner needs for one run.

    ``sql`` is the miner's own writer, positioned inside its section.
    """

    source: AssetSource
    output_path: str
    sql: SqlWriter
    index: Optional[ClassHierarchyIndex] = None

    def require_index(self) -> ClassHierarchyIndex:
        if self.index is None:
            raise HierarchyError("Class hierarchy has not been built for this run")
        return self.index


@dataclass
class MinerResult:
    name: str
    success: bool
    rows: int = 0
    message: str = ""


class MinerBase:
    """Base class for all data miners."""

    name: str = ""
    default_enabled: bool = True
    requires_hierarchy: bool = False

    def run(self, context: MinerContext) -> MinerResult:
        raise NotImplementedError

    def csv_path(self, context: MinerContext, filename: str = None) -> str:
        """``<output>/<Name>/<name>.csv`` unless a filename is given."""
        return os.path.join(
            context.output_path, self.name, filename or f"{self.name.lower()}.csv"
        )

    def finish(self, rows: int = 0, message: str = "") -> MinerResult:
        return MinerResult(name=self.name, success=True, rows=rows, message=message)

    def fail(self, message: str) -> MinerResult:
        logger.error("[%s] %s", self.name, message)
        return MinerResult(name=self.name, success=False, message=message)


@dataclass
class ObjectInfo:
    """Display data resolved for one blueprint class."""

    class_name: str
    name: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[TextureRef] = None
    extras: Optional[dict[str, PropertyTag]] = None

    def sort_key(self):
        # Unnamed objects sort first, then by name, then by class name
        return (self.name is not None, self.name or "", self.class_name)


class SubclassMinerBase(MinerBase):
    """Base class for miners that report every subclass of some base classes.

    Subclasses set the source property names; ``find_objects`` does the
    hierarchy walk and attribute resolution.
    """

    requires_hierarchy = True

    name_property: str = "Name"
    description_property: Optional[str] = None
    icon_property: Optional[str] = None
    extra_properties: tuple[str, ...] = ()

    def query_spec(self) -> QuerySpec:
        return QuerySpec.display(
            name=self.name_property,
            description=self.description_property,
            icon=self.icon_property,
            extras=self.extra_properties,
        )

    def find_objects(self, context: MinerContext, base_class_names: Iterable[str]) -> list[ObjectInfo]:
        index = context.require_index()
        resolver = AttributeResolver(index)
        spec = self.query_spec()

        seen: set[str] = set()
        infos: list[ObjectInfo] = []
        for base_name in dict.fromkeys(base_class_names):
            derived = index.get_derived_classes(base_name)
            if not derived:
                logger.debug("[%s] No classes derive from %s", self.name, base_name)
            for asset_class in derived:
                if asset_class.name in seen:
                    continue
                seen.add(asset_class.name)

                query = resolver.resolve(asset_class, spec)
                extras = None
                if self.extra_properties:
                    extras = {
                        e: query.get(e) for e in self.extra_properties if query.is_filled(e)
                    }
                infos.append(
                    ObjectInfo(
                        class_name=asset_class.name,
                        name=query.get("name"),
                        description=query.get("description"),
                        icon=query.get("icon"),
                        extras=extras,
                    )
                )

        infos.sort(key=ObjectInfo.sort_key)
        return infos
