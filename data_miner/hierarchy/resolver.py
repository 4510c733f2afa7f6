"""Inherited attribute resolution.

Game classes routinely leave display properties unset on a leaf and rely on
an ancestor's default. ``AttributeResolver.resolve`` walks a class and its
ancestors, filling each requested slot from the nearest default object that
sets it.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from data_miner.assets.package import AssetClass, PropertyTag
from data_miner.assets.properties import read_text, read_texture
from data_miner.core.log import get_logger

from .index import ClassHierarchyIndex

logger = get_logger(__name__)

TEXT = "text"
TEXTURE = "texture"
PROPERTY = "property"
SLOT_KINDS = (TEXT, TEXTURE, PROPERTY)


@dataclass(frozen=True)
class SlotSpec:
    """Where a slot's value comes from and how it is read."""

    source_property: str
    kind: str = TEXT

    def __post_init__(self):
        if self.kind not in SLOT_KINDS:
            raise ValueError(f"Unknown slot kind: {self.kind}")

    def read(self, prop: PropertyTag):
        if self.kind == TEXT:
            return read_text(prop)
        if self.kind == TEXTURE:
            return read_texture(prop)
        return prop if prop.value is not None else None


@dataclass(frozen=True)
class QuerySpec:
    """Named slots to resolve; ``required`` names the slot an entity needs."""

    slots: dict[str, SlotSpec]
    required: str = "name"

    def __post_init__(self):
        if self.required not in self.slots:
            raise ValueError(f"Required slot '{self.required}' is not defined")

    @classmethod
    def display(
        cls,
        name: str = "Name",
        description: Optional[str] = "Description",
        icon: Optional[str] = "Icon",
        extras: Iterable[str] = (),
    ) -> "QuerySpec":
        """The usual name/description/icon query plus opaque extra properties."""
        slots = {"name": SlotSpec(name, TEXT)}
        if description:
            slots["description"] = SlotSpec(description, TEXT)
        if icon:
            slots["icon"] = SlotSpec(icon, TEXTURE)
        for extra in extras:
            slots[extra] = SlotSpec(extra, PROPERTY)
        return cls(slots=slots, required="name")


@dataclass
class AttributeQuery:
    """Resolved slot values for one class."""

    class_name: str
    spec: QuerySpec
    values: dict[str, object] = field(default_factory=dict)

    def get(self, slot: str, default=None):
        return self.values.get(slot, default)

    def is_filled(self, slot: str) -> bool:
        return slot in self.values

    @property
    def missing(self) -> list[str]:
        return [slot for slot in self.spec.slots if slot not in self.values]

    @property
    def is_complete(self) -> bool:
        return not self.missing

    @property
    def has_required(self) -> bool:
        return self.is_filled(self.spec.required)


class AttributeResolver:
    """Fill query slots by walking a class's ancestor chain."""

    def __init__(self, index: ClassHierarchyIndex):
        self.index = index

    def resolve(self, start_class: AssetClass, spec: QuerySpec) -> AttributeQuery:
        result = AttributeQuery(class_name=start_class.name, spec=spec)

        for asset_class in self._chain(start_class):
            defaults = self._load_defaults(asset_class)
            if defaults is not None:
                for slot, slot_spec in spec.slots.items():
                    if slot in result.values:
                        continue
                    prop = defaults.find(slot_spec.source_property)
                    if prop is None:
                        continue
                    value = slot_spec.read(prop)
                    if value is not None:
                        result.values[slot] = value
            if result.is_complete:
                break

        return result

    def _chain(self, start_class: AssetClass):
        yield start_class
        if start_class.name in self.index:
            yield from self.index.iter_ancestors(start_class.name)
            return
        # Classes outside the index still resolve through their indexed ancestors
        if start_class.super_name is not None:
            ancestor = self.index.get(start_class.super_name)
            if ancestor is not None and ancestor.name != start_class.name:
                yield ancestor
                yield from self.index.iter_ancestors(ancestor.name)

    @staticmethod
    def _load_defaults(asset_class: AssetClass):
        if asset_class.is_placeholder:
            return None
        try:
            defaults = asset_class.load_defaults()
        except Exception as e:
            logger.warning("Unable to load default object for %s: %s", asset_class.name, e)
            return None
        if defaults is None:
            logger.debug("Class %s has no default object", asset_class.name)
        return defaults
