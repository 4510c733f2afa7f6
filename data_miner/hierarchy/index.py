"""
Class hierarchy index - blueprint inheritance lookups.

Built once per run from every blueprint class in the corpus, then shared
read-only by all miners. Answers two questions:
- which classes derive (transitively) from X
- is A derived from B

Usage:
    index = ClassHierarchyIndex.build(source.iter_classes())
    for cls in index.get_derived_classes("HDaoJuBase"):
        ...
"""

import time
from typing import Iterable, Iterator, Optional

from data_miner.assets.package import AssetClass
from data_miner.core.log import get_logger

logger = get_logger(__name__)


class ClassHierarchyIndex:
    """Name -> class map plus the inverse (children) of the ancestor relation.

    Ancestors that are never defined as blueprint classes (native code
    classes such as ``HDaoJuBase``) get placeholder entries, so every
    indexed ancestor reference resolves inside the map and native roots can
    be queried like any other class. Placeholders are never returned as
    derived classes.
    """

    def __init__(self, classes: dict[str, AssetClass], children: dict[str, list[str]]):
        self._classes = classes
        self._children = children

    @classmethod
    def build(cls, classes: Iterable[AssetClass]) -> "ClassHierarchyIndex":
        """Index every class from ``classes``.

        Errors raised while iterating ``classes`` propagate unchanged: without
        a complete index no miner can run.
        """
        logger.info("Loading blueprint hierarchy...")
        start = time.perf_counter()

        class_map: dict[str, AssetClass] = {}
        for asset_class in classes:
            existing = class_map.get(asset_class.name)
            if existing is None:
                class_map[asset_class.name] = asset_class
            elif existing.super_name != asset_class.super_name:
                logger.warning(
                    "Class %s found multiple times with different super classes (%s, %s)",
                    asset_class.name,
                    existing.super_name,
                    asset_class.super_name,
                )

        children: dict[str, list[str]] = {}
        placeholders: dict[str, AssetClass] = {}
        for name, asset_class in class_map.items():
            super_name = asset_class.super_name
            if super_name is None:
                continue
            if super_name not in class_map and super_name not in placeholders:
                placeholders[super_name] = AssetClass.placeholder(super_name)
            children.setdefault(super_name, []).append(name)

        class_map.update(placeholders)

        logger.info(
            "Blueprint hierarchy load completed in %.3fs (%d classes, %d native roots)",
            time.perf_counter() - start,
            len(class_map) - len(placeholders),
            len(placeholders),
        )
        return cls(class_map, children)

    # ------------------------------------------------------------------ #
    # Lookups
    # ------------------------------------------------------------------ #

    def __contains__(self, name: str) -> bool:
        return name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def get(self, name: str) -> Optional[AssetClass]:
        return self._classes.get(name)

    def get_ancestor(self, asset_class: AssetClass) -> Optional[AssetClass]:
        """Immediate ancestor of ``asset_class``, or None at a root."""
        if asset_class.super_name is None:
            return None
        return self._classes.get(asset_class.super_name)

    def iter_ancestors(self, name: str, include_self: bool = False) -> Iterator[AssetClass]:
        """Walk upward from ``name``.

        The walk stops at a root, at an ancestor that was never indexed, or
        when a class repeats. A repeat means the corpus has an inheritance
        cycle; it is logged as an error and only this walk is abandoned.
        """
        current = self._classes.get(name)
        if current is None:
            return

        visited = {current.name}
        if include_self:
            yield current

        while current.super_name is not None:
            ancestor = self._classes.get(current.super_name)
            if ancestor is None:
                return
            if ancestor.name in visited:
                logger.error(
                    "Inheritance cycle detected while walking ancestors of %s (revisited %s)",
                    name,
                    ancestor.name,
                )
                return
            visited.add(ancestor.name)
            yield ancestor
            current = ancestor

    def get_derived_classes(self, base_class_name: str) -> list[AssetClass]:
        """Every class transitively derived from ``base_class_name``.

        Pre-order depth-first, children visited in indexing order, so repeated
        calls return the same sequence. The base class itself is excluded.
        Unknown names and leaf classes give an empty list.
        """
        if base_class_name not in self._children:
            return []

        result: list[AssetClass] = []
        visited = {base_class_name}
        stack = list(reversed(self._children[base_class_name]))
        while stack:
            name = stack.pop()
            if name in visited:
                logger.error(
                    "Inheritance cycle detected below %s (revisited %s)",
                    base_class_name,
                    name,
                )
                continue
            visited.add(name)
            result.append(self._classes[name])
            stack.extend(reversed(self._children.get(name, ())))
        return result

    def is_derived_from(self, class_name: str, ancestor_class_name: str) -> bool:
        """True when ``ancestor_class_name`` is ``class_name`` or one of its ancestors."""
        if class_name not in self._classes or ancestor_class_name not in self._classes:
            return False
        for asset_class in self.iter_ancestors(class_name, include_self=True):
            if asset_class.name == ancestor_class_name:
                return True
        return False

    def stats(self) -> dict:
        """Counts shown by ``data-miner derived``."""
        placeholders = sum(1 for c in self._classes.values() if c.is_placeholder)
        return {
            "classes": len(self._classes) - placeholders,
            "native_roots": placeholders,
            "with_children": len(self._children),
        }
