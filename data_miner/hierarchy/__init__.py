from .index import ClassHierarchyIndex
from .resolver import (
    PROPERTY,
    TEXT,
    TEXTURE,
    AttributeQuery,
    AttributeResolver,
    QuerySpec,
    SlotSpec,
)

__all__ = [
    "ClassHierarchyIndex",
    "AttributeQuery",
    "AttributeResolver",
    "QuerySpec",
    "SlotSpec",
    "TEXT",
    "TEXTURE",
    "PROPERTY",
]
