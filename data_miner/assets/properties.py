"""Readers that turn raw property values into typed values.

Every reader accepts either a PropertyTag or a bare value and returns None
when the value is missing or has the wrong shape.
"""

from dataclasses import dataclass
from typing import Optional

from .package import PropertyTag

# Text values the parser emits for unset FText/FName fields
_EMPTY_TEXT = {"", "None"}


@dataclass(frozen=True)
class TextureRef:
    """Reference to a texture asset, e.g. /Game/UI/Icons/T_Axe.T_Axe."""

    path: str

    @property
    def name(self) -> str:
        tail = self.path.rsplit("/", 1)[-1]
        return tail.split(".", 1)[0]

    def __str__(self) -> str:
        return self.name


def _raw(value):
    if isinstance(value, PropertyTag):
        return value.value
    return value


def read_text(value) -> Optional[str]:
    """Read an FText/FString/FName value."""
    value = _raw(value)
    if isinstance(value, dict):
        for key in ("text", "Text", "SourceString", "value", "CultureInvariantString"):
            if key in value:
                return read_text(value[key])
        return None
    if isinstance(value, str):
        return None if value in _EMPTY_TEXT else value
    return None


def read_texture(value) -> Optional[TextureRef]:
    """Read an object reference that points at a texture."""
    value = _raw(value)
    if isinstance(value, dict):
        for key in ("path", "ObjectPath", "AssetPathName", "value"):
            if key in value:
                return read_texture(value[key])
        return None
    if isinstance(value, str) and value not in _EMPTY_TEXT:
        return TextureRef(value)
    return None


def read_int(value) -> Optional[int]:
    value = _raw(value)
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def read_bool(value) -> Optional[bool]:
    value = _raw(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1"):
            return True
        if lowered in ("false", "0"):
            return False
    return None


def read_enum(value) -> Optional[str]:
    """Read an enum value, dropping any ``EType::`` qualifier."""
    text = read_text(value)
    if text is None:
        return None
    return text[text.rfind(":") + 1 :]


def read_float(value) -> Optional[float]:
    value = _raw(value)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def read_array(value) -> Optional[list]:
    """Read an ArrayProperty (a JSON list)."""
    value = _raw(value)
    return value if isinstance(value, list) else None


def read_struct(value) -> Optional[dict[str, PropertyTag]]:
    """Read a StructProperty as ``{field_name: PropertyTag}``.

    Structs arrive either as ``{"Field": value}`` or as a list of property
    dicts like an export's ``properties``.
    """
    value = _raw(value)
    if isinstance(value, dict):
        return {str(k): PropertyTag(str(k), "", v) for k, v in value.items()}
    if isinstance(value, list):
        fields = {}
        for item in value:
            if not isinstance(item, dict) or "name" not in item:
                return None
            tag = PropertyTag.from_dict(item)
            fields.setdefault(tag.name, tag)
        return fields
    return None


def read_map(value) -> Optional[list[tuple[object, object]]]:
    """Read a MapProperty as ``[(key, value)]`` in stored order.

    Maps arrive as a list of ``{"key": ..., "value": ...}`` entries, or as a
    JSON object when every key is a string.
    """
    value = _raw(value)
    if isinstance(value, dict):
        return list(value.items())
    if isinstance(value, list):
        pairs = []
        for entry in value:
            if not isinstance(entry, dict) or "key" not in entry:
                return None
            pairs.append((entry["key"], entry.get("value")))
        return pairs
    return None
