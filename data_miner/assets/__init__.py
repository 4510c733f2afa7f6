from .package import (
    AssetClass,
    AssetExport,
    AssetPackage,
    DefaultObject,
    PropertyTag,
    class_name_from_ref,
)
from .properties import (
    TextureRef,
    read_array,
    read_bool,
    read_enum,
    read_float,
    read_int,
    read_map,
    read_struct,
    read_text,
    read_texture,
)
from .source import (
    AssetSource,
    JsonAssetSource,
    ParserAssetSource,
    load_data_table,
    load_default_object,
    open_source,
)

__all__ = [
    "AssetClass",
    "AssetExport",
    "AssetPackage",
    "DefaultObject",
    "PropertyTag",
    "class_name_from_ref",
    "TextureRef",
    "read_text",
    "read_texture",
    "read_int",
    "read_bool",
    "read_enum",
    "read_float",
    "read_array",
    "read_struct",
    "read_map",
    "AssetSource",
    "JsonAssetSource",
    "ParserAssetSource",
    "load_data_table",
    "load_default_object",
    "open_source",
]
