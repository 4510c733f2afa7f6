from .engine import (
    ON_ERROR_RAISE,
    ON_ERROR_SKIP,
    CombinedRecord,
    RawVariantRecord,
    VariantCombiner,
    group_by_identity,
)
from .text import description_template, merge_descriptions, numeric_tokens

__all__ = [
    "CombinedRecord",
    "RawVariantRecord",
    "VariantCombiner",
    "group_by_identity",
    "merge_descriptions",
    "description_template",
    "numeric_tokens",
    "ON_ERROR_SKIP",
    "ON_ERROR_RAISE",
]
