"""Variant combination - merge per-variant rows into logical entities.

Several data tables hold one row per variant of an entity: one outfit row per
gender, one gift row per star level, one tattoo row per body part and gender.
The combiner groups rows by an identity key, then assigns each row of a group
to a slot named after its discriminator:

    combiner = VariantCombiner(slots=("male", "female"))
    for record in combiner.combine(rows):
        record.get("male"), record.get("female")
"""

from dataclasses import dataclass, field
from typing import Callable, Hashable, Iterable, Optional, Sequence

from data_miner.core.log import get_logger
from data_miner.errors import CombineError

from .text import merge_descriptions

logger = get_logger(__name__)

ON_ERROR_SKIP = "skip"
ON_ERROR_RAISE = "raise"


@dataclass(frozen=True)
class RawVariantRecord:
    """One mined variant row."""

    id: object
    key: Hashable
    discriminator: object
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[object] = None
    extra: dict = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class CombinedRecord:
    """A logical entity built from one or more variants sharing a key.

    ``slots`` maps every configured slot name to its variant, or None when no
    variant filled it. Title, description and icon come from the first filled
    slot unless the combiner merged descriptions.
    """

    key: Hashable
    slots: dict
    title: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[object] = None

    def get(self, slot: str) -> Optional[RawVariantRecord]:
        return self.slots.get(slot)

    @property
    def variants(self) -> list[RawVariantRecord]:
        return [v for v in self.slots.values() if v is not None]

    @property
    def primary(self) -> RawVariantRecord:
        return self.variants[0]

    @property
    def ids(self) -> list:
        return [v.id for v in self.variants]


def group_by_identity(
    records: Iterable[RawVariantRecord],
    key_fn: Callable[[RawVariantRecord], Hashable] = None,
) -> dict:
    """Partition records by identity key, keeping arrival order within groups."""
    groups: dict = {}
    for record in records:
        key = key_fn(record) if key_fn else record.key
        groups.setdefault(key, []).append(record)
    return groups


class VariantCombiner:
    """Assign grouped variants to discriminator slots.

    Args:
        slots: Slot names in output order.
        assign: Maps a record to its slot name. Defaults to the record's
            discriminator. Returning None, or a name outside ``slots``, marks
            the record as an unexpected variant.
        merge_text: Merge the variants' descriptions with
            :func:`merge_descriptions` instead of taking the first one.
            Nothing is merged when the first variant has no description.
    """

    def __init__(
        self,
        slots: Sequence[str],
        assign: Callable[[RawVariantRecord], Optional[str]] = None,
        merge_text: bool = False,
    ):
        if not slots:
            raise ValueError("VariantCombiner needs at least one slot")
        self.slots = tuple(slots)
        self.assign = assign or (lambda record: record.discriminator)
        self.merge_text = merge_text

    def merge(self, group: Sequence[RawVariantRecord], key: Hashable = None) -> CombinedRecord:
        """Merge one identity group.

        ``key`` defaults to the first record's own key.

        Raises:
            CombineError: the group is empty or no record fits a slot.
            DescriptionMismatchError: ``merge_text`` is set and the variant
                descriptions do not line up.
        """
        if not group:
            raise CombineError("Cannot merge an empty variant group")

        if key is None:
            key = group[0].key
        filled: dict = {}
        for record in group:
            slot = self.assign(record)
            if slot is None or slot not in self.slots:
                logger.warning(
                    "Ignoring variant %s of %r: unexpected discriminator %r",
                    record.id,
                    key,
                    record.discriminator,
                )
                continue
            existing = filled.get(slot)
            if existing is not None:
                logger.warning(
                    "Found duplicated variants for %r slot %s: %s and %s",
                    key,
                    slot,
                    existing.id,
                    record.id,
                )
                continue
            filled[slot] = record

        if not filled:
            raise CombineError(f"No variant of {key!r} matches a slot")

        slots = {slot: filled.get(slot) for slot in self.slots}
        variants = [v for v in slots.values() if v is not None]
        first = variants[0]

        description = first.description
        if self.merge_text and len(variants) > 1 and description is not None:
            description = merge_descriptions([v.description or "" for v in variants])

        return CombinedRecord(
            key=key,
            slots=slots,
            title=first.title,
            description=description,
            icon=first.icon,
        )

    def combine(
        self,
        records: Iterable[RawVariantRecord],
        key_fn: Callable[[RawVariantRecord], Hashable] = None,
        on_error: str = ON_ERROR_SKIP,
    ) -> list[CombinedRecord]:
        """Group ``records`` and merge every group, in first-seen key order.

        With ``on_error="skip"`` a group that fails to merge is logged and
        left out; with ``"raise"`` the error propagates to the caller.
        """
        if on_error not in (ON_ERROR_SKIP, ON_ERROR_RAISE):
            raise ValueError(f"on_error must be 'skip' or 'raise', got {on_error!r}")

        combined = []
        for key, group in group_by_identity(records, key_fn).items():
            try:
                combined.append(self.merge(group, key))
            except CombineError as e:
                if on_error == ON_ERROR_RAISE:
                    raise
                logger.error("Skipping %r: %s", key, e)
        return combined
