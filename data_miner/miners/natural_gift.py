"""Natural gifts (character traits).

Each gift tier is its own table row; tiers of one gift share title, icon and
a description that differs only in numbers. Rows are combined per gift with
the per-tier values merged into one description.
"""

from data_miner.assets import load_data_table, read_enum, read_int, read_text, read_texture
from data_miner.combine import RawVariantRecord, VariantCombiner, description_template
from data_miner.core.log import get_logger
from data_miner.output import csv_str, db_bool, db_str, db_val, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner

logger = get_logger(__name__)

GIFT_TABLE = "/Game/Blueprints/DataTable/NaturalGift/DT_GiftZongBiao"

# ENaturalGiftSource, in enum order, with display names
GIFT_SOURCES = (
    ("Normal", "Normal"),
    ("BornChuShen", "Origin"),
    ("BornBuLuoCiTiao", "Tribe"),
    ("ChengHao", "Title"),
    ("JingLi", "Experience"),
    ("XiHao", "Preference"),
    ("XingGe", "Personality"),
    ("GuanXi", "Relationship"),
)
_SOURCE_INDEX = {name: i for i, (name, _) in enumerate(GIFT_SOURCES)}

LEVEL_SLOTS = {1: "level1", 2: "level2", 3: "level3"}


def is_good_gift(gift_id: int) -> bool:
    """Whether a gift id falls in one of the beneficial ranges."""
    return (
        gift_id < 200000
        or 300000 <= gift_id < 510000
        or (600000 <= gift_id < 900000 and gift_id not in (600051, 600054, 600056))
    )


def parse_gift_source(value, gift_id: int) -> str:
    text = read_enum(value)
    if text is None:
        return GIFT_SOURCES[0][0]
    if text not in _SOURCE_INDEX:
        logger.warning('Unable to parse gift source "%s" for gift %d', text, gift_id)
        return GIFT_SOURCES[0][0]
    return text


def translate_gift_source(source: str) -> str:
    index = _SOURCE_INDEX.get(source)
    return GIFT_SOURCES[index][1] if index is not None else "Unknown"


def gift_identity(record: RawVariantRecord):
    """Gifts are the same when everything but the tier numbers matches."""
    return (
        record.extra["source"],
        record.extra["is_good"],
        (record.title or "").lower(),
        description_template(record.description or "").lower(),
        record.icon.name.lower() if record.icon else None,
    )


@register_miner
class NaturalGiftMiner(MinerBase):
    name = "Gift"

    def __init__(self):
        self.combiner = VariantCombiner(
            slots=tuple(LEVEL_SLOTS.values()),
            assign=lambda record: LEVEL_SLOTS.get(record.discriminator),
            merge_text=True,
        )

    def load_records(self, context: MinerContext) -> list[RawVariantRecord]:
        rows = load_data_table(context.source, GIFT_TABLE)
        if rows is None:
            return []

        records = []
        for row_name, props in rows:
            try:
                gift_id = int(row_name)
            except ValueError:
                logger.warning("Natural gift table row key is not a valid integer: %s", row_name)
                continue

            record = RawVariantRecord(
                id=gift_id,
                key=None,
                discriminator=read_int(props.get("Star")) or 0,
                title=read_text(props.get("Title")),
                description=read_text(props.get("Desc")),
                icon=read_texture(props.get("Pic")),
                extra={
                    "source": parse_gift_source(props.get("NGEffectSource"), gift_id),
                    "is_good": is_good_gift(gift_id),
                },
            )
            records.append(record)

        records.sort(key=lambda r: r.id)
        return records

    def run(self, context: MinerContext) -> MinerResult:
        records = self.load_records(context)
        if not records:
            return self.fail("Unable to locate natural gift data.")

        gifts = []
        for combined in self.combiner.combine(records, key_fn=gift_identity):
            first = combined.primary
            gifts.append(
                {
                    "source": first.extra["source"],
                    "is_good": first.extra["is_good"],
                    "ids": [
                        v.id if v else None
                        for v in (combined.get(slot) for slot in LEVEL_SLOTS.values())
                    ],
                    "title": combined.title,
                    "description": combined.description,
                    "icon": combined.icon.name if combined.icon else None,
                    "first_id": first.id,
                }
            )
        gifts.sort(key=lambda g: (_SOURCE_INDEX[g["source"]], g["first_id"]))

        write_csv(
            self.csv_path(context),
            "positive,source,level1,level2,level3,title,description,icon",
            (
                ",".join(
                    [
                        db_bool(g["is_good"]),
                        translate_gift_source(g["source"]),
                        *("" if i is None else str(i) for i in g["ids"]),
                        csv_str(g["title"]) or "",
                        csv_str(g["description"]) or "",
                        g["icon"] or "",
                    ]
                )
                for g in gifts
            ),
        )

        # create table `ng` (`positive` bool, `source` int, `id1` int, `id2` int,
        #   `id3` int, `title` varchar(255) not null, `description` varchar(1023),
        #   `icon` varchar(255))
        sql = context.sql
        sql.start_table("ng")
        for g in gifts:
            ids = ", ".join(db_val(i) for i in g["ids"])
            sql.write_row(
                f"{db_bool(g['is_good'])}, {_SOURCE_INDEX[g['source']]}, {ids}, "
                f"{db_str(g['title'])}, {db_str(g['description'])}, {db_str(g['icon'])}"
            )
        sql.end_table()

        return self.finish(rows=len(gifts))
