import re
from typing import Optional

from data_miner.assets import load_data_table, read_bool, read_enum, read_int, read_texture
from data_miner.combine import CombinedRecord, RawVariantRecord, VariantCombiner
from data_miner.core.log import get_logger
from data_miner.output import db_bool, db_str, db_val, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner
from .gametypes import FEMALE, MALE, read_gender

logger = get_logger(__name__)

TATTOO_TABLE = "/Game/Blueprints/ZiYuanGuanLi/DT_WenShenTable"

# EHWenShenBuWei -> body location
LOCATIONS = {
    "Tou": "head",
    "Xiong": "chest",
    "Shou": "arm",
    "Jiao": "leg",
}

TATTOO_SLOTS = tuple(f"{loc}_{g}" for loc in LOCATIONS.values() for g in (MALE, FEMALE))

_TRAILING_DIGITS_RE = re.compile(r"^(.*?)(\d+)$")


def tattoo_name(icon_name: str) -> str:
    """Derive the shared tattoo name from an icon name.

    ``WenShen_Tou_3`` and ``WenShen3_Tou`` both become ``"WenShen 3"``: the
    first ``_`` part, numbered by the last part when that is an integer,
    otherwise by digits trailing the first part.
    """
    parts = icon_name.split("_")
    head = parts[0]
    if len(parts) > 1 and parts[-1].isdigit():
        return f"{head} {int(parts[-1])}"
    match = _TRAILING_DIGITS_RE.match(head)
    if match and match.group(1):
        return f"{match.group(1)} {int(match.group(2))}"
    return head


@register_miner
class TattooMiner(MinerBase):
    """Body paint. One row per design, with ids for each body part and gender."""

    name = "Tattoo"

    def __init__(self):
        self.combiner = VariantCombiner(
            slots=TATTOO_SLOTS,
            assign=lambda record: f"{record.discriminator[0]}_{record.discriminator[1]}",
        )

    def load_records(self, context: MinerContext) -> list[RawVariantRecord]:
        rows = load_data_table(context.source, TATTOO_TABLE)
        if rows is None:
            return []

        records = []
        for row_name, props in rows:
            try:
                tattoo_id = int(row_name)
            except ValueError:
                logger.warning("Failed to parse ID '%s'. Skipping this tattoo.", row_name)
                continue

            icon = read_texture(props.get("CaiHuiIcon"))
            gender = read_gender(props.get("XingBie"))
            location = LOCATIONS.get(read_enum(props.get("BuWei")))
            special = read_bool(props.get("bTeShu"))
            if icon is None or gender is None or location is None or special is None:
                logger.warning(
                    "Failed to read required properties. Skipping tattoo '%d'.", tattoo_id
                )
                continue

            records.append(
                RawVariantRecord(
                    id=tattoo_id,
                    key=(tattoo_name(icon.name), special),
                    discriminator=(location, gender),
                    icon=icon,
                    extra={"other_gender_id": read_int(props.get("YiXingCaiHuiIndex"))},
                )
            )

        records.sort(key=lambda r: r.id)
        return records

    @staticmethod
    def location_ids(combined: CombinedRecord, location: str):
        """(male id, female id, icon name) for one body location."""
        male = combined.get(f"{location}_{MALE}")
        female = combined.get(f"{location}_{FEMALE}")

        def other(record: Optional[RawVariantRecord]):
            if record is None:
                return None
            return record.extra.get("other_gender_id") or None

        male_id = male.id if male else other(female)
        female_id = female.id if female else other(male)
        present = male or female
        icon = present.icon.name if present else None
        return male_id, female_id, icon

    def run(self, context: MinerContext) -> MinerResult:
        records = self.load_records(context)
        if not records:
            return self.fail("Failed to load any tattoo instances.")

        tattoos = []
        for combined in self.combiner.combine(records):
            name, special = combined.key
            cells = []
            for location in LOCATIONS.values():
                cells.extend(self.location_ids(combined, location))
            tattoos.append((name, special, cells))

        header = ["name", "special"]
        for location in LOCATIONS.values():
            header.extend([f"{location}_m", f"{location}_f", f"{location}_ico"])

        write_csv(
            self.csv_path(context),
            ",".join(header),
            (
                ",".join([name, db_bool(special)] + ["" if c is None else str(c) for c in cells])
                for name, special, cells in tattoos
            ),
        )

        # create table `wenshen` (`name` varchar(127) not null, `special` bool not null,
        #   `head_m` int, `head_f` int, `head_ico` varchar(127), ... `leg_ico` varchar(127),
        #   primary key (`name`, `special`))
        sql = context.sql
        sql.start_table("wenshen")
        for name, special, cells in tattoos:
            values = [db_str(name), db_bool(special)]
            for i, cell in enumerate(cells):
                values.append(db_str(cell) if i % 3 == 2 else db_val(cell))
            sql.write_row(", ".join(values))
        sql.end_table()

        return self.finish(rows=len(tattoos))
