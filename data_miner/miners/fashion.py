import re

from data_miner.assets import load_data_table, read_text, read_texture
from data_miner.combine import RawVariantRecord, VariantCombiner
from data_miner.core.log import get_logger
from data_miner.output import csv_str, db_str, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner
from .gametypes import FEMALE, MALE, read_gender

logger = get_logger(__name__)

FASHION_TABLE = "/Game/Data/DataTables/DT_Fashion"

# Trailing "(Male)", "（女）" etc. on per-gender outfit names
_GENDER_SUFFIX_RE = re.compile(r"\s*[(\[（【][^)\]）】]*[)\]）】]\s*$")


def strip_gender_suffix(name: str) -> str:
    stripped = _GENDER_SUFFIX_RE.sub("", name)
    return stripped or name


@register_miner
class FashionMiner(MinerBase):
    """Outfits, one row per icon with the male and female variant ids."""

    name = "Fashion"

    def __init__(self):
        self.combiner = VariantCombiner(slots=(MALE, FEMALE))

    def load_records(self, context: MinerContext) -> list[RawVariantRecord]:
        rows = load_data_table(context.source, FASHION_TABLE)
        if rows is None:
            return []

        records = []
        for row_name, props in rows:
            try:
                fashion_id = int(row_name)
            except ValueError:
                logger.warning("Failed to parse ID '%s'. Skipping this Fashion.", row_name)
                continue

            title = read_text(props.get("FashionName"))
            icon = read_texture(props.get("FashionIcon"))
            gender = read_gender(props.get("XingBie"))
            if title is None or icon is None or gender is None:
                logger.warning(
                    "Failed to read required properties. Skipping Fashion '%d'.", fashion_id
                )
                continue

            records.append(
                RawVariantRecord(
                    id=fashion_id,
                    key=icon.name,
                    discriminator=gender,
                    title=title,
                    description=read_text(props.get("FashionDesc")),
                    icon=icon,
                )
            )

        records.sort(key=lambda r: r.id)
        return records

    def run(self, context: MinerContext) -> MinerResult:
        records = self.load_records(context)
        if not records:
            return self.fail("No fashion data found.")

        outfits = []
        for combined in self.combiner.combine(records):
            male = combined.get(MALE)
            female = combined.get(FEMALE)
            title = combined.title
            if male is not None and female is not None:
                title = strip_gender_suffix(title)
            outfits.append(
                (
                    title,
                    combined.description,
                    male.id if male else 0,
                    female.id if female else 0,
                    combined.icon.name,
                )
            )

        write_csv(
            self.csv_path(context),
            "name,desc,id_m,id_f,icon",
            (
                f"{csv_str(name)},{csv_str(desc) or ''},{id_m},{id_f},{csv_str(icon)}"
                for name, desc, id_m, id_f, icon in outfits
            ),
        )

        # create table `fashion` (`name` varchar(63) not null, `desc` varchar(127),
        #   `id_m` int not null, `id_f` int not null, `icon` varchar(127) not null,
        #   primary key (`name`))
        sql = context.sql
        sql.start_table("fashion")
        for name, desc, id_m, id_f, icon in outfits:
            sql.write_row(f"{db_str(name)}, {db_str(desc)}, {id_m}, {id_f}, {db_str(icon)}")
        sql.end_table()

        return self.finish(rows=len(outfits))
