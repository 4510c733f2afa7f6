"""Proficiencies (ShuLianDu), read from the proficiency panel widget."""

from typing import Optional

from data_miner.assets import read_enum, read_text, read_texture
from data_miner.core.log import get_logger
from data_miner.output import csv_str, db_str, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner

logger = get_logger(__name__)

PROFICIENCY_WIDGET = "/Game/Blueprints/UI/ShuLianDu/WBP_ShuLianDu"
ENTRY_CLASS = "WBP_ShuLianDuSingle_C"

# EProficiency, in declaration order
PROFICIENCIES = (
    "FaMu", "CaiKuang", "ZhongZhi", "BuZhuo", "CaiShou", "YangZhi", "TuZai",
    "PaoMu", "QieShi", "RongLian", "RouPi", "FangZhi", "ZhiTao", "YanMo",
    "QiJu", "WuQi", "JiaZhou", "ZhuBao", "JianZhu", "LianJin", "PengRen",
    "Dao", "ShuangDao", "Mao", "Chui", "QuanTao", "Gong", "DaJian", "PouJie",
    "DunPai",
)


@register_miner
class ProficiencyMiner(MinerBase):
    """One row per proficiency, including those the widget does not show."""

    name = "Proficiency"

    def load_entries(self, context: MinerContext) -> Optional[dict[str, tuple]]:
        package = context.source.find_package(PROFICIENCY_WIDGET)
        if package is None:
            logger.error("Unable to locate asset WBP_ShuLianDu.")
            return None

        entries: dict[str, tuple] = {}
        for export in package.exports:
            if export.class_name != ENTRY_CLASS:
                continue
            props = {p.name: p for p in export.properties}
            proficiency = read_enum(props.get("ShuLianDuType"))
            name = read_text(props.get("SLDText"))
            if proficiency not in PROFICIENCIES or name is None:
                logger.warning(
                    "Could not read an instance of %s (%s). Skipping it.", ENTRY_CLASS, export.name
                )
                continue
            if proficiency in entries:
                logger.warning(
                    "Found an additional instance of %s for the %s proficiency. Skipping it.",
                    ENTRY_CLASS,
                    proficiency,
                )
                continue
            entries[proficiency] = (name, read_texture(props.get("SLDImage")))
        return entries

    def run(self, context: MinerContext) -> MinerResult:
        entries = self.load_entries(context)
        if entries is None:
            return self.fail("Unable to load proficiency data.")

        rows = []
        for idx, proficiency in enumerate(PROFICIENCIES):
            name, icon = entries.get(proficiency, (None, None))
            rows.append((idx, proficiency, name, icon.name if icon else None))

        write_csv(
            self.csv_path(context),
            "idx,id,name,icon",
            (
                f"{idx},{proficiency},{csv_str(name) or ''},{csv_str(icon) or ''}"
                for idx, proficiency, name, icon in rows
            ),
        )

        # create table `sld` (`id` int not null, `type` varchar(127) not null,
        #   `name` varchar(127), `icon` varchar(127), primary key (`id`))
        sql = context.sql
        sql.start_table("sld")
        for idx, proficiency, name, icon in rows:
            sql.write_row(f"{idx}, {db_str(proficiency)}, {db_str(name)}, {db_str(icon)}")
        sql.end_table()

        return self.finish(rows=len(rows))
