"""Game coefficient settings (XiShu) as exposed in server and world settings."""

from dataclasses import dataclass, field
from typing import Optional

from data_miner.assets import (
    load_data_table,
    load_default_object,
    read_array,
    read_bool,
    read_enum,
    read_float,
    read_int,
    read_map,
    read_struct,
    read_text,
)
from data_miner.core.log import get_logger
from data_miner.output import csv_str, db_bool, db_str, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner

logger = get_logger(__name__)

XISHU_MANAGER = "/Game/Blueprints/ZiYuanGuanLi/BP_GameXiShu_GuanLiQi"
TEXT_TABLE = "/Game/Blueprints/ZiYuanGuanLi/DT_YiWenText"
TIPS_TABLE = "/Game/Blueprints/ZiYuanGuanLi/DT_XiShuTipsText"

# EGameXiShuType, in declaration order
CATEGORIES = (
    "EGXST_TONGYONG",
    "EGXST_JINGYAN",
    "EGXST_CHANCHU",
    "EGXST_JIANZHU",
    "EGXST_SHUAXIN",
    "EGXST_ZHANDOU",
    "EGXST_XIAOHAO",
    "EGXST_RUQIN",
    "EGXST_PVPTIME",
    "EGXST_AI",
)

DIFFICULTIES = ("casual", "easy", "normal", "hard", "master")


@dataclass
class Coefficient:
    name: str
    index: int
    category: int = 0
    is_toggle: bool = False
    is_visible: bool = False
    description: Optional[str] = None
    tip: Optional[str] = None
    min: float = 0.0
    max: float = 0.0
    default: float = 0.0
    difficulty_defaults: list[float] = field(default_factory=lambda: [0.0] * len(DIFFICULTIES))


def _num(value: float) -> str:
    return f"{value:g}"


def load_text_table(context: MinerContext, game_path: str) -> Optional[dict[str, str]]:
    """Row name (lowercased) -> text of the row's first property."""
    rows = load_data_table(context.source, game_path)
    if rows is None:
        return None
    texts = {}
    for row_name, props in rows:
        first = next(iter(props.values()), None)
        text = read_text(first)
        if text is not None:
            texts[row_name.lower()] = text
    return texts


def parse_coefficient(fields: dict, index: int) -> Optional[Coefficient]:
    name = read_text(fields.get("XiShuKey"))
    if name is None:
        return None

    category = read_enum(fields.get("XiShuFenLei"))
    coefficient = Coefficient(
        name=name,
        index=index,
        category=CATEGORIES.index(category) if category in CATEGORIES else 0,
        is_toggle=bool(read_bool(fields.get("IsKaiGuan"))),
        is_visible=bool(read_bool(fields.get("IsShow"))),
        description=read_text(fields.get("Description")),
        min=read_float(fields.get("XiShuMinValue")) or 0.0,
        max=read_float(fields.get("XiShuMaxValue")) or 0.0,
        default=read_float(fields.get("XiShuDefaultValue")) or 0.0,
    )
    per_difficulty = read_array(fields.get("BuTongNanDu_XiShuDefaultValue")) or []
    for i, value in enumerate(per_difficulty[: len(DIFFICULTIES)]):
        coefficient.difficulty_defaults[i] = read_float(value) or 0.0
    return coefficient


@register_miner
class XiShuMiner(MinerBase):
    """One list of coefficients per settings group, plus a template CSV."""

    name = "XiShu"
    default_enabled = False

    def load_groups(self, context: MinerContext) -> Optional[dict[int, list[Coefficient]]]:
        manager = load_default_object(context.source, XISHU_MANAGER)
        if manager is None:
            return None
        config_map = read_map(manager.find("GameXiShuConfigMap"))
        if config_map is None:
            logger.error("Unable to read GameXiShuConfigMap from asset BP_GameXiShu_GuanLiQi")
            return None

        texts = load_text_table(context, TEXT_TABLE)
        tips = load_text_table(context, TIPS_TABLE)
        if texts is None or tips is None:
            return None

        groups: dict[int, list[Coefficient]] = {}
        for key, value in config_map:
            group = read_int(key)
            config = read_struct(value) or {}
            entries = read_array(next(iter(config.values()), None))
            if group is None or entries is None:
                logger.warning("Unable to read coefficient group %s. Skipping it.", key)
                continue

            coefficients = groups.setdefault(group, [])
            for i, entry in enumerate(entries):
                coefficient = parse_coefficient(read_struct(entry) or {}, i)
                if coefficient is None:
                    logger.warning("Coefficient %d in group %d has no key. Skipping it.", i, group)
                    continue
                coefficient.description = texts.get(coefficient.name.lower(), coefficient.description)
                coefficient.tip = tips.get(coefficient.name.lower())
                coefficients.append(coefficient)
        return groups

    def run(self, context: MinerContext) -> MinerResult:
        groups = self.load_groups(context)
        if not groups:
            return self.fail("No coefficient data found.")

        for group, coefficients in groups.items():
            write_csv(
                self.csv_path(context, f"{self.name}_{group}.csv"),
                "name,category,index,toggle,visible,desc,tip,min,max,default,"
                + ",".join(DIFFICULTIES),
                (
                    ",".join(
                        [
                            c.name,
                            str(c.category),
                            str(c.index),
                            db_bool(c.is_toggle),
                            db_bool(c.is_visible),
                            csv_str(c.description) or "",
                            csv_str(c.tip) or "",
                            _num(c.min),
                            _num(c.max),
                            _num(c.default),
                            *(_num(v) for v in c.difficulty_defaults),
                        ]
                    )
                    for c in coefficients
                ),
            )

        first_group = next(iter(groups.values()))
        write_csv(
            self.csv_path(context, f"{self.name}_Template.csv"),
            "name,description,span",
            (f"{c.name},,1" for c in first_group),
        )

        # create table `xishu` (`name` varchar(127) not null, `group` int not null,
        #   `index` int not null, `category` int not null, `toggle` bool not null,
        #   `visible` bool not null, `desc` varchar(255) not null, `tip` varchar(255),
        #   `min` float not null, `max` float not null, `default` float not null,
        #   `casual` float not null, `easy` float not null, `normal` float not null,
        #   `hard` float not null, `master` float not null, primary key (`name`, `group`))
        # Rows go out position by position across groups.
        sql = context.sql
        sql.start_table("xishu")
        rows = 0
        for position in zip(*groups.values()):
            for group, c in zip(groups, position):
                values = [c.min, c.max, c.default, *c.difficulty_defaults]
                sql.write_row(
                    f"{db_str(c.name)}, {group}, {c.index}, {c.category}, "
                    f"{db_bool(c.is_toggle)}, {db_bool(c.is_visible)}, "
                    f"{db_str(c.description, treat_null_as_empty=True)}, {db_str(c.tip)}, "
                    + ", ".join(_num(v) for v in values)
                )
                rows += 1
        sql.end_table()

        return self.finish(rows=rows)
