"""Weapon masteries (ZhuanJing).

Masteries are listed on the resource manager's default object. Each entry
names a weapon type and an ability blueprint carrying the display text.
``DT_ZhuanJingSLD`` holds, per weapon type and proficiency level, the
weighted pool a new mastery is drawn from.
"""

from dataclasses import dataclass
from typing import Optional

from data_miner.assets import (
    TextureRef,
    class_name_from_ref,
    load_data_table,
    load_default_object,
    read_array,
    read_int,
    read_map,
    read_struct,
    read_text,
)
from data_miner.core.log import get_logger
from data_miner.hierarchy import AttributeResolver, QuerySpec
from data_miner.output import csv_str, db_bool, db_str, write_csv

from .base import MinerBase, MinerContext, MinerResult, register_miner
from .gametypes import read_weapon_type

logger = get_logger(__name__)

RESOURCE_MANAGER = "/Game/Blueprints/ZiYuanGuanLi/BP_ZiYuanGuanLiQi"
MASTERY_TABLE = "/Game/Blueprints/ZiYuanGuanLi/DT_ZhuanJingSLD"

# Proficiency levels at which a mastery can be acquired
ACQUIRE_LEVELS = (30, 60, 90, 120)

ABILITY_SPEC = QuerySpec.display(
    name="AbilityName", description="JinengMiaoshu", icon="AbilityIcon"
)


@dataclass
class Mastery:
    id: int
    name: str
    description: Optional[str] = None
    icon: Optional[TextureRef] = None
    is_starting: bool = False
    chances: tuple[float, ...] = (0.0,) * len(ACQUIRE_LEVELS)


def format_percent(chance: float) -> str:
    """``0.125`` -> ``12.5%``, ``0.25`` -> ``25%``."""
    text = f"{chance * 100:.1f}".rstrip("0").rstrip(".")
    return f"{text}%"


def load_acquire_chances(context: MinerContext) -> Optional[dict[int, dict[int, dict[int, float]]]]:
    """``{weapon_type: {mastery_id: {level: chance}}}`` from DT_ZhuanJingSLD."""
    rows = load_data_table(context.source, MASTERY_TABLE)
    if rows is None:
        return None

    chances: dict[int, dict[int, dict[int, float]]] = {}
    for row_name, props in rows:
        weapon_type = read_weapon_type(props.get("UseWuQiLeiXing"))
        levels = read_map(props.get("SLDGaiLv"))
        if weapon_type is None or levels is None:
            logger.warning("Failed to load mastery acquisition data from row '%s'.", row_name)
            continue

        for_type = chances.setdefault(weapon_type, {})
        for level, level_value in levels:
            level = read_int(level)
            pool_struct = read_struct(level_value) or {}
            pool = read_map(pool_struct.get("JiNengChi"))
            if level is None or pool is None:
                logger.warning("Failed to load mastery acquisition data from row '%s'.", row_name)
                continue

            weights = [(read_int(k), read_int(v) or 0) for k, v in pool]
            total = sum(w for _, w in weights)
            for mastery_id, weight in weights:
                if mastery_id is None or total <= 0:
                    continue
                for_type.setdefault(mastery_id, {})[level] = weight / total
    return chances


@register_miner
class WeaponMasteryMiner(MinerBase):
    """Masteries per weapon type with their acquisition chance by level."""

    name = "Mastery"
    requires_hierarchy = True

    def load_masteries(self, context: MinerContext) -> Optional[dict[int, list[Mastery]]]:
        manager = load_default_object(context.source, RESOURCE_MANAGER)
        if manager is None:
            return None

        entries = read_array(manager.find("ZhuanJingArray"))
        starting = read_array(manager.find("ZhuanJingAbilitySets"))
        if entries is None or starting is None:
            logger.error(
                "Unable to locate ZhuanJingArray or ZhuanJingAbilitySets in BP_ZiYuanGuanLiQi"
            )
            return None
        starting_ids = {read_int(v) for v in starting}

        acquire_chances = load_acquire_chances(context)
        if acquire_chances is None:
            return None

        index = context.require_index()
        resolver = AttributeResolver(index)

        masteries: dict[int, list[Mastery]] = {}
        for entry in entries:
            fields = read_struct(entry) or {}
            mastery_id = read_int(fields.get("JiNengIndex"))
            weapon_type = read_weapon_type(fields.get("UseWuQiLeiXing"))

            ability_fields = read_struct(fields.get("ZJJN")) or {}
            ability_class = index.get(class_name_from_ref(read_text(ability_fields.get("Ability"))) or "")
            if ability_class is None:
                logger.warning("Failed to load ability blueprint for mastery %s.", mastery_id)
                continue
            ability = resolver.resolve(ability_class, ABILITY_SPEC)

            if mastery_id is None or weapon_type is None or not ability.has_required:
                logger.warning("Missing data for mastery %s. It will be skipped.", mastery_id)
                continue

            by_level = acquire_chances.get(weapon_type, {}).get(mastery_id, {})
            masteries.setdefault(weapon_type, []).append(
                Mastery(
                    id=mastery_id,
                    name=ability.get("name"),
                    description=ability.get("description"),
                    icon=ability.get("icon"),
                    is_starting=mastery_id in starting_ids,
                    chances=tuple(by_level.get(level, 0.0) for level in ACQUIRE_LEVELS),
                )
            )
        return masteries

    def run(self, context: MinerContext) -> MinerResult:
        masteries = self.load_masteries(context)
        if masteries is None:
            return self.fail("Unable to load mastery data.")

        rows = [
            (weapon_type, idx, mastery)
            for weapon_type, entries in masteries.items()
            for idx, mastery in enumerate(entries)
        ]

        write_csv(
            self.csv_path(context),
            "type,idx,id,name,desc,start,c30,c60,c90,c120,icon",
            (
                ",".join(
                    [
                        str(weapon_type),
                        str(idx),
                        str(m.id),
                        csv_str(m.name) or "",
                        csv_str(m.description) or "",
                        db_bool(m.is_starting),
                        *(format_percent(c) for c in m.chances),
                        m.icon.name if m.icon else "",
                    ]
                )
                for weapon_type, idx, m in rows
            ),
        )

        # create table `zj` (`type` int not null, `idx` int not null, `id` int not null,
        #   `name` varchar(127) not null, `desc` varchar(511), `start` bool not null,
        #   `c30` float not null, `c60` float not null, `c90` float not null,
        #   `c120` float not null, `icon` varchar(127), primary key (`type`, `idx`))
        sql = context.sql
        sql.start_table("zj")
        for weapon_type, idx, m in rows:
            chances = ", ".join(f"{c:g}" for c in m.chances)
            sql.write_row(
                f"{weapon_type}, {idx}, {m.id}, {db_str(m.name)}, {db_str(m.description)}, "
                f"{db_bool(m.is_starting)}, {chances}, {db_str(m.icon.name if m.icon else None)}"
            )
        sql.end_table()

        return self.finish(rows=len(rows))
