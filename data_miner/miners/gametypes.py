"""Game enums shared by several miners."""

from typing import Optional

from data_miner.assets.properties import read_enum

# EXingBieType
XINGBIE_MALE = "CHARACTER_XINGBIE_NAN"
XINGBIE_FEMALE = "CHARACTER_XINGBIE_NV"

MALE = "m"
FEMALE = "f"

_GENDERS = {
    XINGBIE_MALE: MALE,
    XINGBIE_FEMALE: FEMALE,
}


def read_gender(value) -> Optional[str]:
    """Read an EXingBieType property as ``"m"``/``"f"``, or None."""
    return _GENDERS.get(read_enum(value))


# EWuQiLeiXing, in declaration order
WEAPON_TYPES = (
    "WUQI_LEIXING_NONE",
    "WUQI_LEIXING_DAO",
    "WUQI_LEIXING_MAO",
    "WUQI_LEIXING_GONG",
    "WUQI_LEIXING_CHUI",
    "WUQI_LEIXING_DUN",
    "WUQI_LEIXING_QUANTAO",
    "WUQI_LEIXING_SHUANGDAO",
    "WUQI_LEIXING_JIAN",
    "WUQI_LEIXING_TOUZHIWU",
    "WUQI_LEIXING_GONGCHENGCHUI",
)


def read_weapon_type(value) -> Optional[int]:
    """Read an EWuQiLeiXing property as its ordinal. NONE and unknown give None."""
    name = read_enum(value)
    if name not in WEAPON_TYPES or name == WEAPON_TYPES[0]:
        return None
    return WEAPON_TYPES.index(name)
