"""Data miners. Importing this package registers every built-in miner."""

from .base import (
    MinerBase,
    MinerContext,
    MinerResult,
    ObjectInfo,
    SubclassMinerBase,
    get_miner_class,
    iter_miner_classes,
    list_miners,
    register_miner,
)
from .fashion import FashionMiner
from .item import ItemMiner
from .mastery import WeaponMasteryMiner
from .natural_gift import NaturalGiftMiner
from .npc import NpcMiner
from .proficiency import ProficiencyMiner
from .tattoo import TattooMiner
from .xishu import XiShuMiner

__all__ = [
    "MinerBase",
    "MinerContext",
    "MinerResult",
    "ObjectInfo",
    "SubclassMinerBase",
    "get_miner_class",
    "iter_miner_classes",
    "list_miners",
    "register_miner",
    "FashionMiner",
    "ItemMiner",
    "NaturalGiftMiner",
    "NpcMiner",
    "ProficiencyMiner",
    "TattooMiner",
    "WeaponMasteryMiner",
    "XiShuMiner",
]
