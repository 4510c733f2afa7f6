"""UE Data Miner - extract game data tables from Unreal blueprint assets."""

__version__ = "0.1.0"
