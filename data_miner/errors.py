"""Exception types raised across the miner.

Only contract violations and corpus-level failures are raised. Everything
else (unknown classes, missing default objects, merge conflicts) is logged
and absorbed where it happens.
"""


class DataMinerError(Exception):
    """General error raised when something goes wrong while mining."""


class AssetSourceError(DataMinerError):
    """The asset corpus could not be enumerated at all."""


class HierarchyError(DataMinerError):
    """The class hierarchy was used before it was built."""


class CombineError(DataMinerError):
    """A variant group could not be combined."""


class DescriptionMismatchError(CombineError):
    """Variant descriptions carry a different number of numeric tokens."""
