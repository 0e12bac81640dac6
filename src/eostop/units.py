"""Display units for the quantities shown by eostop."""

from enum import Enum
from typing import Protocol


class ConvertibleUnit(Protocol):
    """A unit that can be converted within its own family."""

    @property
    def cldr_id(self) -> str:
        """CLDR measurement unit identifier, e.g. ``duration-second``."""
        ...

    @property
    def factor(self) -> int:
        """Size of one unit expressed in the family's base unit."""
        ...


class DurationUnit(Enum):
    """Duration units, with microseconds as the base unit."""

    MICROSECONDS = ("duration-microsecond", 1)
    MILLISECONDS = ("duration-millisecond", 1_000)
    SECONDS = ("duration-second", 1_000_000)
    MINUTES = ("duration-minute", 60_000_000)
    HOURS = ("duration-hour", 3_600_000_000)

    def __init__(self, cldr_id: str, factor: int) -> None:
        self.cldr_id = cldr_id
        self.factor = factor


class StorageUnit(Enum):
    """Information storage units (SI), with bytes as the base unit."""

    BYTES = ("digital-byte", 1)
    KILOBYTES = ("digital-kilobyte", 1_000)
    MEGABYTES = ("digital-megabyte", 1_000_000)
    GIGABYTES = ("digital-gigabyte", 1_000_000_000)
    TERABYTES = ("digital-terabyte", 1_000_000_000_000)

    def __init__(self, cldr_id: str, factor: int) -> None:
        self.cldr_id = cldr_id
        self.factor = factor


# Picker order, fixed for the lifetime of the process
DURATION_UNITS: tuple[DurationUnit, ...] = tuple(DurationUnit)
STORAGE_UNITS: tuple[StorageUnit, ...] = tuple(StorageUnit)
