"""Data models for eostop."""

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ResourceLimit:
    """Immutable raw resource limit of an account."""

    max: int
    available: int
    used: int


@dataclass(slots=True, frozen=True)
class AccountSnapshot:
    """Immutable snapshot of an account as returned by a single lookup."""

    core_liquid_balance: str  # e.g. "12.3450 EOS"
    cpu_limit: ResourceLimit  # Microseconds
    net_limit: ResourceLimit  # Bytes
    ram_quota: int  # Bytes
    ram_usage: int  # Bytes
