"""Shared fixtures for eostop tests."""

import os
from dataclasses import dataclass, field

import pytest
import reactivex
from reactivex import Observable
from reactivex.subject import BehaviorSubject, Subject

from eostop.errors import LookupFailed
from eostop.models import AccountSnapshot, ResourceLimit
from eostop.units import DurationUnit, StorageUnit
from eostop.view_model import SearchInput


@dataclass
class InputSubjects:
    """Subjects standing in for the input widgets."""

    text: Subject = field(default_factory=lambda: BehaviorSubject(""))
    click: Subject = field(default_factory=Subject)
    ram_unit: Subject = field(default_factory=lambda: BehaviorSubject(StorageUnit.MEGABYTES))
    cpu_unit: Subject = field(default_factory=lambda: BehaviorSubject(DurationUnit.MILLISECONDS))
    net_unit: Subject = field(default_factory=lambda: BehaviorSubject(StorageUnit.KILOBYTES))

    def search_input(self) -> SearchInput:
        """Build a SearchInput from the subjects."""
        return SearchInput(
            search_text=self.text,
            search_click=self.click,
            ram_storage_unit=self.ram_unit,
            cpu_duration_unit=self.cpu_unit,
            net_storage_unit=self.net_unit,
        )

    def search(self, text: str) -> None:
        """Type the text and press search."""
        self.text.on_next(text)
        self.click.on_next(None)


class FakeLookup:
    """Lookup answering synchronously from a table of responses."""

    def __init__(self, responses: dict[str, AccountSnapshot | BaseException] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[str] = []

    def __call__(self, account_name: str) -> Observable[AccountSnapshot]:
        self.calls.append(account_name)
        response = self.responses.get(account_name, LookupFailed(status_code=500))
        if isinstance(response, BaseException):
            return reactivex.throw(response)
        return reactivex.just(response)


class PendingLookup:
    """Lookup whose requests stay in flight until the test resolves them."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, Subject]] = []

    def __call__(self, account_name: str) -> Observable[AccountSnapshot]:
        subject: Subject = Subject()
        self.requests.append((account_name, subject))
        return subject

    def resolve(self, index: int, snapshot: AccountSnapshot) -> None:
        """Complete request number ``index`` with a snapshot."""
        _, subject = self.requests[index]
        subject.on_next(snapshot)
        subject.on_completed()

    def fail(self, index: int, error: BaseException) -> None:
        """Fail request number ``index``."""
        _, subject = self.requests[index]
        subject.on_error(error)


def make_snapshot(
    balance: str = "12.3450 EOS",
    cpu: tuple[int, int, int] = (100000, 80000, 20000),
    net: tuple[int, int, int] = (2048000, 2000000, 48000),
    ram_quota: int = 5000000,
    ram_usage: int = 3500000,
) -> AccountSnapshot:
    """Build an AccountSnapshot with sensible defaults."""
    return AccountSnapshot(
        core_liquid_balance=balance,
        cpu_limit=ResourceLimit(max=cpu[0], available=cpu[1], used=cpu[2]),
        net_limit=ResourceLimit(max=net[0], available=net[1], used=net[2]),
        ram_quota=ram_quota,
        ram_usage=ram_usage,
    )


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep EOSTOP_* variables of the calling shell out of ViewConfig."""
    for name in list(os.environ):
        if name.startswith("EOSTOP_"):
            monkeypatch.delenv(name)


@pytest.fixture
def alice() -> AccountSnapshot:
    """Snapshot of the account used in most scenarios."""
    return make_snapshot()


@pytest.fixture
def bob() -> AccountSnapshot:
    """Snapshot of a second account with different figures."""
    return make_snapshot(
        balance="1.0000 EOS",
        cpu=(5000, 1000, 4000),
        net=(1000, 500, 500),
        ram_quota=1000000,
        ram_usage=1000000,
    )


@pytest.fixture
def inputs() -> InputSubjects:
    """Fresh input subjects."""
    return InputSubjects()
