"""Account lookup port for eostop."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Protocol

import reactivex
from reactivex import Observable
from reactivex.abc import SchedulerBase

from eostop.models import AccountSnapshot


class AccountLookup(Protocol):
    """
    Fetches an account snapshot by name.

    The returned observable emits exactly one snapshot and completes, or
    errors. Any exception type may be raised; the view model normalizes it.
    Completing without a snapshot is treated as a failure.
    """

    def __call__(self, account_name: str) -> Observable[AccountSnapshot]:
        ...


def coroutine_lookup(fetch: Callable[[str], Awaitable[AccountSnapshot]]) -> AccountLookup:
    """
    Adapt an ``async def fetch(account_name)`` function to an AccountLookup.

    A task is started per subscription on the running event loop and
    cancelled only if the subscription is disposed before it finishes. The
    view model keeps superseded lookups subscribed, so their tasks complete.
    """

    def lookup(account_name: str) -> Observable[AccountSnapshot]:
        def start(_: SchedulerBase | None) -> Observable[AccountSnapshot]:
            return reactivex.from_future(asyncio.ensure_future(fetch(account_name)))

        return reactivex.defer(start)

    return lookup
