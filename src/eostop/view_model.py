"""
Account search view model for eostop.

Turns a search action into the resource summary of an account. All wiring is
done with reactive streams, which follow two different combination rules:

* ``merge`` forwards every event of every source as soon as it arrives,
  with no buffering. Used where the most recent event of any source wins
  (the error channel, placeholder overrides).
* ``combine_latest`` stays silent until every source has produced a value,
  then re-emits on each new value paired with the latest of the others.
  Used to pair a raw quantity with the selected display unit.

A placeholder override on error is merged in after the combination, so it
shows up even when no unit has been selected yet.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import reactivex
from reactivex import Observable
from reactivex import operators as ops
from reactivex.notification import Notification, OnNext

from eostop.config import ViewConfig
from eostop.errors import LookupFailed, ValidationFailed, error_message
from eostop.formatting import QuantityFormatter
from eostop.lookup import AccountLookup
from eostop.models import AccountSnapshot, ResourceLimit
from eostop.units import (
    DURATION_UNITS,
    STORAGE_UNITS,
    ConvertibleUnit,
    DurationUnit,
    StorageUnit,
)
from eostop.validation import InputValidator

log = logging.getLogger(__name__)


class _RequestGenerations:
    """Numbers issued lookups so the newest one can be recognized."""

    def __init__(self) -> None:
        self.latest = 0

    def issue(self) -> int:
        self.latest += 1
        return self.latest

    def is_latest(self, generation: int) -> bool:
        return generation == self.latest


@dataclass(slots=True, frozen=True)
class SearchInput:
    """Live input streams of the search screen."""

    search_text: Observable[str]
    search_click: Observable[Any]  # Payload is ignored
    ram_storage_unit: Observable[StorageUnit]
    cpu_duration_unit: Observable[DurationUnit]
    net_storage_unit: Observable[StorageUnit]


@dataclass(slots=True, frozen=True)
class ResourceLimitOutput:
    """Formatted streams for a CPU or NET limit."""

    max: Observable[str]
    available: Observable[str]
    used: Observable[str]
    unit: Observable[str]


@dataclass(slots=True, frozen=True)
class RamUsageOutput:
    """Formatted streams for RAM usage."""

    quota: Observable[str]
    usage: Observable[str]
    unit: Observable[str]


@dataclass(slots=True, frozen=True)
class SearchOutput:
    """Output streams consumed by the presentation layer."""

    error_message: Observable[str | None]
    eos_balance: Observable[str]
    cpu: ResourceLimitOutput
    net: ResourceLimitOutput
    ram: RamUsageOutput
    available_duration_units: Observable[tuple[DurationUnit, ...]]
    available_storage_units: Observable[tuple[StorageUnit, ...]]


class AccountViewModel:
    """
    View model deriving an account resource summary from a search action.

    Each trigger validates the latest entered text. An invalid name puts a
    ValidationFailed on the error channel without calling the lookup. A valid
    name is looked up; the outcome is materialized so that a failure becomes
    a LookupFailed on the error channel instead of ending the streams. A
    successful lookup puts None on the error channel, clearing the message.
    """

    def __init__(
        self,
        lookup: AccountLookup,
        validator: InputValidator,
        config: ViewConfig | None = None,
    ) -> None:
        """
        Initialize the AccountViewModel.

        Args:
            lookup: Port used to fetch account snapshots.
            validator: Decides which entered names are looked up.
            config: View settings. Defaults to ViewConfig().
        """
        self._lookup = lookup
        self._validator = validator
        self._config = config if config is not None else ViewConfig()
        self._formatter = QuantityFormatter.from_config(self._config)

    @property
    def config(self) -> ViewConfig:
        """Get the view settings."""
        return self._config

    @property
    def formatter(self) -> QuantityFormatter:
        """Get the quantity formatter used for every field."""
        return self._formatter

    def transform(self, inputs: SearchInput) -> SearchOutput:
        """Wire the input streams into the output streams."""
        checked = inputs.search_click.pipe(
            ops.with_latest_from(inputs.search_text),
            ops.map(lambda pair: self._check(pair[1])),
            ops.share(),
        )
        valid_names = checked.pipe(ops.filter(lambda item: isinstance(item, str)))
        validation_errors = checked.pipe(
            ops.filter(lambda item: isinstance(item, ValidationFailed))
        )

        generations = _RequestGenerations()
        outcomes = valid_names.pipe(
            ops.flat_map(lambda name: self._tracked_lookup(name, generations)),
            ops.share(),
        )
        snapshots: Observable[AccountSnapshot] = outcomes.pipe(
            ops.filter(lambda notification: isinstance(notification, OnNext)),
            ops.map(lambda notification: notification.value),
        )
        lookup_errors = outcomes.pipe(ops.map(self._outcome_error))
        errors = reactivex.merge(lookup_errors, validation_errors).pipe(ops.share())

        placeholder = self._config.placeholder
        messages = self._config.messages
        message = errors.pipe(
            ops.map(lambda error: error_message(error, messages)),
            ops.start_with(None),
            self._recover("error_message", None),
        )
        balance = reactivex.merge(
            snapshots.pipe(ops.map(lambda snapshot: snapshot.core_liquid_balance)),
            self._placeholder_on_error(errors),
        ).pipe(
            ops.start_with(placeholder),
            self._recover("eos_balance", placeholder),
        )

        return SearchOutput(
            error_message=message,
            eos_balance=balance,
            cpu=self._make_limit(
                "cpu",
                snapshots.pipe(ops.map(lambda snapshot: snapshot.cpu_limit)),
                errors,
                inputs.cpu_duration_unit,
                DurationUnit.MICROSECONDS,
            ),
            net=self._make_limit(
                "net",
                snapshots.pipe(ops.map(lambda snapshot: snapshot.net_limit)),
                errors,
                inputs.net_storage_unit,
                StorageUnit.BYTES,
            ),
            ram=self._make_ram(snapshots, errors, inputs.ram_storage_unit),
            available_duration_units=reactivex.just(DURATION_UNITS),
            available_storage_units=reactivex.just(STORAGE_UNITS),
        )

    def _check(self, text: str) -> str | ValidationFailed:
        """Return the text if it may be looked up, else a ValidationFailed."""
        if self._validator.validate(text):
            log.debug("Search triggered for %r", text)
            return text
        log.debug("Search rejected, invalid account name %r", text)
        return ValidationFailed(text)

    def _tracked_lookup(
        self, account_name: str, generations: _RequestGenerations
    ) -> Observable[Notification[AccountSnapshot]]:
        """
        Issue a lookup as the newest request.

        Superseded requests are never disposed, so they run to completion.
        With discard_stale_results their outcome is dropped on arrival.
        """
        generation = generations.issue()
        outcome = self._materialized_lookup(account_name)
        if not self._config.discard_stale_results:
            return outcome

        def is_current(_: Notification[AccountSnapshot]) -> bool:
            if generations.is_latest(generation):
                return True
            log.debug("Dropping result of superseded lookup for %r", account_name)
            return False

        return outcome.pipe(ops.filter(is_current))

    def _materialized_lookup(self, account_name: str) -> Observable[Notification[AccountSnapshot]]:
        """Look up an account, turning its outcome into exactly one notification."""
        # first() fails a lookup that completes without a snapshot
        return reactivex.defer(lambda _: self._lookup(account_name)).pipe(
            ops.first(),
            ops.materialize(),
            ops.filter(lambda notification: notification.kind != "C"),
        )

    def _outcome_error(self, notification: Notification[AccountSnapshot]) -> LookupFailed | None:
        """Map a lookup outcome to its error channel value."""
        if isinstance(notification, OnNext):
            log.info("Account lookup succeeded")
            return None
        error = LookupFailed.from_exception(notification.exception)
        log.info(
            "Account lookup failed (status=%s, network=%s): %s",
            error.status_code,
            error.is_network_failure,
            error,
        )
        return error

    def _make_limit(
        self,
        name: str,
        limit: Observable[ResourceLimit],
        errors: Observable[BaseException | None],
        unit: Observable[ConvertibleUnit],
        source_unit: ConvertibleUnit,
    ) -> ResourceLimitOutput:
        """Build the formatted streams of a resource limit."""
        return ResourceLimitOutput(
            max=self._measurement_field(
                f"{name}.max",
                limit.pipe(ops.map(lambda value: value.max)),
                errors,
                unit,
                source_unit,
            ),
            available=self._measurement_field(
                f"{name}.available",
                limit.pipe(ops.map(lambda value: value.available)),
                errors,
                unit,
                source_unit,
            ),
            used=self._measurement_field(
                f"{name}.used",
                limit.pipe(ops.map(lambda value: value.used)),
                errors,
                unit,
                source_unit,
            ),
            unit=self._unit_field(f"{name}.unit", unit),
        )

    def _make_ram(
        self,
        snapshots: Observable[AccountSnapshot],
        errors: Observable[BaseException | None],
        unit: Observable[StorageUnit],
    ) -> RamUsageOutput:
        """Build the formatted streams of RAM usage."""
        return RamUsageOutput(
            quota=self._measurement_field(
                "ram.quota",
                snapshots.pipe(ops.map(lambda snapshot: snapshot.ram_quota)),
                errors,
                unit,
                StorageUnit.BYTES,
            ),
            usage=self._measurement_field(
                "ram.usage",
                snapshots.pipe(ops.map(lambda snapshot: snapshot.ram_usage)),
                errors,
                unit,
                StorageUnit.BYTES,
            ),
            unit=self._unit_field("ram.unit", unit),
        )

    def _measurement_field(
        self,
        name: str,
        values: Observable[int],
        errors: Observable[BaseException | None],
        unit: Observable[ConvertibleUnit],
        source_unit: ConvertibleUnit,
    ) -> Observable[str]:
        """
        Build one formatted quantity stream.

        Re-emits whenever the raw value or the selected unit changes, shows
        the placeholder on any error and starts with the placeholder.
        """
        formatter = self._formatter
        converted = reactivex.combine_latest(values, unit).pipe(
            ops.map(lambda pair: formatter.format(pair[0], source_unit, pair[1])),
        )
        return reactivex.merge(converted, self._placeholder_on_error(errors)).pipe(
            ops.start_with(self._config.placeholder),
            self._recover(name, self._config.placeholder),
        )

    def _unit_field(self, name: str, unit: Observable[ConvertibleUnit]) -> Observable[str]:
        """Build the stream of display names of the selected unit."""
        return unit.pipe(
            ops.map(self._formatter.unit_label),
            self._recover(name, ""),
        )

    def _placeholder_on_error(self, errors: Observable[BaseException | None]) -> Observable[str]:
        """Emit the placeholder for every error, ignoring cleared states."""
        placeholder = self._config.placeholder
        return errors.pipe(
            ops.filter(lambda error: error is not None),
            ops.map(lambda _: placeholder),
        )

    def _recover(self, name: str, fallback: Any) -> Callable[[Observable[Any]], Observable[Any]]:
        """End a stream with the fallback value instead of an error."""

        def handler(exc: Exception, _: Observable[Any]) -> Observable[Any]:
            log.warning("Output %s failed, falling back to %r: %s", name, fallback, exc)
            return reactivex.just(fallback)

        return ops.catch(handler)
