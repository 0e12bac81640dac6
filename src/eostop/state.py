"""Latest-value binding of the view model outputs."""

import logging
from typing import Any

from reactivex import Observable
from reactivex.disposable import CompositeDisposable

from eostop.units import DurationUnit, StorageUnit
from eostop.view_model import SearchOutput

log = logging.getLogger(__name__)


class ViewState:
    """
    Latest value of every output stream, as a presentation layer would show it.

    Fields hold None until their stream has emitted.
    """

    FIELDS = (
        "error_message",
        "eos_balance",
        "cpu_max",
        "cpu_available",
        "cpu_used",
        "cpu_unit",
        "net_max",
        "net_available",
        "net_used",
        "net_unit",
        "ram_quota",
        "ram_usage",
        "ram_unit",
        "available_duration_units",
        "available_storage_units",
    )

    def __init__(self) -> None:
        """Initialize an empty ViewState."""
        self.error_message: str | None = None
        self.eos_balance: str | None = None
        self.cpu_max: str | None = None
        self.cpu_available: str | None = None
        self.cpu_used: str | None = None
        self.cpu_unit: str | None = None
        self.net_max: str | None = None
        self.net_available: str | None = None
        self.net_used: str | None = None
        self.net_unit: str | None = None
        self.ram_quota: str | None = None
        self.ram_usage: str | None = None
        self.ram_unit: str | None = None
        self.available_duration_units: tuple[DurationUnit, ...] | None = None
        self.available_storage_units: tuple[StorageUnit, ...] | None = None
        self._subscriptions = CompositeDisposable()

    def bind(self, name: str, stream: Observable[Any]) -> None:
        """Keep a field updated with the latest value of a stream."""
        if name not in self.FIELDS:
            raise ValueError(f"Unknown field: {name}")

        def on_error(exc: Exception) -> None:
            log.error("Output %s ended with an error: %s", name, exc)

        self._subscriptions.add(
            stream.subscribe(
                on_next=lambda value: setattr(self, name, value),
                on_error=on_error,
            )
        )

    def dispose(self) -> None:
        """Stop following the output streams."""
        self._subscriptions.dispose()

    def as_dict(self) -> dict[str, Any]:
        """Get the latest value of every field by name."""
        return {name: getattr(self, name) for name in self.FIELDS}


def bind_view_state(output: SearchOutput) -> ViewState:
    """Subscribe a new ViewState to every stream of a SearchOutput."""
    state = ViewState()
    bindings: dict[str, Observable[Any]] = {
        "error_message": output.error_message,
        "eos_balance": output.eos_balance,
        "cpu_max": output.cpu.max,
        "cpu_available": output.cpu.available,
        "cpu_used": output.cpu.used,
        "cpu_unit": output.cpu.unit,
        "net_max": output.net.max,
        "net_available": output.net.available,
        "net_used": output.net.used,
        "net_unit": output.net.unit,
        "ram_quota": output.ram.quota,
        "ram_usage": output.ram.usage,
        "ram_unit": output.ram.unit,
        "available_duration_units": output.available_duration_units,
        "available_storage_units": output.available_storage_units,
    }
    for name, stream in bindings.items():
        state.bind(name, stream)
    return state
