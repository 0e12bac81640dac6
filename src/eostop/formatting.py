"""Quantity formatting for eostop."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from babel.units import format_unit, get_unit_name

from eostop.config import ViewConfig
from eostop.units import ConvertibleUnit

log = logging.getLogger(__name__)


def convert(raw: int, source: ConvertibleUnit, target: ConvertibleUnit) -> Decimal:
    """
    Convert a raw quantity between two units of the same family.

    Decimal arithmetic keeps repeated conversions exact and identical.

    Raises:
        TypeError: If the units belong to different families.
    """
    if type(source) is not type(target):
        raise TypeError(
            f"Cannot convert {type(source).__name__} to {type(target).__name__}"
        )
    return Decimal(raw) * source.factor / Decimal(target.factor)


@dataclass(slots=True, frozen=True)
class QuantityFormatter:
    """
    Stateless formatter turning raw quantities into locale-aware strings.

    Every setting is fixed at construction, so one instance can be shared
    freely between fields and view models.
    """

    locale: str = "en_US"
    unit_length: str = "short"
    placeholder: str = "-"

    @classmethod
    def from_config(cls, config: ViewConfig) -> "QuantityFormatter":
        """Create a formatter matching a view config."""
        return cls(
            locale=config.locale,
            unit_length=config.unit_length,
            placeholder=config.placeholder,
        )

    def format(self, raw: int, source: ConvertibleUnit, target: ConvertibleUnit) -> str:
        """
        Format a raw quantity in the target unit, e.g. ``"100 ms"``.

        Args:
            raw: Quantity expressed in the source unit.
            source: Unit the raw quantity is expressed in.
            target: Unit to display.

        Returns:
            The formatted quantity, or the placeholder for a negative value.
        """
        if raw < 0:
            log.debug("Negative quantity %d, showing placeholder", raw)
            return self.placeholder
        value = convert(raw, source, target)
        return format_unit(value, target.cldr_id, length=self.unit_length, locale=self.locale)

    def unit_label(self, unit: ConvertibleUnit) -> str:
        """
        Get the symbol a unit is shown with, e.g. ``"ms"`` or ``"kB"``.

        The symbol is taken from the same CLDR unit pattern ``format`` uses,
        so a label always matches the suffix of the formatted values.
        """
        # A string value is substituted into the pattern as is
        symbol = format_unit("", unit.cldr_id, length=self.unit_length, locale=self.locale).strip()
        if symbol:
            return symbol
        name = get_unit_name(unit.cldr_id, length=self.unit_length, locale=self.locale)
        if name is None:
            return unit.cldr_id.split("-", 1)[-1]
        return name
