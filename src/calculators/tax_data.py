"""SA tax tables — brackets, rebates, UIF and SDL parameters.

Tables live in ``config/tax_tables.yaml`` and are loaded once at startup.
``load_tax_table`` returns an immutable ``TaxTable`` that has already been
validated; a malformed table raises ``ConfigurationError`` and should stop
the process rather than surface per request.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, NamedTuple

import yaml

from config import load_yaml_config
from config.settings import settings
from src.calculators.errors import ConfigurationError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_TAX_YEAR = settings.tax_year

SECONDARY_REBATE_AGE = 65
TERTIARY_REBATE_AGE = 75


class TaxBracket(NamedTuple):
    """A single income tax bracket."""

    lower: Decimal  # exclusive: income above this is taxed at rate
    upper: Decimal | None  # None = no cap
    rate: Decimal


class RebateSchedule(NamedTuple):
    """Annual rebates by age band."""

    primary: Decimal
    secondary: Decimal
    tertiary: Decimal

    def for_age(self, age: int | None = None) -> Decimal:
        """Return the total rebate for an age; ``None`` means under 65.

        Rebates accumulate: a 70-year-old receives primary + secondary.
        """
        if age is None:
            return self.primary
        if age < 0:
            raise ValidationError("age", "must be non-negative")
        rebate = self.primary
        if age >= SECONDARY_REBATE_AGE:
            rebate += self.secondary
        if age >= TERTIARY_REBATE_AGE:
            rebate += self.tertiary
        return rebate


class StatutoryRates(NamedTuple):
    """Proportional payroll levies."""

    uif_rate: Decimal
    uif_monthly_cap: Decimal
    sdl_rate: Decimal


class TaxTable(NamedTuple):
    """All tax parameters for a single tax year."""

    tax_year: str
    brackets: tuple[TaxBracket, ...]
    rebates: RebateSchedule
    statutory: StatutoryRates

    def validate(self) -> "TaxTable":
        """Check the table is usable; raise ConfigurationError if not.

        Brackets must start at zero, be ordered and contiguous, and end with
        exactly one unbounded bracket. Returns self so calls can chain.
        """
        if not self.brackets:
            raise ConfigurationError(f"{self.tax_year}: no tax brackets defined")

        if self.brackets[0].lower != 0:
            raise ConfigurationError(f"{self.tax_year}: first bracket must start at 0")

        last = len(self.brackets) - 1
        for i, bracket in enumerate(self.brackets):
            if not 0 <= bracket.rate <= 1:
                raise ConfigurationError(
                    f"{self.tax_year}: bracket {i} rate {bracket.rate} outside [0, 1]"
                )
            if bracket.upper is None:
                if i != last:
                    raise ConfigurationError(
                        f"{self.tax_year}: unbounded bracket {i} is not the last bracket"
                    )
                continue
            if bracket.upper <= bracket.lower:
                raise ConfigurationError(
                    f"{self.tax_year}: bracket {i} upper bound {bracket.upper} "
                    f"not above lower bound {bracket.lower}"
                )
            if i == last:
                raise ConfigurationError(f"{self.tax_year}: last bracket must be unbounded")
            following = self.brackets[i + 1].lower
            if following != bracket.upper:
                kind = "overlap" if following < bracket.upper else "gap"
                raise ConfigurationError(
                    f"{self.tax_year}: {kind} between bracket {i} ({bracket.upper}) "
                    f"and bracket {i + 1} ({following})"
                )

        for name, amount in self.rebates._asdict().items():
            if amount < 0:
                raise ConfigurationError(f"{self.tax_year}: {name} rebate is negative")

        statutory = self.statutory
        for name in ("uif_rate", "sdl_rate"):
            rate = getattr(statutory, name)
            if not 0 <= rate <= 1:
                raise ConfigurationError(f"{self.tax_year}: {name} {rate} outside [0, 1]")
        if statutory.uif_monthly_cap < 0:
            raise ConfigurationError(f"{self.tax_year}: uif_monthly_cap is negative")

        return self


def _decimal(value: Any, where: str) -> Decimal:
    if isinstance(value, bool) or value is None:
        raise ConfigurationError(f"{where}: expected a number, got {value!r}")
    try:
        number = Decimal(str(value))
    except InvalidOperation:
        raise ConfigurationError(f"{where}: not a number: {value!r}") from None
    if not number.is_finite():
        raise ConfigurationError(f"{where}: must be finite")
    return number


def parse_tax_table(tax_year: str, data: dict[str, Any]) -> TaxTable:
    """Build and validate a TaxTable from its YAML mapping."""
    try:
        brackets = tuple(
            TaxBracket(
                lower=_decimal(b["lower"], f"{tax_year} bracket {i} lower"),
                upper=(
                    _decimal(b["upper"], f"{tax_year} bracket {i} upper")
                    if b.get("upper") is not None
                    else None
                ),
                rate=_decimal(b["rate"], f"{tax_year} bracket {i} rate"),
            )
            for i, b in enumerate(data["brackets"])
        )
        rebates = data["rebates"]
        statutory = data["statutory"]
        table = TaxTable(
            tax_year=tax_year,
            brackets=brackets,
            rebates=RebateSchedule(
                primary=_decimal(rebates["primary"], f"{tax_year} primary rebate"),
                secondary=_decimal(rebates.get("secondary", 0), f"{tax_year} secondary rebate"),
                tertiary=_decimal(rebates.get("tertiary", 0), f"{tax_year} tertiary rebate"),
            ),
            statutory=StatutoryRates(
                uif_rate=_decimal(statutory["uif_rate"], f"{tax_year} uif_rate"),
                uif_monthly_cap=_decimal(
                    statutory["uif_monthly_cap"], f"{tax_year} uif_monthly_cap"
                ),
                sdl_rate=_decimal(statutory.get("sdl_rate", 0), f"{tax_year} sdl_rate"),
            ),
        )
    except (KeyError, TypeError) as exc:
        raise ConfigurationError(f"{tax_year}: malformed tax table ({exc!r})") from exc

    return table.validate()


def available_tax_years(filename: str | None = None) -> list[str]:
    """List tax years defined in the tables file."""
    config = load_yaml_config(filename or settings.tax_table_file)
    return sorted(config.get("tax_years") or {})


def load_tax_table(tax_year: str | None = None, filename: str | None = None) -> TaxTable:
    """Load and validate the tax table for a year.

    Args:
        tax_year: Tax year key, e.g. "2025-26". Defaults to settings.
        filename: Tables file under config/ (or absolute path).

    Raises:
        ConfigurationError: if the file, year or any table value is invalid.
    """
    tax_year = tax_year or DEFAULT_TAX_YEAR
    filename = filename or settings.tax_table_file

    try:
        config = load_yaml_config(filename)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"cannot read tax tables {filename}: {exc}") from exc

    years = config.get("tax_years") or {}
    if tax_year not in years:
        available = ", ".join(sorted(years)) or "none"
        raise ConfigurationError(f"Unknown tax year: {tax_year}. Available: {available}")

    table = parse_tax_table(tax_year, years[tax_year])
    logger.info(
        "Loaded tax table %s: %d brackets, primary rebate %s",
        tax_year,
        len(table.brackets),
        table.rebates.primary,
    )
    return table
