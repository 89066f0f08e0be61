"""Pure functions for report calculations and aggregations.

This module contains the functional core for reporting operations:
- No I/O operations (no database, no console, no network)
- No side effects
- Pure data transformations
- Easy to test

Entry amounts are carried unrounded; only totals are rounded to cents.
"""

from collections.abc import Iterable, Sequence
from dataclasses import asdict, dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from costbook.dates import parse_legacy_date
from costbook.domain.conversion import CurrencyConverter
from costbook.domain.models import CategoryName, CurrencyCode, LedgerEntry

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class ReportEntry:
    """Entry as it appears in a report, with its day of month."""

    amount: float
    currency: CurrencyCode
    category: CategoryName
    description: str
    day: int


@dataclass(frozen=True)
class ReportTotal:
    """Report total in the requested currency."""

    currency: CurrencyCode
    amount: float


@dataclass(frozen=True)
class MonthlyReport:
    """Immutable report for one month."""

    year: int
    month: int
    entries: list[ReportEntry]
    total: ReportTotal

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MonthTotal:
    """Total for one month of a yearly report."""

    month: int
    total: float


@dataclass(frozen=True)
class YearlyReport:
    """Immutable report of twelve month totals."""

    year: int
    currency: CurrencyCode
    months: list[MonthTotal]

    @property
    def total(self) -> float:
        return round_money(sum(m.total for m in self.months))


@dataclass(frozen=True)
class CategoryTotal:
    """Converted total for one category."""

    category: CategoryName
    amount: float


def round_money(value: float) -> float:
    """Round to two decimals, halves away from zero.

    Args:
        value: Amount to round.

    Returns:
        Amount rounded on the cents boundary.
    """
    return float(Decimal(repr(float(value))).quantize(CENTS, rounding=ROUND_HALF_UP))


def entry_day(entry: LedgerEntry) -> int:
    """Day of month the entry was recorded, 1 when undated."""
    if entry.created_day is not None:
        return int(entry.created_day)
    legacy = parse_legacy_date(entry.date)
    if legacy is not None:
        return legacy.day
    return 1


def normalize_entry(entry: LedgerEntry) -> ReportEntry:
    """Convert a stored entry to its report form."""
    return ReportEntry(
        amount=float(entry.amount),
        currency=entry.currency,
        category=entry.category,
        description=entry.description,
        day=entry_day(entry),
    )


def build_monthly_report(
    year: int,
    month: int,
    entries: Iterable[LedgerEntry],
    target_currency: CurrencyCode,
    converter: CurrencyConverter,
) -> MonthlyReport:
    """Create a month report with a total in ``target_currency``.

    Args:
        year: Report year.
        month: Report month (1-12).
        entries: Entries recorded in that month, in display order.
        target_currency: Currency of the total.
        converter: Converter holding the active rate table.

    Returns:
        MonthlyReport with normalized entries and a rounded total.

    Raises:
        RatesUnavailableError: If any entry cannot be converted.
    """
    normalized = [normalize_entry(entry) for entry in entries]

    total = 0.0
    for item in normalized:
        total += converter.convert(item.amount, item.currency, target_currency)

    return MonthlyReport(
        year=year,
        month=month,
        entries=normalized,
        total=ReportTotal(currency=target_currency, amount=round_money(total)),
    )


def build_yearly_report(
    year: int,
    currency: CurrencyCode,
    monthly_reports: Sequence[MonthlyReport],
) -> YearlyReport:
    """Collect month totals into a yearly report.

    Args:
        year: Report year.
        currency: Currency the month reports were computed in.
        monthly_reports: Twelve reports, January first.

    Returns:
        YearlyReport with one MonthTotal per month.
    """
    months = [MonthTotal(month=index, total=report.total.amount) for index, report in enumerate(monthly_reports, 1)]
    return YearlyReport(year=year, currency=currency, months=months)


def category_totals(report: MonthlyReport, converter: CurrencyConverter) -> list[CategoryTotal]:
    """Sum report entries per category in the report currency.

    Args:
        report: Month report to break down.
        converter: Converter holding the active rate table.

    Returns:
        Category totals sorted by amount, largest first.

    Raises:
        RatesUnavailableError: If any entry cannot be converted.
    """
    target = report.total.currency
    sums: dict[CategoryName, float] = {}
    for item in report.entries:
        category = item.category or CategoryName("Other")
        sums[category] = sums.get(category, 0.0) + converter.convert(item.amount, item.currency, target)

    totals = [CategoryTotal(category=cat, amount=round_money(amt)) for cat, amt in sums.items()]
    return sorted(totals, key=lambda x: x.amount, reverse=True)


def calculate_histogram_bar_length(
    amount: float,
    max_amount: float,
    bar_width: int,
) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)
