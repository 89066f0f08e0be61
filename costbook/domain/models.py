"""Domain type definitions for costbook.

- CurrencyCode: one of the supported currency codes
- CategoryName: free-form expense category label
- RateTable: one unit of each currency expressed in the reference unit
- LedgerEntry: a cost record as read back from the store
- NewCost: the caller-facing result of adding a cost
"""

from dataclasses import dataclass
from typing import NewType

CurrencyCode = NewType("CurrencyCode", str)

CategoryName = NewType("CategoryName", str)

RateTable = dict[str, float]

CURRENCIES: tuple[CurrencyCode, ...] = (
    CurrencyCode("USD"),
    CurrencyCode("ILS"),
    CurrencyCode("GBP"),
    CurrencyCode("EURO"),
)

DEFAULT_CURRENCY = CurrencyCode("USD")

# Recommended labels only, the store accepts any text
CATEGORIES: tuple[CategoryName, ...] = (
    CategoryName("Food"),
    CategoryName("Transportation"),
    CategoryName("Rent"),
    CategoryName("Utilities"),
    CategoryName("Entertainment"),
    CategoryName("Other"),
)


@dataclass(frozen=True)
class LedgerEntry:
    """Immutable cost record."""

    id: int
    amount: float
    currency: CurrencyCode
    category: CategoryName
    description: str
    created_at: str | None = None
    created_year: int | None = None
    created_month: int | None = None
    created_day: int | None = None
    date: str | None = None


@dataclass(frozen=True)
class NewCost:
    """Cost as returned to the caller after insertion."""

    amount: float
    currency: CurrencyCode
    category: CategoryName
    description: str
