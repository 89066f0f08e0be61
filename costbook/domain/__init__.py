"""Domain models and pure functions for costbook.

This package contains the functional core:
- No database or network access
- Report calculations and currency conversion
- Easy to test
"""

from costbook.domain.conversion import CurrencyConverter
from costbook.domain.models import (
    CATEGORIES,
    CURRENCIES,
    DEFAULT_CURRENCY,
    CategoryName,
    CurrencyCode,
    LedgerEntry,
    NewCost,
    RateTable,
)

__all__ = [
    "CATEGORIES",
    "CURRENCIES",
    "DEFAULT_CURRENCY",
    "CategoryName",
    "CurrencyCode",
    "CurrencyConverter",
    "LedgerEntry",
    "NewCost",
    "RateTable",
]
