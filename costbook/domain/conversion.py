"""Currency conversion through a shared reference unit."""

import logging
import math
from collections.abc import Mapping
from typing import Any

from costbook.domain.models import RateTable
from costbook.errors import RatesUnavailableError, RatesValidationError

logger = logging.getLogger(__name__)


def check_rate(code: str, value: Any) -> float:
    """Return ``value`` as a float if it is a usable rate for ``code``.

    Raises:
        RatesValidationError: If the value is not a finite number above zero.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RatesValidationError(f"Missing/invalid rate: {code}")
    try:
        rate = float(value)
    except OverflowError:
        raise RatesValidationError(f"Missing/invalid rate: {code}") from None
    if not math.isfinite(rate) or rate <= 0:
        raise RatesValidationError(f"Missing/invalid rate: {code}")
    return rate


class CurrencyConverter:
    """Holds the active rate table and converts amounts between currencies.

    A rate of ``r`` for a currency means one unit of it equals ``r`` units of
    the reference. The table is only ever replaced as a whole.
    """

    def __init__(self, rates: Mapping[str, float] | None = None) -> None:
        self._rates: RateTable | None = None
        if rates is not None:
            self.set_rates(rates)

    @property
    def rates(self) -> RateTable | None:
        """Copy of the active table, or None when unset."""
        if self._rates is None:
            return None
        return dict(self._rates)

    @property
    def has_rates(self) -> bool:
        return self._rates is not None

    def set_rates(self, rates: Mapping[str, float]) -> None:
        """Replace the active rate table.

        Args:
            rates: Mapping of currency code to reference-unit value.

        Raises:
            RatesValidationError: If any rate is not a positive finite number.
                The previous table stays active.
        """
        self._rates = {code: check_rate(code, value) for code, value in rates.items()}
        logger.debug("Rate table set for %s", ", ".join(sorted(self._rates)))

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert ``amount`` from one currency to another.

        Args:
            amount: Amount in ``from_currency`` units.
            from_currency: Source currency code.
            to_currency: Target currency code.

        Returns:
            Amount in ``to_currency`` units, unrounded.

        Raises:
            RatesUnavailableError: If no table is set or a code is missing from it.
        """
        rates = self._rates
        if rates is None:
            raise RatesUnavailableError("Exchange rates are not set. Fetch rates (USD, ILS, GBP, EURO) first.")

        missing = [code for code in dict.fromkeys((from_currency, to_currency)) if code not in rates]
        if missing:
            raise RatesUnavailableError(f"Exchange rate missing for: {', '.join(missing)}")

        return float(amount) * rates[from_currency] / rates[to_currency]
