"""Exchange rate fetching and validation."""

import logging
from pathlib import Path
from typing import Any

import requests

from costbook.config import save_rates
from costbook.domain.conversion import CurrencyConverter, check_rate
from costbook.domain.models import CURRENCIES, RateTable
from costbook.errors import RatesFetchError, RatesValidationError

logger = logging.getLogger(__name__)

REQUIRED_CURRENCIES = CURRENCIES

DEFAULT_TIMEOUT = 10


def validate_rates(data: Any) -> RateTable:
    """Check that ``data`` holds a positive finite number for every supported currency.

    Args:
        data: Decoded JSON payload.

    Returns:
        Rate table with the four required currencies.

    Raises:
        RatesValidationError: If the payload is not an object or a rate is missing or invalid.
    """
    if not isinstance(data, dict):
        raise RatesValidationError("Invalid rates JSON: expected an object")

    rates: RateTable = {}
    for code in REQUIRED_CURRENCIES:
        rates[code] = check_rate(code, data.get(code))
    return rates


def fetch_rates(url: str, timeout: float = DEFAULT_TIMEOUT) -> RateTable:
    """Fetch and validate a rate table.

    Args:
        url: URL returning JSON like {"USD": 1, "GBP": 1.8, "EURO": 0.7, "ILS": 3.4}.
        timeout: Request timeout in seconds.

    Returns:
        Validated rate table.

    Raises:
        RatesFetchError: If the URL is empty or the request fails.
        RatesValidationError: If the response is not valid rate JSON.
    """
    url = (url or "").strip()
    if not url:
        raise RatesFetchError("Rates URL is empty")

    try:
        response = requests.get(url, headers={"Accept": "application/json"}, timeout=timeout)
        response.raise_for_status()
    except requests.HTTPError as e:
        raise RatesFetchError(f"Rates fetch failed: {e.response.status_code}") from e
    except requests.RequestException as e:
        raise RatesFetchError(f"Rates fetch failed: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        raise RatesValidationError("Invalid rates JSON") from e

    return validate_rates(data)


def refresh_rates(
    url: str,
    converter: CurrencyConverter,
    config_path: Path | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> RateTable:
    """Fetch rates, save them and apply them to ``converter``.

    Nothing is saved or applied unless the fetch and validation succeed.

    Raises:
        RatesFetchError: If the request fails.
        RatesValidationError: If the response is not valid rate JSON.
    """
    rates = fetch_rates(url, timeout=timeout)
    save_rates(rates, config_path)
    converter.set_rates(rates)
    logger.info("Fetched and applied rates from %s", url)
    return rates
