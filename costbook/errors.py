"""Error types raised by costbook.

Every failure the core reports carries a message that can be shown to the
user as-is. Storage engine failures are not wrapped: they propagate as the
original ``sqlite3.Error``.
"""


class CostbookError(Exception):
    """Base class for costbook errors."""


class UnsupportedEnvironmentError(CostbookError):
    """No compatible storage engine is available."""


class RatesUnavailableError(CostbookError):
    """Exchange rates are not set or lack a required currency."""


class RatesValidationError(CostbookError):
    """Fetched exchange rate data is malformed or incomplete."""


class RatesFetchError(CostbookError):
    """Exchange rates could not be retrieved."""
