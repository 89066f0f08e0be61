"""Session bootstrap: wires the repository, converter and report generator."""

import logging
from dataclasses import dataclass
from pathlib import Path

from costbook.config import get_saved_rates
from costbook.domain.conversion import CurrencyConverter
from costbook.errors import RatesValidationError
from costbook.rates import validate_rates
from costbook.reports import ReportGenerator
from costbook.store.repository import CostRepository
from costbook.store.schema import DB_VERSION

logger = logging.getLogger(__name__)


@dataclass
class Ledger:
    """Everything one session needs to record and report costs."""

    repository: CostRepository
    converter: CurrencyConverter
    reports: ReportGenerator


def apply_saved_rates(ledger: Ledger, config_path: Path | None = None) -> bool:
    """Load the saved rate table into the ledger's converter.

    Returns:
        True if rates were applied, False if none are saved or they are invalid.
    """
    saved = get_saved_rates(config_path)
    if saved is None:
        return False
    try:
        rates = validate_rates(saved)
    except RatesValidationError as e:
        logger.warning("Ignoring saved rates: %s", e)
        return False
    ledger.converter.set_rates(rates)
    return True


def open_ledger(
    db_path: Path | None = None,
    config_path: Path | None = None,
    version: int = DB_VERSION,
) -> Ledger:
    """Build a ledger and apply the saved rates, if any.

    The store itself opens lazily on the first repository call.
    """
    repository = CostRepository(db_path, version=version)
    converter = CurrencyConverter()
    ledger = Ledger(repository=repository, converter=converter, reports=ReportGenerator(repository, converter))
    if not apply_saved_rates(ledger, config_path):
        logger.debug("No saved rates, conversions unavailable until rates are fetched")
    return ledger
