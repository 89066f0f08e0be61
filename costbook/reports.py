"""Report generation over the cost repository.

The generator holds no state of its own: every report is computed from the
store contents and the converter's rate table at the time of the call.
"""

import asyncio
import logging

from costbook.domain.conversion import CurrencyConverter
from costbook.domain.models import DEFAULT_CURRENCY, CurrencyCode
from costbook.domain.report import (
    CategoryTotal,
    MonthlyReport,
    YearlyReport,
    build_monthly_report,
    build_yearly_report,
    category_totals,
)
from costbook.store.repository import CostRepository

logger = logging.getLogger(__name__)


class ReportGenerator:
    """Builds month and year reports in a requested currency."""

    def __init__(self, repository: CostRepository, converter: CurrencyConverter) -> None:
        self.repository = repository
        self.converter = converter

    async def get_report(self, year: int, month: int, target_currency: str = DEFAULT_CURRENCY) -> MonthlyReport:
        """Report for one month with a total in ``target_currency``.

        Args:
            year: Calendar year.
            month: Month (1-12).
            target_currency: Currency of the total.

        Returns:
            MonthlyReport with every entry of the month.

        Raises:
            RatesUnavailableError: If any entry cannot be converted.
            sqlite3.Error: If the store fails.
        """
        year, month = int(year), int(month)
        target = CurrencyCode(str(target_currency or DEFAULT_CURRENCY))
        entries = await self.repository.find_by_month(year, month)
        report = build_monthly_report(year, month, entries, target, self.converter)
        logger.debug("Report %d-%02d: %d entries, total %s %s", year, month, len(entries), report.total.amount, target)
        return report

    async def get_yearly_report(self, year: int, target_currency: str = DEFAULT_CURRENCY) -> YearlyReport:
        """Month totals for a whole year.

        The twelve month reports run concurrently; results are collected by
        month, so January is always first.

        Raises:
            RatesUnavailableError: If any entry of the year cannot be converted.
            sqlite3.Error: If the store fails.
        """
        target = CurrencyCode(str(target_currency or DEFAULT_CURRENCY))
        reports = await asyncio.gather(*(self.get_report(year, month, target) for month in range(1, 13)))
        return build_yearly_report(int(year), target, reports)

    async def get_category_breakdown(
        self, year: int, month: int, target_currency: str = DEFAULT_CURRENCY
    ) -> tuple[MonthlyReport, list[CategoryTotal]]:
        """Month report together with its per-category totals."""
        report = await self.get_report(year, month, target_currency)
        return report, category_totals(report, self.converter)
