"""Tests for costbook.domain.conversion."""

import pytest

from costbook.domain.conversion import CurrencyConverter
from costbook.errors import RatesUnavailableError, RatesValidationError

RATES = {"USD": 1, "GBP": 1.8, "EURO": 0.7, "ILS": 3.4}


class TestConvert:
    """Tests for CurrencyConverter.convert."""

    def test_fails_before_rates_are_set(self) -> None:
        """Should raise when no rate table has been set."""
        converter = CurrencyConverter()

        with pytest.raises(RatesUnavailableError):
            converter.convert(100, "GBP", "USD")

    def test_converts_through_reference(self) -> None:
        """Should convert GBP to USD using the reference rates."""
        converter = CurrencyConverter()
        converter.set_rates(RATES)

        assert converter.convert(100, "GBP", "USD") == pytest.approx(180)

    def test_converts_between_non_reference_currencies(self) -> None:
        """Should route EURO to ILS through the reference unit."""
        converter = CurrencyConverter(RATES)

        assert converter.convert(34, "EURO", "ILS") == pytest.approx(34 * 0.7 / 3.4)

    @pytest.mark.parametrize("code", ["USD", "GBP", "EURO", "ILS"])
    def test_same_currency_is_identity(self, code: str) -> None:
        """Should return the amount unchanged for the same currency."""
        converter = CurrencyConverter(RATES)

        assert converter.convert(123.45, code, code) == pytest.approx(123.45)

    def test_round_trip(self) -> None:
        """Should return close to the original after converting there and back."""
        converter = CurrencyConverter(RATES)

        there = converter.convert(57.3, "ILS", "GBP")
        assert converter.convert(there, "GBP", "ILS") == pytest.approx(57.3)

    def test_missing_currency(self) -> None:
        """Should raise when a currency is absent from the table."""
        converter = CurrencyConverter({"USD": 1, "GBP": 1.8})

        with pytest.raises(RatesUnavailableError, match="EURO"):
            converter.convert(10, "EURO", "USD")


class TestSetRates:
    """Tests for rate table replacement."""

    def test_replaces_whole_table(self) -> None:
        """Should drop currencies missing from the new table."""
        converter = CurrencyConverter(RATES)
        converter.set_rates({"USD": 1, "GBP": 2})

        assert converter.rates == {"USD": 1.0, "GBP": 2.0}
        with pytest.raises(RatesUnavailableError):
            converter.convert(1, "ILS", "USD")

    def test_rates_returns_copy(self) -> None:
        """Should not let callers mutate the active table."""
        converter = CurrencyConverter(RATES)
        rates = converter.rates
        assert rates is not None
        rates["USD"] = 99

        assert converter.convert(1, "USD", "USD") == 1

    def test_has_rates(self) -> None:
        """Should report whether a table is set."""
        converter = CurrencyConverter()
        assert not converter.has_rates
        converter.set_rates(RATES)
        assert converter.has_rates

    @pytest.mark.parametrize("bad", [0, -1.5, float("nan"), 10**400, "2", None])
    def test_rejects_unusable_rate(self, bad: object) -> None:
        """Should refuse zero, negative and non-numeric rates and keep the old table."""
        converter = CurrencyConverter(RATES)

        with pytest.raises(RatesValidationError, match="USD"):
            converter.set_rates({**RATES, "USD": bad})

        assert converter.rates == {code: float(v) for code, v in RATES.items()}
        assert converter.convert(100, "GBP", "USD") == pytest.approx(180)
