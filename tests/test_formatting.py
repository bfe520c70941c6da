from decimal import Decimal

from finance_tracker.formatting import (
    FinanceSettings,
    format_currency,
    format_percentage,
    settings_for_currency,
)


def test_settings_for_currency_symbols():
    assert settings_for_currency("BRL") == FinanceSettings("BRL", "R$")
    assert settings_for_currency("usd") == FinanceSettings("USD", "$")
    assert settings_for_currency("EUR").currency_symbol == "€"


def test_format_currency_brl_uses_comma_decimals():
    settings = settings_for_currency("BRL")
    assert format_currency(Decimal("1234.5"), settings) == "R$ 1.234,50"
    assert format_currency(-700, settings) == "-R$ 700,00"


def test_format_currency_usd():
    settings = settings_for_currency("USD")
    assert format_currency(1234567.891, settings) == "$1,234,567.89"
    assert format_currency(None, settings) == "$0.00"


def test_format_percentage():
    assert format_percentage(75) == "75.0%"
    assert format_percentage(33.333) == "33.3%"
