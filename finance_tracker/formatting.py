# finance_tracker/formatting.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

_SYMBOLS = {"BRL": "R$", "USD": "$"}
# currencies written with "." for thousands and "," for decimals
_COMMA_DECIMAL = {"BRL", "EUR"}


@dataclass(frozen=True)
class FinanceSettings:
    currency: str = "BRL"
    currency_symbol: str = "R$"


def settings_for_currency(code: str) -> FinanceSettings:
    code = (code or "BRL").upper()
    return FinanceSettings(currency=code, currency_symbol=_SYMBOLS.get(code, "€"))


def format_currency(amount, settings: FinanceSettings) -> str:
    """
    Format *amount* in the settings' currency, e.g. ``R$ 1.234,56`` or
    ``$1,234.56``. Unparseable values format as zero.
    """
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, TypeError):
        value = Decimal("0")
    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    text = f"{abs(value):,.2f}"
    if settings.currency in _COMMA_DECIMAL:
        text = text.replace(",", "_").replace(".", ",").replace("_", ".")
        return f"{sign}{settings.currency_symbol} {text}"
    return f"{sign}{settings.currency_symbol}{text}"


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"
