"""Currency display rules and number formatting."""

from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple


class CurrencyInfo(NamedTuple):
    code: str
    symbol: str
    name: str
    decimal_places: int


CURRENCIES: dict[str, CurrencyInfo] = {
    "USD": CurrencyInfo("USD", "$", "US Dollar", 2),
    "EUR": CurrencyInfo("EUR", "€", "Euro", 2),
    "GBP": CurrencyInfo("GBP", "£", "British Pound", 2),
    "CAD": CurrencyInfo("CAD", "C$", "Canadian Dollar", 2),
    "AUD": CurrencyInfo("AUD", "A$", "Australian Dollar", 2),
    "JPY": CurrencyInfo("JPY", "¥", "Japanese Yen", 0),
    "INR": CurrencyInfo("INR", "₹", "Indian Rupee", 2),
    "CNY": CurrencyInfo("CNY", "¥", "Chinese Yuan", 2),
    "CHF": CurrencyInfo("CHF", "CHF ", "Swiss Franc", 2),
    "HKD": CurrencyInfo("HKD", "HK$", "Hong Kong Dollar", 2),
    "SGD": CurrencyInfo("SGD", "S$", "Singapore Dollar", 2),
    "MXN": CurrencyInfo("MXN", "Mex$", "Mexican Peso", 2),
    "BRL": CurrencyInfo("BRL", "R$", "Brazilian Real", 2),
    "ZAR": CurrencyInfo("ZAR", "R", "South African Rand", 2),
    "RUB": CurrencyInfo("RUB", "₽", "Russian Ruble", 2),
    "KRW": CurrencyInfo("KRW", "₩", "South Korean Won", 0),
    "NZD": CurrencyInfo("NZD", "NZ$", "New Zealand Dollar", 2),
}


def format_currency(amount: Decimal | float | int, currency: str = "USD") -> str:
    """Format an amount for display, e.g. ``$1,234.50`` or ``-¥1,200``.

    Unknown currency codes fall back to ``"<CODE> "`` with 2 decimals.
    """
    info = CURRENCIES.get(currency, CurrencyInfo(currency, f"{currency} ", currency, 2))
    value = Decimal(str(amount))
    quantum = Decimal(1).scaleb(-info.decimal_places)
    value = value.quantize(quantum, rounding=ROUND_HALF_UP)
    formatted = f"{abs(value):,.{info.decimal_places}f}"
    if value < 0:
        return f"-{info.symbol}{formatted}"
    return f"{info.symbol}{formatted}"


def format_compact_currency(amount: Decimal | float | int, currency: str = "USD") -> str:
    """Format large amounts as ``$1.50M`` / ``$12.3K``."""
    info = CURRENCIES.get(currency, CurrencyInfo(currency, f"{currency} ", currency, 2))
    value = Decimal(str(amount))
    if value >= 1_000_000:
        return f"{info.symbol}{value / 1_000_000:.2f}M"
    if value >= 1_000:
        return f"{info.symbol}{value / 1_000:.1f}K"
    return format_currency(value, currency)


def format_percentage(value: Decimal | float | int, decimal_places: int = 1) -> str:
    """Format a percentage value, e.g. ``18.6%``."""
    return f"{Decimal(str(value)):.{decimal_places}f}%"
