"""
Money formatting.

Amounts are integer minor units (cents, paise). Formatting follows the
en-US convention for every currency: symbol first, thousands separators,
fixed number of fraction digits.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union

class CurrencyCode(str, Enum):
    USD = "USD"
    INR = "INR"

@dataclass(frozen=True)
class CurrencyFormat:
    code: CurrencyCode
    symbol: str
    minor_digits: int = 2

    @property
    def quantum(self) -> Decimal:
        return Decimal(1).scaleb(-self.minor_digits)

# Built once at import, never mutated
CURRENCY_FORMATS: Mapping[CurrencyCode, CurrencyFormat] = MappingProxyType({
    CurrencyCode.USD: CurrencyFormat(CurrencyCode.USD, "$"),
    CurrencyCode.INR: CurrencyFormat(CurrencyCode.INR, "₹"),
})


def to_currency_code(value: Union[str, CurrencyCode, None], default: CurrencyCode = CurrencyCode.USD) -> CurrencyCode:
    """Resolve a currency code, falling back to `default` for unknown or missing values."""
    if value is None:
        return default
    if isinstance(value, CurrencyCode):
        return value
    try:
        return CurrencyCode(value.upper())
    except ValueError:
        return default


def format_money(
    amount: int,
    currency: Optional[CurrencyCode] = None,
    formats: Mapping[CurrencyCode, CurrencyFormat] = CURRENCY_FORMATS,
) -> str:
    """
    Format an integer minor-unit amount for display.

    Args:
        amount: Amount in minor units (e.g. 1000 cents)
        currency: Currency to format in; USD when omitted or unregistered
        formats: Currency registry to look the format up in

    Returns:
        Display string, e.g. "$10.00" or "-₹1,234.50"
    """
    fmt = formats.get(currency or CurrencyCode.USD) or formats[CurrencyCode.USD]

    major = (Decimal(amount).scaleb(-fmt.minor_digits)).quantize(fmt.quantum, rounding=ROUND_HALF_UP)
    sign = "-" if major < 0 else ""
    return f"{sign}{fmt.symbol}{abs(major):,.{fmt.minor_digits}f}"
