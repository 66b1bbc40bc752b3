from __future__ import annotations

import re
from decimal import Decimal, getcontext, InvalidOperation

from babel import Locale
from babel.numbers import format_currency, format_decimal

from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.utils.numeric_tools import DecimalLike, as_decimal

# Set high precision for financial calculations
getcontext().prec = 28

# Locale used by `Money.format` when no culture is provided
DEFAULT_CULTURE = "en_US"

# Money format patterns understood by `Money.format`
GENERAL_PATTERN = "G"
CURRENCY_PATTERN = "C"
NUMBER_PATTERN = "N"


class Money:
    """Represents a monetary amount with currency.

    Uses Python's Decimal for precision arithmetic. The amount is stored exactly as
    provided; no rounding to the currency precision is applied.

    The default Money (see `default`) has no currency and a zero amount. It stands for
    "no value" and is different from a zero amount in a real currency.

    Supports values between -999_999_999_999_999.999999999999999999 and
    +999_999_999_999_999.999999999999999999

    `+` and `-` between Money values use the global decimal context (28 significant digits),
    so results with more digits are rounded. Money sets sum amounts exactly instead and
    reject a sum that would need rounding.
    """

    __slots__ = ("_amount", "_currency")

    # Value limits
    MAX_VALUE = Decimal("999_999_999_999_999.999999999999999999")
    MIN_VALUE = Decimal("-999_999_999_999_999.999999999999999999")

    def __init__(self, amount: DecimalLike, currency: Currency | None = None):
        """Initialize Money with amount and currency.

        Args:
            amount: Numeric amount (Decimal-like scalar).
            currency (Currency | None): Currency object, or None for the default Money.

        Raises:
            ValueError: If amount is invalid, out of range, or non-zero without a currency.
            TypeError: If currency is neither a Currency instance nor None.
        """
        # Raise: currency must be an instance of Currency (or None for the default Money)
        if currency is not None and not isinstance(currency, Currency):
            raise TypeError(f"$currency must be a Currency instance or None, but provided value is: {currency}")

        # Raise: $amount must be convertible to Decimal
        try:
            decimal_amount = as_decimal(amount)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Cannot init `Money` because $amount ({amount!r}) cannot be converted to Decimal") from e

        # Raise: amount must be within allowed range
        if decimal_amount > self.MAX_VALUE:
            raise ValueError(f"$amount exceeds maximum allowed value {self.MAX_VALUE}, but provided value is: {decimal_amount}")
        if decimal_amount < self.MIN_VALUE:
            raise ValueError(f"$amount is below minimum allowed value {self.MIN_VALUE}, but provided value is: {decimal_amount}")

        # Raise: only a zero amount can exist without a currency
        if currency is None and decimal_amount != 0:
            raise ValueError(f"Cannot init `Money` without $currency for non-zero $amount ({decimal_amount})")

        self._amount = decimal_amount
        self._currency = currency

    @classmethod
    def default(cls) -> Money:
        """Return the default Money: no currency and a zero amount."""
        return cls(Decimal("0"))

    @property
    def amount(self) -> Decimal:
        """Get the decimal amount."""
        return self._amount

    @property
    def currency(self) -> Currency | None:
        """Get the currency, or None for the default Money."""
        return self._currency

    @property
    def is_default(self) -> bool:
        return self._currency is None

    @property
    def is_zero(self) -> bool:
        return self._amount == 0

    def _check_same_currency(self, other: Money) -> None:
        """Check if two Money objects have the same currency.

        Raises:
            ValueError: If currencies don't match.
        """
        if self.currency != other.currency:
            raise ValueError(f"Cannot operate on different currencies: {self.currency} and {other.currency}")

    # region Formatting

    def format(self, pattern: str | None = None, culture: str | Locale | None = None) -> str:
        """Render this Money for display using Babel number formatting.

        Patterns:
            - None, "" or "G": locale number at currency precision followed by the code, e.g. "1,234.50 USD".
            - "C": locale currency format with symbol, e.g. "$1,234.50", at currency precision.
            - "N": locale number at currency precision without the currency, e.g. "1,234.50".

        Args:
            pattern: One of the patterns above.
            culture: Babel locale identifier (e.g. "de_DE") or `Locale`; None means `DEFAULT_CULTURE`.

        Returns:
            str: Formatted value; the default Money formats as an empty string.

        Raises:
            ValueError: If $pattern is not supported.
        """
        pattern = pattern or GENERAL_PATTERN
        # Raise: only known patterns are supported
        if pattern not in (GENERAL_PATTERN, CURRENCY_PATTERN, NUMBER_PATTERN):
            raise ValueError(f"$pattern must be one of 'G', 'C', 'N' (optionally empty), but provided value is: '{pattern}'")

        if self._currency is None:
            return ""

        locale = culture if culture is not None else DEFAULT_CULTURE

        if pattern == CURRENCY_PATTERN:
            currency_format = _currency_format(Locale.parse(locale), self._currency.precision)
            return format_currency(self._amount, self._currency.code, format=currency_format, locale=locale, currency_digits=False)

        number = format_decimal(self._amount, format=_number_format(self._currency.precision), locale=locale)
        if pattern == NUMBER_PATTERN:
            return number

        return f"{number} {self._currency.code}"

    def __format__(self, format_spec: str) -> str:
        return self.format(format_spec or None)

    # endregion

    # region Comparison operators (same currency required)

    def __eq__(self, other) -> bool:
        """Check equality with another Money object."""
        if not isinstance(other, Money):
            return False
        if self.currency != other.currency:
            return False
        return self.amount == other.amount

    def __lt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other) -> bool:
        if not isinstance(other, Money):
            return NotImplemented
        self._check_same_currency(other)
        return self.amount >= other.amount

    # endregion

    # region Arithmetic operations

    def __add__(self, other):
        """Add two Money objects (same currency). The default Money acts as zero."""
        if not isinstance(other, Money):
            return NotImplemented
        if other.is_default:
            return self
        if self.is_default:
            return other
        self._check_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other):
        """Subtract two Money objects (same currency). The default Money acts as zero."""
        if not isinstance(other, Money):
            return NotImplemented
        return self + (-other)

    def __neg__(self):
        return Money(-self.amount, self.currency)

    def __pos__(self):
        return self

    def __abs__(self):
        return Money(abs(self.amount), self.currency)

    # endregion

    # region String representations

    def __str__(self) -> str:
        """Return string like '1000.50 USD'."""
        if self._currency is None:
            return ""
        return f"{self.amount} {self._currency.code}"

    def __repr__(self) -> str:
        """Return string like 'Money(1000.50, USD)'."""
        if self._currency is None:
            return f"{self.__class__.__name__}()"
        return f"{self.__class__.__name__}({self.amount}, {self._currency.code})"

    def __hash__(self) -> int:
        """Hash based on amount and currency code."""
        return hash((self.amount, self._currency.code if self._currency is not None else None))

    @classmethod
    def from_str(cls, value_str: str, registry: CurrencyRegistry | None = None) -> Money:
        """Parse Money from string like '1000.50 USD'.

        Args:
            value_str (str): String representation.
            registry (CurrencyRegistry | None): Registry used to resolve the currency code;
                None means `CurrencyRegistry.default()`.

        Returns:
            Money: Money object.

        Raises:
            ValueError: If string format is invalid or the currency code is unknown.
        """
        registry = registry if registry is not None else CurrencyRegistry.default()

        value_str = value_str.strip()
        if not value_str:
            raise ValueError("Value string with $value_str = '' cannot be empty")

        # Split by whitespace
        parts = value_str.split()
        if len(parts) != 2:
            raise ValueError(f"Value string with $value_str = '{value_str}' must be in format 'value currency_code'")

        value_part, currency_part = parts

        try:
            value = Decimal(value_part)
        except (ValueError, TypeError, InvalidOperation) as e:
            raise ValueError(f"Invalid value part '{value_part}' in string '{value_str}'") from e

        try:
            currency = registry.lookup(currency_part)
        except ValueError as e:
            raise ValueError(f"Invalid currency part '{currency_part}' in string '{value_str}'") from e

        return cls(value, currency)

    # endregion


def _number_format(precision: int) -> str:
    """Build a Babel number pattern with grouping and exactly $precision fraction digits."""
    if precision == 0:
        return "#,##0"
    return "#,##0." + "0" * precision


def _currency_format(locale: Locale, precision: int) -> str:
    """Take the standard currency pattern of $locale and give it exactly $precision fraction digits."""
    fraction = "." + "0" * precision if precision > 0 else ""
    return re.sub(r"0(?:\.0+)?", "0" + fraction, locale.currency_formats["standard"].pattern)
