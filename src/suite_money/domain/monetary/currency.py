from __future__ import annotations

from enum import Enum
from functools import total_ordering


class CurrencyType(Enum):
    """Enumeration of currency types."""

    FIAT = "FIAT"
    CRYPTO = "CRYPTO"
    COMMODITY = "COMMODITY"


@total_ordering
class Currency:
    """Represents a currency with code, precision, and metadata.

    Currencies are equal when their codes are equal and they order by code, which is
    the order used by sorted money sets.

    Attributes:
        code (str): Currency code (e.g., "USD", "BTC").
        precision (int): Number of decimal places (0-18).
        name (str): Full currency name.
        currency_type (CurrencyType): Type of currency (FIAT, CRYPTO, COMMODITY).
    """

    __slots__ = ("_code", "_precision", "_name", "_currency_type")

    def __init__(self, code: str, precision: int, name: str, currency_type: CurrencyType = CurrencyType.FIAT):
        """Initialize a Currency instance.

        Args:
            code (str): Currency code (e.g., "USD", "BTC").
            precision (int): Number of decimal places (0-18).
            name (str): Full currency name.
            currency_type (CurrencyType): Type of currency.

        Raises:
            ValueError: If parameters are invalid.
            TypeError: If currency_type is not CurrencyType instance.
        """
        # Validate inputs
        if not isinstance(code, str) or not code.strip():
            raise ValueError(f"$code must be a non-empty string, but provided value is: '{code}'")

        if isinstance(precision, bool) or not isinstance(precision, int) or precision < 0 or precision > 18:
            raise ValueError(f"$precision must be an integer between 0 and 18, but provided value is: {precision}")

        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"$name must be a non-empty string, but provided value is: '{name}'")

        if not isinstance(currency_type, CurrencyType):
            raise TypeError(f"$currency_type must be a CurrencyType instance, but provided value is: {currency_type}")

        object.__setattr__(self, "_code", code.upper().strip())
        object.__setattr__(self, "_precision", precision)
        object.__setattr__(self, "_name", name.strip())
        object.__setattr__(self, "_currency_type", currency_type)

    @property
    def code(self) -> str:
        """Get the currency code."""
        return self._code

    @property
    def precision(self) -> int:
        """Get the currency precision."""
        return self._precision

    @property
    def name(self) -> str:
        """Get the currency name."""
        return self._name

    @property
    def currency_type(self) -> CurrencyType:
        """Get the currency type."""
        return self._currency_type

    @property
    def is_fiat(self) -> bool:
        return self._currency_type == CurrencyType.FIAT

    @property
    def is_crypto(self) -> bool:
        return self._currency_type == CurrencyType.CRYPTO

    @property
    def is_commodity(self) -> bool:
        return self._currency_type == CurrencyType.COMMODITY

    def has_same_definition(self, other: Currency) -> bool:
        """Check that $other carries the same code and metadata as this currency.

        Plain equality only compares codes. Registries use this stricter check so that a
        look-alike currency with a different precision is not accepted as a member.
        """
        if not isinstance(other, Currency):
            return False
        if other is self:
            return True
        return (
            self._code == other._code
            and self._precision == other._precision
            and self._name == other._name
            and self._currency_type == other._currency_type
        )

    def __setattr__(self, name, value):
        raise AttributeError(f"`Currency` is immutable; cannot set attribute '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"`Currency` is immutable; cannot delete attribute '{name}'")

    def __eq__(self, other) -> bool:
        """Check equality with another Currency."""
        if not isinstance(other, Currency):
            return False
        return self.code == other.code

    def __lt__(self, other) -> bool:
        """Order currencies by code."""
        if not isinstance(other, Currency):
            return NotImplemented
        return self.code < other.code

    def __hash__(self) -> int:
        """Hash based on currency code."""
        return hash(self.code)

    def __str__(self) -> str:
        """Return string representation."""
        return self.code

    def __repr__(self) -> str:
        """Return detailed string representation."""
        return f"{self.__class__.__name__}('{self.code}', {self.precision}, '{self.name}', {self.currency_type})"


def currency_code_key(currency: Currency) -> str:
    """Sort key ordering currencies by code; used for code-ordered enumeration."""
    return currency.code
