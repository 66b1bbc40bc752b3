from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from functools import cache

from bidict import bidict

from suite_money.domain.monetary.currency import Currency, CurrencyType, currency_code_key
from suite_money.domain.monetary.errors import UnknownCurrencyCodeError

logger = logging.getLogger(__name__)


# region Predefined currencies

# Fiat currencies
USD = Currency("USD", 2, "US Dollar", CurrencyType.FIAT)
EUR = Currency("EUR", 2, "Euro", CurrencyType.FIAT)
GBP = Currency("GBP", 2, "British Pound", CurrencyType.FIAT)
JPY = Currency("JPY", 0, "Japanese Yen", CurrencyType.FIAT)
CHF = Currency("CHF", 2, "Swiss Franc", CurrencyType.FIAT)
CAD = Currency("CAD", 2, "Canadian Dollar", CurrencyType.FIAT)
AUD = Currency("AUD", 2, "Australian Dollar", CurrencyType.FIAT)
CZK = Currency("CZK", 2, "Czech Koruna", CurrencyType.FIAT)

# Crypto currencies
BTC = Currency("BTC", 8, "Bitcoin", CurrencyType.CRYPTO)
ETH = Currency("ETH", 18, "Ethereum", CurrencyType.CRYPTO)
USDT = Currency("USDT", 6, "Tether", CurrencyType.CRYPTO)

# Commodities
XAU = Currency("XAU", 4, "Gold", CurrencyType.COMMODITY)
XAG = Currency("XAG", 4, "Silver", CurrencyType.COMMODITY)

PREDEFINED_CURRENCIES: tuple[Currency, ...] = (USD, EUR, GBP, JPY, CHF, CAD, AUD, CZK, BTC, ETH, USDT, XAU, XAG)

# endregion


class CurrencyRegistry:
    """Authority over the set of currencies that are valid together.

    A registry is fixed at construction: it answers membership and code lookup queries
    and never changes afterwards, so money sets can keep a reference to it for their
    whole lifetime.

    Attributes:
        name (str): Human readable registry name, used in error messages.
    """

    def __init__(self, name: str, currencies: Iterable[Currency]):
        """Initialize a registry with the given $currencies.

        Args:
            name (str): Registry name.
            currencies (Iterable[Currency]): Currencies to register; codes must be unique.

        Raises:
            ValueError: If $name is empty or two currencies share a code.
            TypeError: If an item of $currencies is not a Currency instance.
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"$name must be a non-empty string, but provided value is: '{name}'")

        currencies_by_code: bidict[str, Currency] = bidict()
        for currency in currencies:
            # Raise: only Currency instances can be registered
            if not isinstance(currency, Currency):
                raise TypeError(f"$currencies must contain only Currency instances, but provided value is: {currency!r}")

            # Raise: codes must be unique; equal codes compare equal, so bidict alone would keep the first silently
            if currency.code in currencies_by_code:
                raise ValueError(f"Currency with code '{currency.code}' is registered more than once in registry '{name}'")

            currencies_by_code.put(currency.code, currency)

        self._name = name.strip()
        self._currencies_by_code = currencies_by_code
        logger.debug(f"Created CurrencyRegistry named '{self._name}' with {len(currencies_by_code)} currency(ies)")

    # region Default registry

    @classmethod
    def default(cls) -> CurrencyRegistry:
        """Return the process-wide default registry.

        The registry holds `PREDEFINED_CURRENCIES`. It is created on first use and the
        same instance is returned afterwards.
        """
        return _get_default_registry()

    # endregion

    # region Queries

    @property
    def name(self) -> str:
        return self._name

    def contains(self, currency: Currency) -> bool:
        """Check whether $currency is a member of this registry.

        A currency is a member only if the registered currency with the same code has the
        same definition (precision, name and type).
        """
        if not isinstance(currency, Currency):
            return False

        registered = self._currencies_by_code.get(currency.code)
        return registered is not None and registered.has_same_definition(currency)

    def contains_code(self, code: str) -> bool:
        return self.try_lookup(code) is not None

    def lookup(self, code: str) -> Currency:
        """Get currency from registry by code.

        Args:
            code (str): Currency code to look up; case and surrounding whitespace are ignored.

        Returns:
            Currency: The registered currency.

        Raises:
            TypeError: If $code is not a string.
            UnknownCurrencyCodeError: If $code is not registered.
        """
        if not isinstance(code, str):
            raise TypeError(f"$code must be a string, but provided value is: {code!r}")

        normalized_code = code.upper().strip()
        currency = self._currencies_by_code.get(normalized_code)
        if currency is None:
            raise UnknownCurrencyCodeError(normalized_code, self._name)

        return currency

    def try_lookup(self, code: str) -> Currency | None:
        """Like `lookup`, but returns None instead of raising for unknown or invalid codes."""
        if not isinstance(code, str):
            return None
        return self._currencies_by_code.get(code.upper().strip())

    @property
    def codes(self) -> frozenset[str]:
        return frozenset(self._currencies_by_code.keys())

    # endregion

    # region Magic methods

    def __getitem__(self, code: str) -> Currency:
        return self.lookup(code)

    def __contains__(self, currency: object) -> bool:
        return isinstance(currency, Currency) and self.contains(currency)

    def __iter__(self) -> Iterator[Currency]:
        """Iterate registered currencies in code order."""
        return iter(sorted(self._currencies_by_code.values(), key=currency_code_key))

    def __len__(self) -> int:
        return len(self._currencies_by_code)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}('{self._name}', {len(self._currencies_by_code)} currencies)"

    # endregion


@cache
def _get_default_registry() -> CurrencyRegistry:
    return CurrencyRegistry("Default", PREDEFINED_CURRENCIES)
