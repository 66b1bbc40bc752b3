from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from suite_money.domain.monetary.currency import Currency


class CurrencyNotInRegistryError(ValueError):
    """Raised when a currency is used with a money set whose registry does not contain it.

    Attributes:
        currency (Currency): The offending currency.
        param_name (str): Name of the parameter that carried the currency.
    """

    def __init__(self, currency: Currency, param_name: str):
        self.currency = currency
        self.param_name = param_name
        super().__init__(f"The currency '{currency}' is not present in the set's currency registry (parameter ${param_name})")


class UnknownCurrencyCodeError(ValueError):
    """Raised by a currency registry when a code does not map to any registered currency."""

    def __init__(self, code: str, registry_name: str):
        self.code = code
        self.registry_name = registry_name
        super().__init__(f"Currency with code '{code}' not found in registry '{registry_name}'")


class ConcurrentModificationError(RuntimeError):
    """Raised when a mutable money set changes while it is being iterated."""
