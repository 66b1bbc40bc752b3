from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal
from typing import Protocol, runtime_checkable

from babel import Locale

from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.money import Money


# region Interface


@runtime_checkable
class ReadOnlyMoneySet(Protocol):
    """Read contract shared by mutable and immutable money sets.

    A money set holds at most one amount per currency. Every currency in it is a member
    of $registry. Currencies can be passed as `Currency` instances or as currency codes.
    """

    @property
    def registry(self) -> CurrencyRegistry:
        """Registry that validates every currency of this set; it never changes."""
        ...

    @property
    def currencies(self) -> tuple[Currency, ...]:
        """Currencies that have an entry, in the set's order."""
        ...

    def __len__(self) -> int:
        """Number of currencies with an entry, zero amounts included."""
        ...

    def __iter__(self) -> Iterator[Money]:
        """Iterate one Money per entry in the set's order."""
        ...

    def __contains__(self, currency: object) -> bool: ...

    def __getitem__(self, currency: Currency | str) -> Money:
        """Return the Money for $currency, or a zero amount in that currency when absent.

        Raises:
            CurrencyNotInRegistryError: If $currency is not a member of the registry.
            UnknownCurrencyCodeError: If $currency is a code unknown to the registry.
        """
        ...

    def try_get_amount(self, currency: Currency | str) -> Decimal | None:
        """Return the stored amount, or None when there is no entry or the currency is not recognized."""
        ...

    def try_get_value(self, currency: Currency | str) -> Money | None:
        """Return the stored Money, or None when there is no entry or the currency is not recognized."""
        ...

    def format(self, pattern: str | None = None, culture: str | Locale | None = None) -> str: ...


# endregion
