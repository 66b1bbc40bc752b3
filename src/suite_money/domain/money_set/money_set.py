from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import ClassVar

from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.amount_aggregator import CurrencyLike, CurrencyOrdering, MutableAmountAggregator
from suite_money.domain.money_set.base_money_set import BaseMoneySet
from suite_money.domain.money_set.immutable_money_set import BaseImmutableMoneySet, ImmutableMoneySet, ImmutableSortedMoneySet
from suite_money.utils.numeric_tools import DecimalLike

logger = logging.getLogger(__name__)


class BaseMutableMoneySet(BaseMoneySet):
    """Money set updated in place.

    Not thread safe. Enumerating the set while it changes raises
    `ConcurrentModificationError` on the next step of the enumeration.
    """

    _IMMUTABLE_TYPE: ClassVar[type[BaseImmutableMoneySet]]

    _aggregator: MutableAmountAggregator

    # Mutable sets are not hashable
    __hash__ = None

    def __init__(self, values: Iterable[Money] | None = None, *, registry: CurrencyRegistry | None = None):
        """Initialize the set and sum $values into it.

        Args:
            values: Money values to start with; values in the same currency are summed and
                default Money values are ignored.
            registry: Registry that validates every currency of this set. None means
                `CurrencyRegistry.default()`.

        Raises:
            CurrencyNotInRegistryError: If a value's currency is not a member of $registry.
            TypeError: If $registry is not a CurrencyRegistry or $values contains non-Money items.
        """
        registry = self._resolve_registry(registry)
        self._aggregator = MutableAmountAggregator(registry, self._ORDERING)

        if values is not None:
            ensure_in_registry = self._requires_registry_check(values, registry)
            if not ensure_in_registry:
                logger.debug(f"{self.__class__.__name__} copies values from {values.__class__.__name__} with the same registry without validation")
            self._aggregator.add_range(values, ensure_in_registry=ensure_in_registry, param_name="values")

    @classmethod
    def _from_aggregator(cls, aggregator: MutableAmountAggregator):
        """Trusted constructor wrapping an aggregator whose entries are already valid."""
        result = cls.__new__(cls)
        result._aggregator = aggregator
        return result

    # region Adding

    def add(self, value: Money) -> None:
        """Add $value to the amount stored for its currency; default Money is ignored.

        Raises:
            CurrencyNotInRegistryError: If the currency of $value is not registered.
            ValueError: If the new amount would fall outside the Money value range.
        """
        self._aggregator.add(value, param_name="value")

    def add_amount(self, amount: DecimalLike, currency: CurrencyLike) -> None:
        """Add $amount in $currency (a Currency or a currency code)."""
        resolved = self._aggregator.resolve_currency(currency, "currency")
        self._aggregator.add(Money(amount, resolved), ensure_in_registry=False)

    def add_range(self, values: Iterable[Money]) -> None:
        """Add every Money in $values; nothing is added when any currency is not registered."""
        self._aggregator.add_range(values, ensure_in_registry=self._requires_registry_check(values, self.registry), param_name="values")

    # endregion

    # region Subtracting

    def subtract(self, value: Money) -> None:
        """Subtract $value from the amount stored for its currency.

        The entry stays in the set even when its amount becomes zero.
        """
        if not isinstance(value, Money):
            raise TypeError(f"$value must be a Money instance, but provided value is: {value!r}")
        self._aggregator.add(-value, param_name="value")

    def subtract_amount(self, amount: DecimalLike, currency: CurrencyLike) -> None:
        resolved = self._aggregator.resolve_currency(currency, "currency")
        self._aggregator.add(-Money(amount, resolved), ensure_in_registry=False)

    def subtract_range(self, values: Iterable[Money]) -> None:
        negated = [-value if isinstance(value, Money) else value for value in values]
        self._aggregator.add_range(negated, param_name="values")

    # endregion

    # region Replacing

    def set_value(self, value: Money) -> None:
        """Replace the amount stored for the currency of $value.

        Raises:
            ValueError: If $value is the default Money.
            CurrencyNotInRegistryError: If the currency of $value is not registered.
        """
        if not isinstance(value, Money):
            raise TypeError(f"$value must be a Money instance, but provided value is: {value!r}")
        # Raise: the default Money has no currency to set
        if value.currency is None:
            raise ValueError("Cannot call `set_value` because $value is the default Money without currency")

        self._aggregator.ensure_currency_allowed(value.currency, "value")
        self._aggregator.set_amount(value.currency, value.amount)

    def set_amount(self, amount: DecimalLike, currency: CurrencyLike) -> None:
        resolved = self._aggregator.resolve_currency(currency, "currency")
        value = Money(amount, resolved)
        self._aggregator.set_amount(resolved, value.amount)

    # endregion

    # region Removing

    def remove(self, currency: CurrencyLike) -> bool:
        """Remove the entry for $currency.

        Returns:
            bool: True if an entry was removed, False if there was none.

        Raises:
            CurrencyNotInRegistryError: If $currency is not a member of the registry.
            UnknownCurrencyCodeError: If $currency is a code unknown to the registry.
        """
        resolved = self._aggregator.resolve_currency(currency, "currency")
        return self._aggregator.remove(resolved)

    def remove_all(self, currencies: Iterable[CurrencyLike]) -> int:
        """Remove the entries for all $currencies; returns the number of entries removed.

        All currencies are resolved first, so an unknown currency removes nothing.
        """
        resolved = [self._aggregator.resolve_currency(currency, "currencies") for currency in currencies]
        removed = 0
        for currency in resolved:
            if self._aggregator.remove(currency):
                removed += 1
        return removed

    def remove_all_where(self, predicate: Callable[[Money], bool]) -> int:
        """Remove every entry whose Money matches $predicate; returns the number removed."""
        return self._aggregator.remove_where(predicate)

    def trim_zero_amounts(self) -> int:
        """Remove all entries with a zero amount; returns the number removed."""
        return self._aggregator.remove_where(lambda value: value.is_zero)

    def clear(self) -> None:
        self._aggregator.clear()

    # endregion

    # region Conversions

    def copy(self):
        """Return an independent mutable copy with the same registry and ordering."""
        return self._from_aggregator(self._aggregator.copy())

    def to_immutable(self) -> BaseImmutableMoneySet:
        """Copy the values of this set into the immutable counterpart that uses the same registry.

        Later changes to this set do not affect the returned set.
        """
        return self._IMMUTABLE_TYPE._from_aggregator(self._aggregator.to_persistent())

    # endregion


class MoneySet(BaseMutableMoneySet):
    """Mutable money set that enumerates currencies in the order they were first added.

    A currency that is removed and added again counts as newly added.

    Examples:
        >>> money_set = MoneySet([Money("10", USD), Money("5", EUR), Money("2.5", USD)])
        >>> money_set["USD"]    # Money(12.5, USD)
        >>> list(money_set)     # [Money(12.5, USD), Money(5, EUR)]
    """

    _ORDERING = CurrencyOrdering.BY_INSERTION
    _IMMUTABLE_TYPE = ImmutableMoneySet

    def to_immutable(self) -> ImmutableMoneySet:
        return super().to_immutable()


class SortedMoneySet(BaseMutableMoneySet):
    """Mutable money set that enumerates currencies ordered by currency code."""

    _ORDERING = CurrencyOrdering.BY_CODE
    _IMMUTABLE_TYPE = ImmutableSortedMoneySet

    def to_immutable(self) -> ImmutableSortedMoneySet:
        return super().to_immutable()


ImmutableMoneySet._MUTABLE_TYPE = MoneySet
ImmutableSortedMoneySet._MUTABLE_TYPE = SortedMoneySet
