from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, ClassVar

from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.amount_aggregator import CurrencyLike, CurrencyOrdering, PersistentAmountAggregator
from suite_money.domain.money_set.base_money_set import BaseMoneySet
from suite_money.utils.numeric_tools import DecimalLike

if TYPE_CHECKING:
    from suite_money.domain.money_set.money_set import BaseMutableMoneySet, MoneySet, SortedMoneySet

logger = logging.getLogger(__name__)


class BaseImmutableMoneySet(BaseMoneySet):
    """Money set that never changes once created.

    Every update returns a new set that shares unchanged structure with this one. When an
    update has no effect, this set itself is returned. Immutable sets are hashable and
    safe to share between threads.
    """

    _aggregator: PersistentAmountAggregator
    # Bound by the money_set module once the mutable classes exist
    _MUTABLE_TYPE: ClassVar[type[BaseMutableMoneySet]]

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
        aggregator = PersistentAmountAggregator(registry, self._ORDERING)

        if values is not None:
            ensure_in_registry = self._requires_registry_check(values, registry)
            if not ensure_in_registry:
                logger.debug(f"{self.__class__.__name__} copies values from {values.__class__.__name__} with the same registry without validation")
            aggregator = aggregator.with_added_range(values, ensure_in_registry=ensure_in_registry, param_name="values")

        self._aggregator = aggregator

    @classmethod
    def _from_aggregator(cls, aggregator: PersistentAmountAggregator):
        """Trusted constructor wrapping an aggregator whose entries are already valid."""
        result = cls.__new__(cls)
        result._aggregator = aggregator
        return result

    def _with_aggregator(self, aggregator: PersistentAmountAggregator):
        if aggregator is self._aggregator:
            return self
        return self._from_aggregator(aggregator)

    # region Adding

    def add(self, value: Money):
        """Return a set with $value added to the amount of its currency.

        Raises:
            CurrencyNotInRegistryError: If the currency of $value is not registered.
            ValueError: If the new amount would fall outside the Money value range.
        """
        return self._with_aggregator(self._aggregator.with_added(value, param_name="value"))

    def add_amount(self, amount: DecimalLike, currency: CurrencyLike):
        resolved = self._aggregator.resolve_currency(currency, "currency")
        return self._with_aggregator(self._aggregator.with_added(Money(amount, resolved), ensure_in_registry=False))

    def add_range(self, values: Iterable[Money]):
        ensure_in_registry = self._requires_registry_check(values, self.registry)
        return self._with_aggregator(self._aggregator.with_added_range(values, ensure_in_registry=ensure_in_registry, param_name="values"))

    # endregion

    # region Subtracting

    def subtract(self, value: Money):
        """Return a set with $value subtracted from the amount of its currency; zero entries are kept."""
        if not isinstance(value, Money):
            raise TypeError(f"$value must be a Money instance, but provided value is: {value!r}")
        return self._with_aggregator(self._aggregator.with_added(-value, param_name="value"))

    def subtract_amount(self, amount: DecimalLike, currency: CurrencyLike):
        resolved = self._aggregator.resolve_currency(currency, "currency")
        return self._with_aggregator(self._aggregator.with_added(-Money(amount, resolved), ensure_in_registry=False))

    def subtract_range(self, values: Iterable[Money]):
        negated = [-value if isinstance(value, Money) else value for value in values]
        return self._with_aggregator(self._aggregator.with_added_range(negated, param_name="values"))

    # endregion

    # region Replacing

    def set_value(self, value: Money):
        """Return a set where the amount for the currency of $value is replaced.

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
        return self._with_aggregator(self._aggregator.with_amount(value.currency, value.amount))

    def set_amount(self, amount: DecimalLike, currency: CurrencyLike):
        resolved = self._aggregator.resolve_currency(currency, "currency")
        value = Money(amount, resolved)
        return self._with_aggregator(self._aggregator.with_amount(resolved, value.amount))

    # endregion

    # region Removing

    def remove(self, currency: CurrencyLike):
        """Return a set without the entry for $currency; this set when there is no such entry.

        Raises:
            CurrencyNotInRegistryError: If $currency is not a member of the registry.
            UnknownCurrencyCodeError: If $currency is a code unknown to the registry.
        """
        resolved = self._aggregator.resolve_currency(currency, "currency")
        return self._with_aggregator(self._aggregator.without(resolved))

    def remove_all(self, currencies: Iterable[CurrencyLike]):
        resolved = [self._aggregator.resolve_currency(currency, "currencies") for currency in currencies]
        aggregator = self._aggregator
        for currency in resolved:
            aggregator = aggregator.without(currency)
        return self._with_aggregator(aggregator)

    def remove_all_where(self, predicate: Callable[[Money], bool]):
        return self._with_aggregator(self._aggregator.without_where(predicate))

    def trim_zero_amounts(self):
        """Return a set without entries that have a zero amount."""
        return self._with_aggregator(self._aggregator.without_where(lambda value: value.is_zero))

    def clear(self):
        """Return an empty set with the same registry."""
        return self._with_aggregator(self._aggregator.cleared())

    # endregion

    # region Conversions

    def to_mutable(self) -> BaseMutableMoneySet:
        """Copy the values of this set into a new mutable set that uses the same registry."""
        return self._MUTABLE_TYPE._from_aggregator(self._aggregator.to_mutable())

    # endregion

    def __hash__(self) -> int:
        return hash(frozenset(self._aggregator.iter_entries()))


class ImmutableMoneySet(BaseImmutableMoneySet):
    """Immutable money set that enumerates currencies in the order they were first added."""

    _ORDERING: ClassVar[CurrencyOrdering] = CurrencyOrdering.BY_INSERTION

    def to_mutable(self) -> MoneySet:
        return super().to_mutable()


class ImmutableSortedMoneySet(BaseImmutableMoneySet):
    """Immutable money set that enumerates currencies ordered by currency code."""

    _ORDERING: ClassVar[CurrencyOrdering] = CurrencyOrdering.BY_CODE

    def to_mutable(self) -> SortedMoneySet:
        return super().to_mutable()
