from __future__ import annotations

from collections.abc import Iterable, Iterator
from decimal import Decimal
from typing import ClassVar

from babel import Locale

from suite_money.domain.monetary.currency import Currency
from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.amount_aggregator import AmountAggregator, CurrencyLike, CurrencyOrdering

# Prefix of a format pattern that hides entries with a zero amount
IGNORE_ZERO_AMOUNTS_PREFIX = "!"


class BaseMoneySet:
    """Read side shared by all money set variants.

    Implements `ReadOnlyMoneySet` on top of an `AmountAggregator`. Subclasses choose the
    ordering (`_ORDERING`) and whether the aggregator is mutable or persistent.
    """

    _ORDERING: ClassVar[CurrencyOrdering]

    _aggregator: AmountAggregator

    # region Construction helpers

    @staticmethod
    def _resolve_registry(registry: CurrencyRegistry | None) -> CurrencyRegistry:
        if registry is None:
            return CurrencyRegistry.default()

        # Raise: $registry must be a CurrencyRegistry
        if not isinstance(registry, CurrencyRegistry):
            raise TypeError(f"$registry must be a CurrencyRegistry instance, but provided value is: {registry!r}")

        return registry

    @staticmethod
    def _requires_registry_check(values: Iterable[Money], registry: CurrencyRegistry) -> bool:
        """Values from a money set with the identical registry are already known to be valid."""
        return not (isinstance(values, BaseMoneySet) and values.registry is registry)

    # endregion

    # region Protocol ReadOnlyMoneySet

    @property
    def registry(self) -> CurrencyRegistry:
        return self._aggregator.registry

    @property
    def currencies(self) -> tuple[Currency, ...]:
        return self._aggregator.currencies()

    def __len__(self) -> int:
        return len(self._aggregator)

    def __iter__(self) -> Iterator[Money]:
        return self._aggregator.iter_money()

    def __contains__(self, currency: object) -> bool:
        return self.try_get_amount(currency) is not None

    def __getitem__(self, currency: CurrencyLike) -> Money:
        return self._aggregator.get(currency)

    def try_get_amount(self, currency: CurrencyLike) -> Decimal | None:
        resolved = self._aggregator.try_resolve_currency(currency)
        if resolved is None:
            return None
        return self._aggregator.try_get(resolved)

    def try_get_value(self, currency: CurrencyLike) -> Money | None:
        resolved = self._aggregator.try_resolve_currency(currency)
        if resolved is None:
            return None

        amount = self._aggregator.try_get(resolved)
        if amount is None:
            return None
        return Money(amount, resolved)

    def format(self, pattern: str | None = None, culture: str | Locale | None = None) -> str:
        """Returns a string representation of the money values this set contains.

        Values are separated by ", " and appear in the set's order.

        Args:
            pattern: Format for each value, see `Money.format`. Prefix it with "!" to leave
                out values with a zero amount (e.g. "!C").
            culture: Babel locale identifier or `Locale` used for number formatting.

        Returns:
            str: Formatted values, or an empty string when there is nothing to render.
        """
        ignore_zero_amounts = pattern is not None and pattern.startswith(IGNORE_ZERO_AMOUNTS_PREFIX)
        if ignore_zero_amounts:
            pattern = pattern[len(IGNORE_ZERO_AMOUNTS_PREFIX) :]
            count = self._aggregator.non_zero_count()
        else:
            count = len(self._aggregator)

        if count == 0:
            return ""

        parts: list[str] = [""] * count
        index = 0
        for value in self:
            if ignore_zero_amounts and value.is_zero:
                continue
            parts[index] = value.format(pattern or None, culture)
            index += 1

        return ", ".join(parts)

    # endregion

    # region Magic methods

    def __format__(self, format_spec: str) -> str:
        return self.format(format_spec or None)

    def __str__(self) -> str:
        return self.format()

    def __repr__(self) -> str:
        values = ", ".join(repr(value) for value in self)
        return f"{self.__class__.__name__}([{values}], registry='{self.registry.name}')"

    def __eq__(self, other) -> bool:
        """Sets are equal when they hold the same amounts for the same currencies.

        Order and variant do not matter; a zero-amount entry differs from a missing one.
        """
        if not isinstance(other, BaseMoneySet):
            return NotImplemented
        if len(self) != len(other):
            return False
        return self._aggregator.as_dict() == other._aggregator.as_dict()

    # endregion
