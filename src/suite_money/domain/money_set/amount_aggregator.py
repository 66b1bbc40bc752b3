from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator
from decimal import Context, Decimal, Inexact, InvalidOperation, Overflow
from enum import Enum
from typing import NamedTuple

from suite_money.domain.monetary.currency import Currency, currency_code_key
from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.errors import ConcurrentModificationError, CurrencyNotInRegistryError
from suite_money.domain.monetary.money import Money
from suite_money.utils.collections.persistent_sorted_map import PersistentSortedMap

CurrencyLike = Currency | str

# Exact summing: any sum that would need rounding raises `Inexact` instead
_SUM_CONTEXT = Context(prec=60, traps=[InvalidOperation, Overflow, Inexact])


class CurrencyOrdering(Enum):
    """Order in which a money set enumerates its currencies."""

    BY_CODE = "BY_CODE"
    BY_INSERTION = "BY_INSERTION"


class AmountAggregator(ABC):
    """Mapping from currency to accumulated amount, guarded by a currency registry.

    Invariants kept by every implementation:
    - each currency has at most one entry;
    - no entry exists for a currency that is not a member of $registry;
    - entries with a zero amount are kept until removed explicitly.

    Subclasses provide the storage: `MutableAmountAggregator` updates a dict in place,
    `PersistentAmountAggregator` returns new aggregators that share structure.
    """

    def __init__(self, registry: CurrencyRegistry, ordering: CurrencyOrdering):
        self._registry = registry
        self._ordering = ordering

    @property
    def registry(self) -> CurrencyRegistry:
        return self._registry

    @property
    def ordering(self) -> CurrencyOrdering:
        return self._ordering

    # region Registry gate

    def ensure_currency_allowed(self, currency: Currency, param_name: str) -> None:
        """Raise `CurrencyNotInRegistryError` unless $currency is a member of the registry."""
        if not self._registry.contains(currency):
            raise CurrencyNotInRegistryError(currency, param_name)

    def resolve_currency(self, currency: CurrencyLike, param_name: str = "currency") -> Currency:
        """Return the registry currency for a Currency or a currency code.

        Raises:
            CurrencyNotInRegistryError: If a Currency is not a member of the registry.
            UnknownCurrencyCodeError: If a code is not registered.
            TypeError: If $currency is neither a Currency nor a string.
        """
        if isinstance(currency, str):
            return self._registry.lookup(currency)

        if isinstance(currency, Currency):
            self.ensure_currency_allowed(currency, param_name)
            return currency

        raise TypeError(f"${param_name} must be a Currency or a currency code, but provided value is: {currency!r}")

    def try_resolve_currency(self, currency: object) -> Currency | None:
        """Like `resolve_currency`, but returns None for anything the registry does not recognize."""
        if isinstance(currency, str):
            return self._registry.try_lookup(currency)

        if isinstance(currency, Currency) and self._registry.contains(currency):
            return currency

        return None

    def validate_values(self, values: Iterable[Money], ensure_in_registry: bool, param_name: str) -> list[Money]:
        """Check all $values before anything is stored and return those that carry a currency.

        Default Money values (no currency) contribute nothing and are dropped.

        Raises:
            TypeError: If an item is not a Money instance.
            CurrencyNotInRegistryError: If $ensure_in_registry is set and a currency is not registered.
        """
        result: list[Money] = []
        for value in values:
            # Raise: only Money can be aggregated
            if not isinstance(value, Money):
                raise TypeError(f"${param_name} must contain only Money instances, but provided value is: {value!r}")

            if value.currency is None:
                continue

            if ensure_in_registry:
                self.ensure_currency_allowed(value.currency, param_name)

            result.append(value)
        return result

    def sum_amounts(self, currency: Currency, existing: Decimal, amount: Decimal, param_name: str) -> Decimal:
        """Return $existing + $amount exactly, checked against the Money value limits.

        Raises:
            ValueError: If the sum cannot be stored exactly or lies outside `Money.MIN_VALUE`..`Money.MAX_VALUE`.
        """
        try:
            total = _SUM_CONTEXT.add(existing, amount)
        except (Inexact, InvalidOperation, Overflow) as e:
            raise ValueError(f"Cannot add ${param_name} because the sum for currency '{currency}' cannot be represented exactly") from e

        # Raise: a stored amount must stay readable as Money
        if total > Money.MAX_VALUE or total < Money.MIN_VALUE:
            raise ValueError(f"Cannot add ${param_name} because the sum for currency '{currency}' ({total}) is outside the allowed range {Money.MIN_VALUE}..{Money.MAX_VALUE}")

        return total

    # endregion

    # region Reads

    @abstractmethod
    def try_get(self, currency: Currency) -> Decimal | None:
        """Return the stored amount for $currency, or None when there is no entry."""
        ...

    @abstractmethod
    def iter_entries(self) -> Iterator[tuple[Currency, Decimal]]:
        """Iterate (currency, amount) entries in this aggregator's ordering."""
        ...

    @abstractmethod
    def __len__(self) -> int: ...

    def get(self, currency: CurrencyLike) -> Money:
        """Return the Money stored for $currency; a missing entry reads as zero in that currency.

        Raises:
            CurrencyNotInRegistryError: If $currency is not a member of the registry.
            UnknownCurrencyCodeError: If $currency is a code that is not registered.
        """
        resolved = self.resolve_currency(currency, "currency")
        amount = self.try_get(resolved)
        return Money(amount if amount is not None else Decimal("0"), resolved)

    def currencies(self) -> tuple[Currency, ...]:
        return tuple(currency for currency, _ in self.iter_entries())

    def iter_money(self) -> Iterator[Money]:
        entries = self.iter_entries()
        return (Money(amount, currency) for currency, amount in entries)

    def non_zero_count(self) -> int:
        return sum(1 for _, amount in self.iter_entries() if amount != 0)

    def as_dict(self) -> dict[Currency, Decimal]:
        return dict(self.iter_entries())

    # endregion


class MutableAmountAggregator(AmountAggregator):
    """Amount aggregator stored in a dict and updated in place.

    Python dicts keep insertion order, so insertion-ordered enumeration comes for free;
    code-ordered enumeration sorts the keys. Every mutation bumps a version counter and
    running enumerations fail fast when they see it change.
    """

    def __init__(self, registry: CurrencyRegistry, ordering: CurrencyOrdering):
        super().__init__(registry, ordering)
        self._amounts: dict[Currency, Decimal] = {}
        self._version = 0

    @classmethod
    def from_entries(
        cls,
        registry: CurrencyRegistry,
        ordering: CurrencyOrdering,
        entries: Iterable[tuple[Currency, Decimal]],
    ) -> MutableAmountAggregator:
        """Build an aggregator from entries already known to be valid for $registry.

        Trusted path: no registry validation happens here. Only call it with entries taken
        from an aggregator that uses the very same registry instance.
        """
        result = cls(registry, ordering)
        result._amounts = dict(entries)
        return result

    # region Reads

    def try_get(self, currency: Currency) -> Decimal | None:
        return self._amounts.get(currency)

    def iter_entries(self) -> Iterator[tuple[Currency, Decimal]]:
        # Capture state now, so that a mutation between `iter()` and the first `next()` is detected too
        version = self._version
        if self._ordering == CurrencyOrdering.BY_CODE:
            currencies = sorted(self._amounts, key=currency_code_key)
        else:
            currencies = list(self._amounts)
        return self._iter_checked(currencies, version)

    def _iter_checked(self, currencies: list[Currency], version: int) -> Iterator[tuple[Currency, Decimal]]:
        for currency in currencies:
            # Raise: the set must not change while it is being enumerated
            if self._version != version:
                raise ConcurrentModificationError("Money set was modified during iteration")
            yield currency, self._amounts[currency]

    def __len__(self) -> int:
        return len(self._amounts)

    # endregion

    # region Mutations

    def add(self, value: Money, *, ensure_in_registry: bool = True, param_name: str = "value") -> None:
        self.add_range((value,), ensure_in_registry=ensure_in_registry, param_name=param_name)

    def add_range(self, values: Iterable[Money], *, ensure_in_registry: bool = True, param_name: str = "values") -> None:
        """Sum $values into their currency entries.

        All values are validated first, so a failing call leaves the aggregator unchanged.

        Args:
            values: Money values to add; default Money values are ignored.
            ensure_in_registry: Validate currencies against the registry. Pass False only on
                trusted paths where the values come from a set using the same registry.
            param_name: Parameter name reported by `CurrencyNotInRegistryError` and range errors.

        Raises:
            CurrencyNotInRegistryError: If a currency is not registered.
            ValueError: If a resulting amount is outside the Money limits or cannot be stored exactly.
        """
        validated = self.validate_values(values, ensure_in_registry, param_name)
        if not validated:
            return

        # Compute every new amount before storing any of them
        pending: dict[Currency, Decimal] = {}
        for value in validated:
            existing = pending.get(value.currency, self._amounts.get(value.currency))
            if existing is None:
                pending[value.currency] = value.amount
            else:
                pending[value.currency] = self.sum_amounts(value.currency, existing, value.amount, param_name)

        self._amounts.update(pending)
        self._version += 1

    def set_amount(self, currency: Currency, amount: Decimal) -> None:
        """Replace the entry for $currency; the currency must already be validated by the caller."""
        self._amounts[currency] = amount
        self._version += 1

    def remove(self, currency: Currency) -> bool:
        """Remove the entry for $currency; returns False when there was no entry."""
        if currency not in self._amounts:
            return False
        del self._amounts[currency]
        self._version += 1
        return True

    def remove_where(self, predicate: Callable[[Money], bool]) -> int:
        """Remove every entry whose Money matches $predicate; returns the number removed."""
        matching = [currency for currency, amount in list(self._amounts.items()) if predicate(Money(amount, currency))]
        for currency in matching:
            del self._amounts[currency]
        if matching:
            self._version += 1
        return len(matching)

    def clear(self) -> None:
        if self._amounts:
            self._amounts.clear()
            self._version += 1

    # endregion

    # region Snapshots

    def copy(self) -> MutableAmountAggregator:
        return MutableAmountAggregator.from_entries(self._registry, self._ordering, self.iter_entries())

    def to_persistent(self) -> PersistentAmountAggregator:
        return PersistentAmountAggregator.from_entries(self._registry, self._ordering, self.iter_entries())

    # endregion


class _PersistentEntry(NamedTuple):
    """Stored amount plus the position at which its currency was first added."""

    amount: Decimal
    sequence: int


class PersistentAmountAggregator(AmountAggregator):
    """Immutable amount aggregator backed by a `PersistentSortedMap` keyed by currency.

    Update methods (`with_added_range`, `without`, ...) return a new aggregator that
    shares untouched tree nodes with this one; this aggregator never changes. When an
    update has no effect the same instance is returned.
    """

    def __init__(
        self,
        registry: CurrencyRegistry,
        ordering: CurrencyOrdering,
        entries: PersistentSortedMap[Currency, _PersistentEntry] | None = None,
        next_sequence: int = 0,
    ):
        super().__init__(registry, ordering)
        self._entries: PersistentSortedMap[Currency, _PersistentEntry] = entries if entries is not None else PersistentSortedMap()
        self._next_sequence = next_sequence

    @classmethod
    def from_entries(
        cls,
        registry: CurrencyRegistry,
        ordering: CurrencyOrdering,
        entries: Iterable[tuple[Currency, Decimal]],
    ) -> PersistentAmountAggregator:
        """Build an aggregator from entries already known to be valid for $registry.

        Trusted path: no registry validation happens here. Entries keep the order in which
        they are given, which becomes the insertion order.
        """
        items = [(currency, _PersistentEntry(amount, sequence)) for sequence, (currency, amount) in enumerate(entries)]
        return cls(registry, ordering, PersistentSortedMap(items), len(items))

    def _with_entries(self, entries: PersistentSortedMap[Currency, _PersistentEntry], next_sequence: int) -> PersistentAmountAggregator:
        if entries is self._entries:
            return self
        return PersistentAmountAggregator(self._registry, self._ordering, entries, next_sequence)

    # region Reads

    def try_get(self, currency: Currency) -> Decimal | None:
        entry = self._entries.get(currency)
        return entry.amount if entry is not None else None

    def iter_entries(self) -> Iterator[tuple[Currency, Decimal]]:
        if self._ordering == CurrencyOrdering.BY_CODE:
            return ((currency, entry.amount) for currency, entry in self._entries.iter_items())

        ordered = sorted(self._entries.iter_items(), key=lambda item: item[1].sequence)
        return ((currency, entry.amount) for currency, entry in ordered)

    def __len__(self) -> int:
        return len(self._entries)

    # endregion

    # region Updates

    def with_added(self, value: Money, *, ensure_in_registry: bool = True, param_name: str = "value") -> PersistentAmountAggregator:
        return self.with_added_range((value,), ensure_in_registry=ensure_in_registry, param_name=param_name)

    def with_added_range(
        self,
        values: Iterable[Money],
        *,
        ensure_in_registry: bool = True,
        param_name: str = "values",
    ) -> PersistentAmountAggregator:
        """Return an aggregator with $values summed into their currency entries.

        Validation happens before any update, see `MutableAmountAggregator.add_range`.
        """
        validated = self.validate_values(values, ensure_in_registry, param_name)

        entries = self._entries
        next_sequence = self._next_sequence
        for value in validated:
            existing = entries.get(value.currency)
            if existing is None:
                entries = entries.set(value.currency, _PersistentEntry(value.amount, next_sequence))
                next_sequence += 1
            else:
                entries = entries.set(value.currency, _PersistentEntry(self.sum_amounts(value.currency, existing.amount, value.amount, param_name), existing.sequence))

        return self._with_entries(entries, next_sequence)

    def with_amount(self, currency: Currency, amount: Decimal) -> PersistentAmountAggregator:
        """Return an aggregator with the entry for $currency replaced; the currency must already be validated."""
        existing = self._entries.get(currency)
        if existing is not None:
            if existing.amount == amount and existing.amount.as_tuple() == amount.as_tuple():
                return self
            return self._with_entries(self._entries.set(currency, _PersistentEntry(amount, existing.sequence)), self._next_sequence)

        entries = self._entries.set(currency, _PersistentEntry(amount, self._next_sequence))
        return self._with_entries(entries, self._next_sequence + 1)

    def without(self, currency: Currency) -> PersistentAmountAggregator:
        return self._with_entries(self._entries.remove(currency), self._next_sequence)

    def without_where(self, predicate: Callable[[Money], bool]) -> PersistentAmountAggregator:
        entries = self._entries
        for currency, entry in self._entries.iter_items():
            if predicate(Money(entry.amount, currency)):
                entries = entries.remove(currency)
        return self._with_entries(entries, self._next_sequence)

    def cleared(self) -> PersistentAmountAggregator:
        if not self._entries:
            return self
        return PersistentAmountAggregator(self._registry, self._ordering, None, self._next_sequence)

    # endregion

    def to_mutable(self) -> MutableAmountAggregator:
        return MutableAmountAggregator.from_entries(self._registry, self._ordering, self.iter_entries())
