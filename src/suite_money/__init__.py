__version__ = "0.0.1"

from suite_money.domain.monetary.currency import Currency, CurrencyType
from suite_money.domain.monetary.currency_registry import CurrencyRegistry
from suite_money.domain.monetary.errors import ConcurrentModificationError, CurrencyNotInRegistryError, UnknownCurrencyCodeError
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.money_set import MoneySet, SortedMoneySet
from suite_money.domain.money_set.immutable_money_set import ImmutableMoneySet, ImmutableSortedMoneySet
from suite_money.domain.money_set.protocol import ReadOnlyMoneySet

__all__ = [
    "ConcurrentModificationError",
    "Currency",
    "CurrencyNotInRegistryError",
    "CurrencyRegistry",
    "CurrencyType",
    "ImmutableMoneySet",
    "ImmutableSortedMoneySet",
    "Money",
    "MoneySet",
    "ReadOnlyMoneySet",
    "SortedMoneySet",
    "UnknownCurrencyCodeError",
]
