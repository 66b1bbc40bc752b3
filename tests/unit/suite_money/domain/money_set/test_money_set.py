from decimal import Decimal

import pytest

from suite_money.domain.monetary.currency_registry import CurrencyRegistry, EUR, GBP, JPY, USD
from suite_money.domain.monetary.errors import ConcurrentModificationError, CurrencyNotInRegistryError, UnknownCurrencyCodeError
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.immutable_money_set import ImmutableMoneySet, ImmutableSortedMoneySet
from suite_money.domain.money_set.money_set import MoneySet, SortedMoneySet
from tests.helpers.helper_registry import DOGE, create_registry_with_doge, create_usd_eur_registry

MUTABLE_SET_TYPES = [MoneySet, SortedMoneySet]


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_add_and_add_amount(set_type):
    money_set = set_type()

    money_set.add(Money("10", USD))
    money_set.add(Money.default())
    money_set.add_amount("2.5", "usd")
    money_set.add_amount(Decimal("3"), EUR)

    assert money_set[USD] == Money("12.5", USD)
    assert money_set[EUR] == Money("3", EUR)
    assert len(money_set) == 2


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_add_rejects_currency_outside_registry(set_type):
    money_set = set_type(registry=create_usd_eur_registry())

    with pytest.raises(CurrencyNotInRegistryError) as exc_info:
        money_set.add(Money("1", JPY))
    assert exc_info.value.param_name == "value"

    with pytest.raises(UnknownCurrencyCodeError):
        money_set.add_amount("1", "JPY")

    with pytest.raises(CurrencyNotInRegistryError):
        money_set.add_amount("1", DOGE)

    assert len(money_set) == 0


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_add_range_is_all_or_nothing(set_type):
    money_set = set_type([Money("1", USD)], registry=create_usd_eur_registry())

    with pytest.raises(CurrencyNotInRegistryError):
        money_set.add_range([Money("1", EUR), Money("1", GBP)])

    assert money_set == MoneySet([Money("1", USD)])


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_add_range_of_itself_doubles_amounts(set_type):
    money_set = set_type([Money("1", USD), Money("2", EUR)])

    money_set.add_range(money_set)

    assert money_set == MoneySet([Money("2", USD), Money("4", EUR)])


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_subtract_leaves_zero_entry(set_type):
    money_set = set_type()

    money_set.add(Money("5", USD))
    money_set.subtract(Money("5", USD))

    assert USD in money_set
    assert money_set.try_get_amount(USD) == Decimal("0")
    assert len(money_set) == 1

    money_set.subtract_amount("2", "EUR")
    money_set.subtract_range([Money("1", EUR), Money("1", USD)])

    assert money_set[EUR] == Money("-3", EUR)
    assert money_set[USD] == Money("-1", USD)

    with pytest.raises(TypeError):
        money_set.subtract("5 USD")


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_set_value_and_set_amount_replace_entries(set_type):
    money_set = set_type([Money("5", USD)])

    money_set.set_value(Money("1", USD))
    money_set.set_amount("7", "EUR")

    assert money_set[USD] == Money("1", USD)
    assert money_set[EUR] == Money("7", EUR)

    with pytest.raises(ValueError):
        money_set.set_value(Money.default())

    with pytest.raises(CurrencyNotInRegistryError):
        money_set.set_value(Money("1", DOGE))


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_remove_of_absent_currency_is_no_op(set_type):
    money_set = set_type([Money("1", USD)])

    assert money_set.remove(EUR) is False
    assert len(money_set) == 1
    assert money_set.remove("usd") is True
    assert len(money_set) == 0

    with pytest.raises(CurrencyNotInRegistryError):
        money_set.remove(DOGE)


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_bulk_removal(set_type):
    money_set = set_type([Money("1", USD), Money("0", EUR), Money("3", JPY), Money("0", GBP)])

    assert money_set.trim_zero_amounts() == 2
    assert money_set.currencies in ((USD, JPY), (JPY, USD))

    assert money_set.remove_all_where(lambda value: value.amount > 2) == 1
    assert money_set.currencies == (USD,)

    money_set.add_range([Money("1", EUR), Money("1", GBP)])
    with pytest.raises(UnknownCurrencyCodeError):
        money_set.remove_all(["EUR", "XYZ"])
    assert len(money_set) == 3

    assert money_set.remove_all(["EUR", GBP, "JPY"]) == 2

    money_set.clear()
    assert len(money_set) == 0


@pytest.mark.parametrize("set_type", MUTABLE_SET_TYPES)
def test_mutation_during_enumeration_fails_fast(set_type):
    money_set = set_type([Money("1", USD), Money("2", EUR), Money("3", JPY)])

    with pytest.raises(ConcurrentModificationError):
        for value in money_set:
            money_set.remove(value.currency)


def test_insertion_order_after_remove_and_readd():
    money_set = MoneySet([Money("1", USD), Money("2", EUR), Money("3", JPY)])

    money_set.remove(USD)
    money_set.add(Money("1", USD))
    money_set.set_amount("5", EUR)

    assert money_set.currencies == (EUR, JPY, USD)


def test_to_immutable_is_a_snapshot():
    money_set = MoneySet([Money("1", USD), Money("2", EUR)])

    snapshot = money_set.to_immutable()
    money_set.add(Money("10", USD))
    money_set.remove(EUR)

    assert isinstance(snapshot, ImmutableMoneySet)
    assert snapshot.registry is money_set.registry
    assert snapshot[USD] == Money("1", USD)
    assert snapshot[EUR] == Money("2", EUR)
    assert snapshot.currencies == (USD, EUR)


def test_sorted_to_immutable_keeps_sorted_variant_and_registry():
    registry = create_registry_with_doge()
    money_set = SortedMoneySet([Money("1", USD), Money("2", DOGE)], registry=registry)

    snapshot = money_set.to_immutable()

    assert isinstance(snapshot, ImmutableSortedMoneySet)
    assert snapshot.registry is registry
    assert snapshot.currencies == (DOGE, USD)


def test_copy_is_independent():
    money_set = SortedMoneySet([Money("1", USD)])

    copy = money_set.copy()
    copy.add(Money("1", USD))

    assert isinstance(copy, SortedMoneySet)
    assert money_set[USD] == Money("1", USD)
    assert copy[USD] == Money("2", USD)


def test_mutable_sets_are_not_hashable():
    with pytest.raises(TypeError):
        hash(MoneySet())


def test_registry_never_changes():
    registry = create_usd_eur_registry()
    money_set = MoneySet(registry=registry)

    money_set.add(Money("1", USD))
    money_set.clear()

    assert money_set.registry is registry
    assert MoneySet().registry is CurrencyRegistry.default()
