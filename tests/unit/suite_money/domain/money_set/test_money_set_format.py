import pytest

from suite_money.domain.monetary.currency_registry import EUR, JPY, USD
from suite_money.domain.monetary.money import Money
from suite_money.domain.money_set.immutable_money_set import ImmutableMoneySet, ImmutableSortedMoneySet
from suite_money.domain.money_set.money_set import MoneySet, SortedMoneySet

ALL_SET_TYPES = [MoneySet, SortedMoneySet, ImmutableMoneySet, ImmutableSortedMoneySet]


@pytest.mark.parametrize("set_type", ALL_SET_TYPES)
def test_exclamation_prefix_hides_zero_amounts(set_type):
    money_set = set_type([Money("10.00", USD), Money("0.00", EUR)])

    assert money_set.format("!C") == "$10.00"
    assert "€0.00" in money_set.format("C")
    assert "$10.00" in money_set.format("C")


@pytest.mark.parametrize("set_type", ALL_SET_TYPES)
@pytest.mark.parametrize("pattern", [None, "", "C", "!C", "!", "G", "N"])
def test_empty_set_formats_to_empty_string(set_type, pattern):
    assert set_type().format(pattern) == ""


@pytest.mark.parametrize("set_type", ALL_SET_TYPES)
def test_set_with_only_zero_amounts_and_ignore_prefix_is_empty(set_type):
    assert set_type([Money("0", USD), Money("0", EUR)]).format("!") == ""


def test_values_are_joined_in_set_order():
    values = [Money("10", USD), Money("0", EUR), Money("1500", JPY)]

    assert SortedMoneySet(values).format("C") == "€0.00, ¥1,500, $10.00"
    assert MoneySet(values).format() == "10.00 USD, 0.00 EUR, 1,500 JPY"
    assert MoneySet(values).format("!") == "10.00 USD, 1,500 JPY"


def test_culture_is_passed_to_money_format():
    money_set = ImmutableSortedMoneySet([Money("1234.5", USD), Money("2", EUR)])

    assert money_set.format("N", "de_DE") == "2,00, 1.234,50"
    assert money_set.format("!G", "de_DE") == "2,00 EUR, 1.234,50 USD"


def test_str_and_format_spec_use_set_format():
    money_set = SortedMoneySet([Money("10", USD), Money("0", EUR)])

    assert str(money_set) == "0.00 EUR, 10.00 USD"
    assert f"{money_set:!C}" == "$10.00"


def test_unknown_pattern_raises():
    with pytest.raises(ValueError):
        MoneySet([Money("1", USD)]).format("!X")
