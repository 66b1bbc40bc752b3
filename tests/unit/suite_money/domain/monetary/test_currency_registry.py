import pytest

from suite_money.domain.monetary.currency import Currency, CurrencyType
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, EUR, JPY, PREDEFINED_CURRENCIES, USD, XAU
from suite_money.domain.monetary.errors import UnknownCurrencyCodeError
from tests.helpers.helper_registry import DOGE, FAKE_USD, create_usd_eur_registry


def test_default_registry_is_created_once_with_predefined_currencies():
    registry = CurrencyRegistry.default()

    assert registry is CurrencyRegistry.default()
    assert len(registry) == len(PREDEFINED_CURRENCIES)
    assert registry.name == "Default"
    assert all(currency in registry for currency in PREDEFINED_CURRENCIES)


def test_lookup_resolves_codes_case_insensitively():
    registry = CurrencyRegistry.default()

    assert registry.lookup("usd") is USD
    assert registry[" eur "] is EUR
    assert registry.try_lookup("JPY") is JPY
    assert registry.contains_code("xau")


def test_lookup_of_unknown_code_raises():
    registry = create_usd_eur_registry()

    with pytest.raises(UnknownCurrencyCodeError) as exc_info:
        registry.lookup("JPY")

    assert exc_info.value.code == "JPY"
    assert "UsdEur" in str(exc_info.value)
    assert registry.try_lookup("JPY") is None
    assert registry.try_lookup(42) is None
    assert not registry.contains_code("JPY")


def test_lookup_requires_string_code():
    with pytest.raises(TypeError):
        CurrencyRegistry.default().lookup(840)


def test_contains_requires_same_definition():
    registry = create_usd_eur_registry()

    assert registry.contains(USD)
    assert not registry.contains(JPY)
    assert not registry.contains(DOGE)
    # Equal by code, but not the registered currency
    assert not registry.contains(FAKE_USD)
    assert FAKE_USD not in registry
    assert "USD" not in registry


def test_registry_rejects_duplicate_codes():
    other_usd = Currency("USD", 2, "US Dollar", CurrencyType.FIAT)

    with pytest.raises(ValueError, match="USD"):
        CurrencyRegistry("Duplicates", [USD, other_usd])
    # Same code with a different definition is a duplicate too
    with pytest.raises(ValueError, match="more than once"):
        CurrencyRegistry("Duplicates", [EUR, USD, FAKE_USD])


def test_registry_rejects_non_currency_items():
    with pytest.raises(TypeError):
        CurrencyRegistry("Invalid", [USD, "EUR"])


def test_registry_iterates_in_code_order():
    registry = CurrencyRegistry("Metals", [XAU, USD, EUR])

    assert [currency.code for currency in registry] == ["EUR", "USD", "XAU"]
    assert registry.codes == frozenset({"EUR", "USD", "XAU"})
