from __future__ import annotations

from suite_money.domain.monetary.currency import Currency, CurrencyType
from suite_money.domain.monetary.currency_registry import CurrencyRegistry, EUR, USD

# Currency that no predefined registry knows about
DOGE = Currency("DOGE", 8, "Dogecoin", CurrencyType.CRYPTO)

# Same code as USD, different precision: not a member of registries holding the real USD
FAKE_USD = Currency("USD", 4, "Fake US Dollar", CurrencyType.FIAT)


def create_usd_eur_registry() -> CurrencyRegistry:
    """Create a small registry that only knows USD and EUR."""
    return CurrencyRegistry("UsdEur", [USD, EUR])


def create_registry_with_doge() -> CurrencyRegistry:
    """Create a registry with USD, EUR and the custom DOGE currency."""
    return CurrencyRegistry("WithDoge", [USD, EUR, DOGE])
