"""Monetary domain package.

This package contains classes for handling monetary amounts and currencies,
including Currency definitions, the CurrencyRegistry that decides which
currencies are valid together, and Money values with exact Decimal amounts.
"""
