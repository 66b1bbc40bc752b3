"""Money set package.

A money set tracks amounts in several currencies side by side, one running total
per currency, without ever converting between currencies. Four variants share one
aggregation core: mutable or immutable, ordered by currency code or by insertion.
"""
