"""Monetary domain package.

This package contains the Currency entity and its registry, the ExchangeBank
holding directed conversion rates, and the Money value type with its
arithmetic, comparison and formatting rules.
"""
