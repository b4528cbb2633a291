"""Multi-currency expense budgets: USD pivoted rate cache and budget aggregation."""

__version__ = "0.1.0"
