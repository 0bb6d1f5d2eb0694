"""FinPal backend: financial chat agent over transactions, goals and budgets."""

__version__ = "0.1.0"
