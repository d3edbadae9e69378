"""Finboard: personal finance tracking with budgets, goals and insights."""

__version__ = "0.1.0"
