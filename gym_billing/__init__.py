"""Gym billing core: ledger, invoices and payments, subscriptions, trainer payroll."""

__version__ = "0.1.0"
