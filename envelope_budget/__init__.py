"""Envelope budgeting ledger."""
