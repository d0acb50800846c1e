"""Booking ledger adapters."""
