"""Observability helpers (audit trail)."""
