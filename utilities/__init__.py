"""Shared helpers (structured logging)."""
