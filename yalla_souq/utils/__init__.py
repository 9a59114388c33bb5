"""Formatting and generic helpers."""
