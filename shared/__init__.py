"""Shared logging helpers."""
