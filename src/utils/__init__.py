"""Tracing and file I/O helpers."""
