"""Logging, timing, I/O and drawing helpers."""
