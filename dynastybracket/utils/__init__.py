"""Logging and message helpers."""
