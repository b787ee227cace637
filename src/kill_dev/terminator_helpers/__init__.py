"""Helpers for the escalating process terminator."""
