"""Helpers for resolving the process that owns a TCP port."""
