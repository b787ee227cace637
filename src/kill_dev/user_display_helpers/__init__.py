"""Formatting helpers for operator-facing output."""
