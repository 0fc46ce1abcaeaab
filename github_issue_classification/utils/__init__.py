"""Shared helpers for file input/output."""
