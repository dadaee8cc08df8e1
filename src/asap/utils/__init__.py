"""Shared helpers for ASAP."""
