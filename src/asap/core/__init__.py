"""Core, UI independent logic for ASAP."""
