"""Route group exports."""

from . import accounts, health, ponds, readings

__all__ = ["accounts", "health", "ponds", "readings"]
