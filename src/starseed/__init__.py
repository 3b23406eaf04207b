"""Seeded infinite starfield with procedurally generated planets."""

__version__ = "0.1.0"
