"""Wayfarer - travel and encounter simulation core."""

__version__ = "0.1.0"
