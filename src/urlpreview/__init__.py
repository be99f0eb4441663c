"""Embeddability-aware URL preview proxy."""

__version__ = "0.1.0"
