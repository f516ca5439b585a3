"""Shared building blocks for dataspace connector data exchanges."""

__version__ = "0.1.0"
