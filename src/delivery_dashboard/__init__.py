"""Delivery dashboard: release status of a product across its channels."""

__version__ = "0.1.0"
