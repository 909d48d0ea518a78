"""Truck ticket valuation, invoicing and driver settlement service."""

__version__ = "1.0.0"
