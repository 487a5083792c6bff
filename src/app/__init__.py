"""Storefront API: catalog, cart, checkout, payments and back-office services."""

__version__ = "0.1.0"
