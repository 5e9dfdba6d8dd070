"""Shipment tracking monitor for FM Transportes dispatches."""

__version__ = "0.1.0"
