"""Ayambil booking service and availability calendar."""

__version__ = "0.1.0"
