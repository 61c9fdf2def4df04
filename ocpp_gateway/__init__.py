"""OCPP 1.6J central system message layer."""

__version__ = "0.1.0"
