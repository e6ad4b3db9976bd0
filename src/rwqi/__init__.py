"""RWQI - River Water Quality Index lookup service."""

__version__ = "0.1.0"
