"""Fault-isolated capability checks with scored reports."""

__version__ = "0.1.0"
