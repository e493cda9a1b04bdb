"""Allocation, release and stay-pricing core for tour-operator back offices."""

__version__ = "0.1.0"
