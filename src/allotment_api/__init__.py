"""REST API over the allotment allocation and pricing core."""

__version__ = "0.1.0"
