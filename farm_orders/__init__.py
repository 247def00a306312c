"""Order service for the farm-produce marketplace."""

__version__ = "0.1.0"
