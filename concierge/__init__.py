"""Hotel AI concierge chat core."""

__version__ = "1.0.0"
