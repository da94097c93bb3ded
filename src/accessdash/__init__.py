"""Dashboard relay for media last-access reports."""

__version__ = "0.1.0"
