"""Task management API: identity, persistence and HTTP surface."""

__version__ = "1.0.0"
