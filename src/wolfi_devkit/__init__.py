"""Developer workflow helpers for Wolfi packages and images."""

__version__ = "0.1.0"
