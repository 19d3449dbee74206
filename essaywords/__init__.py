"""Top-K word frequencies across a list of essay pages."""

__version__ = "1.0.0"
