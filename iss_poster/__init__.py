"""Post the International Space Station's position with daily Earth imagery."""

__version__ = "0.1.0"
