"""Festival planning recommendation and optimization engine."""

__version__ = "1.0.0"
