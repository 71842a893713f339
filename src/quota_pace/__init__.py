"""quota-pace: track quota consumption against elapsed time."""

__version__ = "0.1.0"
