"""EcoVive environmental report lifecycle and rewards service."""

__version__ = "0.1.0"
