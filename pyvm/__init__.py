"""pyvm — per-machine Python runtime version manager."""

__version__ = "0.1.0"
