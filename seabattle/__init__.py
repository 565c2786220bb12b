"""Turn-resolution engine for a single-player naval strike game."""

__version__ = "0.1.0"

__all__ = ["__version__"]
