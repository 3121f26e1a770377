"""Two-player sea battle game with an adaptive computer opponent."""

__version__ = "0.1.0"
