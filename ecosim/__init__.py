"""Grid-based predator/prey ecosystem simulation."""

__version__ = "0.1.0"
