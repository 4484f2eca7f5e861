"""Find and safely remove build-artifact directories."""

__version__ = "0.4.0"
