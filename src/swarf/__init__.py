"""swarf: machinist-facing part programs to controller G-code."""

__version__ = "0.3.0"
