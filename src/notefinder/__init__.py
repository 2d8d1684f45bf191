"""notefinder - a full-text index over a directory of notes."""

__version__ = "0.1.0"
