"""Flatten a set of files into a single XML document."""

__version__ = "0.1.0"
