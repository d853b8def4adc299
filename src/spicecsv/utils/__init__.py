"""Utility functions for spicecsv."""

from .detect_encoding import classify_prefix, detect_encoding

__all__ = ["classify_prefix", "detect_encoding"]
