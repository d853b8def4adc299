"""
Core utilities package for spicecsv.

This package contains the constants and regex patterns shared by the raw
file reader and the text export reader.
"""

from spicecsv.core.constants import (
    SI_SUFFIXES,
    BinaryOverrides,
    Defaults,
    Encodings,
    RawFileConstants,
    Verbosity,
)
from spicecsv.core.patterns import (
    EXPORT_STEP_INFO_PATTERN,
    SECTION_HEADER_PATTERN,
    SI_NUMBER_PATTERN,
)

__all__ = [
    "SI_SUFFIXES",
    "BinaryOverrides",
    "Defaults",
    "Encodings",
    "RawFileConstants",
    "Verbosity",
    "EXPORT_STEP_INFO_PATTERN",
    "SECTION_HEADER_PATTERN",
    "SI_NUMBER_PATTERN",
]
