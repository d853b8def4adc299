"""
Centralized constants for spicecsv.

This module contains the magic strings and default values used by the raw
file reader, the text export reader and the command line front ends.
"""

from typing import Dict, List, Optional


# Default configuration values


class Defaults:
    """Default configuration values."""

    OUTPUT = "-"  # Standard output
    SEPARATOR = ","
    PLACEHOLDER = ";"
    VERBOSITY = 1
    PRINT_TITLES = True

    # Binary decoding
    CHUNK_POINTS = 4096  # Records read from disk at once


class Verbosity:
    """Thresholds of the -d/--debug level."""

    ERRORS = 1
    METADATA = 5
    FULL_METADATA = 10


# Encoding constants


class Encodings:
    """Text encodings a raw file header can use."""

    UTF8 = "utf-8"
    UTF16_LE = "utf_16_le"

    # Bytes per code unit, used to read header lines without decoding
    UNIT_SIZE = {UTF8: 1, UTF16_LE: 2}


# Raw file constants


class RawFileConstants:
    """Constants for raw simulation output files."""

    PROBE_SIZE = 6  # Bytes read by the encoding detector
    MAGIC = b"Title:"
    MAGIC_UTF16 = "Tit"

    # Section names
    PLOTNAME = "Plotname"
    FLAGS = "Flags"
    COMMAND = "Command"
    OFFSET = "Offset"
    VARIABLES = "Variables"
    NUM_VARIABLES = "No. Variables"
    NUM_POINTS = "No. Points"
    VALUES = "Values"
    BINARY = "Binary"
    DATA_SECTIONS = (VALUES, BINARY)

    # Flags
    FLAG_STEPPED = "stepped"
    FLAG_FAST_ACCESS = "fastaccess"
    FLAG_NO_COMPRESSION = "nocompression"
    LTSPICE = "LTspice"

    # Data formats
    FORMAT_ASCII = "ascii"
    FORMAT_BINARY = "binary"

    # Time channel is always a double, even in single precision files
    TIME_BYTES = 8

    # Synthetic columns prepended to every sample
    STEP_COLUMN = "stp"
    INDEX_COLUMN = "idx"
    SYNTHETIC_COLUMNS: List[str] = [STEP_COLUMN, INDEX_COLUMN]


class BinaryOverrides:
    """Accepted values of the binary layout overrides."""

    BIG = "big"
    LITTLE = "little"
    ENDIANNESS = [BIG, LITTLE]

    SINGLE = "single"
    DOUBLE = "double"
    FLOAT_SIZES = [SINGLE, DOUBLE]


# Simulation types


class SimulationTypes:
    """Standard SPICE simulation types."""

    TRAN = "Transient Analysis"


# Engineering suffixes used in exported text


SI_SUFFIXES: Dict[Optional[str], float] = {
    "f": 1e-15,
    "T": 1e12,
    "p": 1e-12,
    "G": 1e9,
    "n": 1e-9,
    "Meg": 1e6,
    "u": 1e-6,
    "K": 1e3,
    "M": 1e-3,
    "Mil": 25.4e-6,
    None: 1.0,
}

