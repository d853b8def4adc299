"""Raw waveform file handling modules.

This module provides the pieces of the raw file to CSV pipeline: header
parsing and validation, column selection, streaming sample decoding (ASCII and
binary) and line output.
"""

from .raw_header import RawHeader, RawHeaderParser, parse_header
from .raw_metadata import FileMetadata, VariableDescriptor, validate_header
from .raw_columns import ColumnProjector, ColumnSpec
from .raw_binary_parser import (
    OptimizedBinaryParser,
    DataFormat,
    BinaryFormat,
    RecordLayout,
)
from .raw_stream import RawFileStreamer, StreamProcessor, StreamConfig
from .raw_convert import LineEmitter, RawToCsvConverter, convert_raw

__all__ = [
    # Header
    "RawHeader",
    "RawHeaderParser",
    "parse_header",
    "FileMetadata",
    "VariableDescriptor",
    "validate_header",
    # Columns
    "ColumnProjector",
    "ColumnSpec",
    # Binary parsing
    "OptimizedBinaryParser",
    "DataFormat",
    "BinaryFormat",
    "RecordLayout",
    # Streaming
    "RawFileStreamer",
    "StreamProcessor",
    "StreamConfig",
    # Conversion
    "LineEmitter",
    "RawToCsvConverter",
    "convert_raw",
]
