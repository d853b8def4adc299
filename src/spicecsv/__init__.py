"""spicecsv - SPICE waveform data to CSV.

This package extracts transient analysis waveforms from SPICE raw files
(ngspice, Xyce, LTspice; ASCII or binary) and from exported text files, and
writes them as simple delimited text.
"""

__version__ = "0.1.0"

from pathlib import Path
from typing import Optional, TextIO, Union

from spicecsv.config import ConvertConfig
from spicecsv.exceptions import SpiceCsvError
from spicecsv.export.export_convert import ExportToCsvConverter, convert_export
from spicecsv.raw.raw_convert import RawToCsvConverter, convert_raw
from spicecsv.raw.raw_metadata import FileMetadata


def read_metadata(raw_file: Union[str, Path]) -> FileMetadata:
    """Parse and validate the header of a raw file without reading its data.

    :param raw_file: Path to the raw file
    :return: The validated metadata
    :raises SpiceCsvError: If the file is not a supported raw file
    """
    return RawToCsvConverter(raw_file).prepare().metadata  # type: ignore[return-value]


def raw_to_csv(
    raw_file: Union[str, Path],
    sink: TextIO,
    config: Optional[ConvertConfig] = None,
    **options: object,
) -> int:
    """Convert a raw file, writing CSV lines to ``sink``.

    :param raw_file: Path to the raw file
    :param sink: Text stream receiving the lines
    :param config: Base configuration
    :param options: ConvertConfig fields overriding ``config``
    :return: Number of data lines written
    """
    config = (config or ConvertConfig()).with_overrides(**options)
    return convert_raw(raw_file, sink, config)


__all__ = [
    "ConvertConfig",
    "SpiceCsvError",
    "FileMetadata",
    "RawToCsvConverter",
    "ExportToCsvConverter",
    "convert_raw",
    "convert_export",
    "read_metadata",
    "raw_to_csv",
]
