#!/usr/bin/env python
# coding=utf-8
"""Binary record parsing for raw files using numpy structured dtypes.

A transient analysis binary raw file stores one record per point: the time as
an 8 byte float followed by every other variable as a 4 or 8 byte float. The
value width is not written in the header and has to be derived from the size
of the data region.
"""

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, BinaryIO, Iterator, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from ..core import constants as core_constants
from ..exceptions import InputOpenFailedError, InvalidEndiannessError, TruncatedDataError

_logger = logging.getLogger("spicecsv.RawBinaryParser")


class DataFormat(Enum):
    """Binary value formats in transient raw files."""

    FLOAT32 = "float32"
    FLOAT64 = "float64"


@dataclass
class BinaryFormat:
    """Description of binary data format."""

    format: DataFormat
    bytes_per_value: int
    numpy_dtype: np.dtype[Any]


# Format definitions
BINARY_FORMATS = {
    DataFormat.FLOAT32: BinaryFormat(
        format=DataFormat.FLOAT32,
        bytes_per_value=4,
        numpy_dtype=np.dtype(np.float32),
    ),
    DataFormat.FLOAT64: BinaryFormat(
        format=DataFormat.FLOAT64,
        bytes_per_value=8,
        numpy_dtype=np.dtype(np.float64),
    ),
}

# Byte order characters understood by numpy
_BYTE_ORDERS = {
    None: "=",
    core_constants.BinaryOverrides.LITTLE: "<",
    core_constants.BinaryOverrides.BIG: ">",
}


def resolve_byte_order(endianness: Optional[str]) -> str:
    """Map an endianness override onto a numpy byte order character.

    Args:
        endianness: 'big', 'little' or None for the host order

    Returns:
        '<', '>' or '='

    Raises:
        InvalidEndiannessError: For any other value
    """
    try:
        return _BYTE_ORDERS[endianness]
    except KeyError:
        raise InvalidEndiannessError(endianness)


def estimate_value_width(data_size: int, num_points: int, num_variables: int) -> float:
    """Estimate the bytes per non-time value from the size of the data region.

    Args:
        data_size: Bytes between the end of the header and the end of file
        num_points: Declared number of points
        num_variables: Declared number of variables, time included

    Returns:
        The estimated width, 4.0 or 8.0 for a well formed file
    """
    if num_points <= 0 or num_variables < 2:
        return float(BINARY_FORMATS[DataFormat.FLOAT64].bytes_per_value)
    point_size = data_size / num_points
    return (point_size - core_constants.RawFileConstants.TIME_BYTES) / (num_variables - 1)


def select_value_format(
    float_size: Optional[str],
    data_size: int,
    num_points: int,
    num_variables: int,
) -> DataFormat:
    """Pick the value format, from the override or from the file size.

    An estimated width below 7 bytes is taken as single precision.
    """
    if float_size is not None:
        if float_size == core_constants.BinaryOverrides.DOUBLE:
            return DataFormat.FLOAT64
        return DataFormat.FLOAT32

    width = estimate_value_width(data_size, num_points, num_variables)
    _logger.debug("Estimated value width %.3f bytes", width)
    return DataFormat.FLOAT32 if width < 7 else DataFormat.FLOAT64


@dataclass(frozen=True)
class RecordLayout:
    """Layout of one point record: the time channel then the other variables."""

    num_variables: int
    value_format: DataFormat
    byte_order: str = "="

    @property
    def value_size(self) -> int:
        return BINARY_FORMATS[self.value_format].bytes_per_value

    @property
    def record_size(self) -> int:
        """Bytes per point."""
        return core_constants.RawFileConstants.TIME_BYTES + self.value_size * (
            self.num_variables - 1
        )

    @property
    def dtype(self) -> np.dtype[Any]:
        """Structured dtype of one record, in the layout byte order."""
        time_dtype = BINARY_FORMATS[DataFormat.FLOAT64].numpy_dtype.newbyteorder(
            self.byte_order
        )
        value_dtype = BINARY_FORMATS[self.value_format].numpy_dtype.newbyteorder(
            self.byte_order
        )
        fields = [("f0", time_dtype)]
        fields += [(f"f{i}", value_dtype) for i in range(1, self.num_variables)]
        return np.dtype(fields)

    def describe(self) -> str:
        """Human readable record format, for diagnostics."""
        order = {"=": sys.byteorder, "<": "little", ">": "big"}[self.byte_order]
        return (
            f"{order}-endian float64 + {self.num_variables - 1} x "
            f"{self.value_format.value}"
        )


class OptimizedBinaryParser:
    """Reader of fixed size point records.

    Records are read from disk in bounded chunks and decoded with numpy, so
    memory use does not grow with the file size.
    """

    def __init__(self, file_path: Union[str, Path]):
        """Initialize binary parser.

        Args:
            file_path: Path to raw file
        """
        self.file_path = Path(file_path)
        self._file_handle: Optional[BinaryIO] = None
        self.bytes_read = 0

        # Cache file size
        self.file_size = self.file_path.stat().st_size

        _logger.debug(
            "OptimizedBinaryParser initialized for %s (%d bytes)",
            file_path,
            self.file_size,
        )

    def _handle(self) -> BinaryIO:
        if self._file_handle is None:
            try:
                self._file_handle = open(self.file_path, "rb")
            except OSError as e:
                raise InputOpenFailedError(str(self.file_path), e)
        return self._file_handle

    def read_records(
        self, offset: int, count: int, layout: RecordLayout, first_point: int = 0
    ) -> NDArray[Any]:
        """Read ``count`` consecutive records starting at a byte offset.

        Args:
            offset: Byte offset of the first record
            count: Number of records to read
            layout: Record layout
            first_point: Index of the first record, for error messages

        Returns:
            Structured numpy array of ``count`` records

        Raises:
            TruncatedDataError: If the file ends before the last record
        """
        num_bytes = count * layout.record_size
        handle = self._handle()
        handle.seek(offset)
        raw_bytes = handle.read(num_bytes)
        self.bytes_read += len(raw_bytes)

        if len(raw_bytes) < num_bytes:
            missing_point = first_point + len(raw_bytes) // layout.record_size
            raise TruncatedDataError(missing_point, num_bytes, len(raw_bytes))

        return np.frombuffer(raw_bytes, dtype=layout.dtype, count=count)

    def iter_records(
        self,
        offset: int,
        count: int,
        layout: RecordLayout,
        chunk_size: int = core_constants.Defaults.CHUNK_POINTS,
    ) -> Iterator[Tuple[float, ...]]:
        """Yield ``count`` records as tuples of Python floats.

        Never reads past ``offset + count * layout.record_size``.
        """
        chunk_size = max(1, chunk_size)
        done = 0
        while done < count:
            n = min(chunk_size, count - done)
            records = self.read_records(
                offset + done * layout.record_size, n, layout, first_point=done
            )
            for record in records.tolist():
                yield record
            done += n

    def close(self) -> None:
        """Close file handle."""
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None

    def __enter__(self) -> "OptimizedBinaryParser":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.close()

    def __del__(self) -> None:
        """Ensure file is closed on deletion."""
        self.close()
