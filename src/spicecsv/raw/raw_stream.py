#!/usr/bin/env python
# coding=utf-8
"""Streaming decoder of raw file samples.

Samples are produced one point at a time as canonical tuples
``[stp, idx, var0, var1, ...]`` and handed to a :class:`StreamProcessor`, so a
file of any size is converted with constant memory.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Iterator, List, Optional, Union

from ..config import ConvertConfig
from ..core import constants as core_constants
from ..exceptions import InputOpenFailedError, StatFailedError, TruncatedDataError
from .raw_binary_parser import (
    OptimizedBinaryParser,
    RecordLayout,
    resolve_byte_order,
    select_value_format,
)
from .raw_header import decode_line, read_raw_line
from .raw_metadata import FileMetadata

_logger = logging.getLogger("spicecsv.RawStream")

SampleTuple = List[Any]


@dataclass
class StreamConfig:
    """Configuration for streaming operations."""

    chunk_size: int = core_constants.Defaults.CHUNK_POINTS  # Binary records per read
    max_points: Optional[int] = None  # Stop after this many points


class StreamProcessor(ABC):
    """Abstract base class for sample consumers."""

    @abstractmethod
    def process_sample(self, sample: SampleTuple) -> None:
        """Consume one canonical sample tuple."""

    @abstractmethod
    def finalize(self) -> Any:
        """Finish processing and return results."""


class RawFileStreamer:
    """Decodes the data region of a validated raw file.

    The sequence of samples can only be walked once per call to
    :meth:`samples`; each call reopens the file.
    """

    def __init__(
        self,
        raw_file: Union[str, Path],
        metadata: FileMetadata,
        config: Optional[ConvertConfig] = None,
        stream_config: Optional[StreamConfig] = None,
    ):
        """Initialize raw file streamer.

        Args:
            raw_file: Path to raw file
            metadata: Validated metadata of that file
            config: Run configuration, for the binary layout overrides
            stream_config: Streaming configuration
        """
        self.raw_file = Path(raw_file)
        self.metadata = metadata
        self.config = config or ConvertConfig()
        self.stream_config = stream_config or StreamConfig()

        self.num_points = metadata.point_count
        if self.stream_config.max_points is not None:
            self.num_points = max(0, min(self.num_points, self.stream_config.max_points))

        # Step counter, never shared with the column projector
        self.step = 0
        self.bytes_read = 0

    def samples(self) -> Iterator[SampleTuple]:
        """Yield one canonical tuple per point."""
        self.step = 0
        if self.metadata.is_binary:
            return self._stream_binary()
        return self._stream_ascii()

    def process_with(self, processor: StreamProcessor) -> Any:
        """Feed every sample to a processor and return ``processor.finalize()``."""
        for sample in self.samples():
            processor.process_sample(sample)
        return processor.finalize()

    # ASCII data

    def _next_line(self, f: BinaryIO, point: int, expected: int, got: int) -> str:
        raw = read_raw_line(f, self.metadata.encoding)
        if not raw:
            raise TruncatedDataError(point, expected, got)
        return decode_line(raw, self.metadata.encoding).strip()

    def _stream_ascii(self) -> Iterator[SampleTuple]:
        """Values section: ``idx<ws>var0`` then one line per remaining variable.

        In a stepped file a new step starts whenever the first variable takes
        again the value it had at the very first point.
        """
        num_lines = self.metadata.variable_count
        first_value: Optional[str] = None

        try:
            f = open(self.raw_file, "rb")
        except OSError as e:
            raise InputOpenFailedError(str(self.raw_file), e)

        with f:
            f.seek(self.metadata.data_start)
            for point in range(self.num_points):
                line = ""
                while not line:
                    line = self._next_line(f, point, num_lines, 0)
                data: SampleTuple = line.split()

                if self.metadata.is_stepped and len(data) > 1:
                    if first_value is None:
                        first_value = data[1]
                    elif data[1] == first_value:
                        self.step += 1
                        _logger.info("STEP: %d", self.step)

                data.insert(0, self.step)
                for j in range(1, num_lines):
                    data.append(self._next_line(f, point, num_lines, j))
                yield data
            self.bytes_read = f.tell() - self.metadata.data_start

    # Binary data

    def record_layout(self) -> RecordLayout:
        """Work out the record layout from the overrides or the file size."""
        try:
            file_size = self.raw_file.stat().st_size
        except OSError as e:
            raise StatFailedError(str(self.raw_file), e)

        data_size = file_size - self.metadata.data_start
        value_format = select_value_format(
            self.config.float_size,
            data_size,
            self.metadata.point_count,
            self.metadata.variable_count,
        )
        layout = RecordLayout(
            num_variables=self.metadata.variable_count,
            value_format=value_format,
            byte_order=resolve_byte_order(self.config.endianness),
        )

        _logger.debug("File size ....... %d", file_size)
        _logger.debug("Data size ....... %d", data_size)
        _logger.debug("Seek loc ........ %d", self.metadata.data_start)
        if self.metadata.point_count > 0:
            _logger.debug("Point size ...... %s", data_size / self.metadata.point_count)
        _logger.info("Float size ...... %d", layout.value_size)
        _logger.debug("Sample size ..... %d", layout.record_size)
        _logger.debug("Sample fmt ...... %s", layout.describe())

        expected = layout.record_size * self.metadata.point_count
        if expected != data_size:
            _logger.warning(
                "Data region is %d bytes but %d points of %d bytes need %d; "
                "records may be misaligned",
                data_size,
                self.metadata.point_count,
                layout.record_size,
                expected,
            )
        return layout

    def _stream_binary(self) -> Iterator[SampleTuple]:
        """Binary section: fixed size records, time offset added to field 0.

        The step counter is carried but never advanced here; stepped binary
        files report step 0 for every point.
        """
        layout = self.record_layout()
        time_offset = self.metadata.time_offset

        with OptimizedBinaryParser(self.raw_file) as parser:
            records = parser.iter_records(
                self.metadata.data_start,
                self.num_points,
                layout,
                chunk_size=self.stream_config.chunk_size,
            )
            for idx, record in enumerate(records):
                data: SampleTuple = [self.step, idx]
                data.extend(record)
                if time_offset is not None:
                    data[2] += time_offset
                self.bytes_read = parser.bytes_read
                yield data
            self.bytes_read = parser.bytes_read
