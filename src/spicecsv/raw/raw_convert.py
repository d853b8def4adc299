#!/usr/bin/env python
# coding=utf-8
"""Convert transient analysis raw files into CSV.

Supported: ngspice, Xyce and LTspice raw files, ASCII or binary, single byte
or UTF-16LE headers, stepped (.STEP) files, time offsets. Binary value width
and byte order are guessed unless given.

Not supported: FastAccess and compressed LTspice files (add
``.option plotwinsize=0`` to the netlist), analyses other than .tran.
"""

import argparse
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator, Optional, Sequence, TextIO, Union

from ..config import ConvertConfig, configure_logging
from ..core import constants as core_constants
from ..exceptions import OutputOpenFailedError, SpiceCsvError, StatFailedError
from ..utils.detect_encoding import detect_encoding
from .raw_columns import ColumnProjector, ColumnSpec
from .raw_header import RawHeaderParser
from .raw_metadata import FileMetadata, validate_header
from .raw_stream import RawFileStreamer, SampleTuple, StreamConfig, StreamProcessor

_logger = logging.getLogger("spicecsv.RawConvert")


def format_value(value: Any) -> str:
    """Text form of one output value. Floats keep full precision."""
    if isinstance(value, float):
        return repr(value)
    return str(value)


def data_line_budget(max_lines: Optional[int]) -> Optional[int]:
    """Number of data lines allowed by a line cap. One slot goes to the titles."""
    if max_lines is None:
        return None
    return max(0, max_lines - 1)


class LineEmitter(StreamProcessor):
    """Writes projected samples as separator joined lines."""

    def __init__(
        self,
        sink: TextIO,
        columns: ColumnSpec,
        separator: str = core_constants.Defaults.SEPARATOR,
        max_lines: Optional[int] = None,
    ) -> None:
        """Initialize the emitter.

        Args:
            sink: Text stream receiving the lines
            columns: Resolved column selection
            separator: Field separator
            max_lines: Optional cap on output lines, titles included
        """
        self.sink = sink
        self.columns = columns
        self.separator = separator
        self.max_data_lines = data_line_budget(max_lines)
        self.lines_written = 0

    @property
    def exhausted(self) -> bool:
        return self.max_data_lines is not None and self.lines_written >= self.max_data_lines

    def write_titles(self) -> None:
        """Write the requested column names, verbatim."""
        self.sink.write(self.separator.join(self.columns.names) + "\n")

    def process_sample(self, sample: SampleTuple) -> None:
        if self.exhausted:
            return
        values = self.columns.project(sample)
        self.sink.write(self.separator.join(format_value(v) for v in values) + "\n")
        self.lines_written += 1

    def finalize(self) -> int:
        """Flush the sink and return the number of data lines written."""
        self.sink.flush()
        return self.lines_written


@contextmanager
def open_output(config: ConvertConfig) -> Iterator[TextIO]:
    """Open the configured output sink; standard output is left open."""
    if config.writes_to_stdout:
        yield sys.stdout
        return
    try:
        f = open(config.output, "w", encoding="utf-8")
    except OSError as e:
        raise OutputOpenFailedError(config.output, e)
    with f:
        yield f


class RawToCsvConverter:
    """Header parsing, validation and column resolution for one raw file.

    Everything that can fail because of the input happens in :meth:`prepare`,
    before a single output line is written.
    """

    def __init__(self, raw_file: Union[str, Path], config: Optional[ConvertConfig] = None):
        self.raw_file = Path(raw_file)
        self.config = config or ConvertConfig()
        self.metadata: Optional[FileMetadata] = None
        self.columns: Optional[ColumnSpec] = None
        self.streamer: Optional[RawFileStreamer] = None

    def prepare(self) -> "RawToCsvConverter":
        """Validate the configuration, then read and check the header.

        Returns:
            self

        Raises:
            SpiceCsvError: Any configuration, I/O or format error
        """
        self.config.validate()

        try:
            file_size = self.raw_file.stat().st_size
        except OSError as e:
            raise StatFailedError(str(self.raw_file), e)
        _logger.debug("Input file %s is %d bytes", self.raw_file, file_size)

        encoding = detect_encoding(self.raw_file)
        header = RawHeaderParser(self.raw_file, encoding).parse()
        self.metadata = validate_header(header)

        projector = ColumnProjector(self.metadata, self.config)
        self.columns = projector.resolve(self.config.columns)

        self.streamer = RawFileStreamer(
            self.raw_file,
            self.metadata,
            self.config,
            StreamConfig(max_points=data_line_budget(self.config.max_lines)),
        )
        return self

    def write(self, sink: TextIO) -> int:
        """Write titles and samples to a text stream.

        Returns:
            Number of data lines written
        """
        if self.streamer is None or self.columns is None:
            self.prepare()
        streamer, columns = self.streamer, self.columns
        if streamer is None or columns is None:
            raise SpiceCsvError(f"Conversion of {self.raw_file} was not prepared")

        emitter = LineEmitter(sink, columns, self.config.separator, self.config.max_lines)
        if self.config.print_titles:
            emitter.write_titles()
        if emitter.exhausted:
            return emitter.finalize()
        return streamer.process_with(emitter)


def convert_raw(
    raw_file: Union[str, Path], sink: TextIO, config: Optional[ConvertConfig] = None
) -> int:
    """Convert one raw file into CSV lines written to ``sink``.

    Returns:
        Number of data lines written

    Raises:
        SpiceCsvError: Any configuration, I/O or format error
    """
    return RawToCsvConverter(raw_file, config).prepare().write(sink)


def run(raw_file: Union[str, Path], config: ConvertConfig) -> int:
    """Convert a raw file to the configured output, reporting errors.

    Returns:
        Process exit status: 0 on success, 1 on any error
    """
    try:
        converter = RawToCsvConverter(raw_file, config).prepare()
        with open_output(config) as sink:
            lines = converter.write(sink)
    except SpiceCsvError as e:
        _logger.error("%s", e.message)
        return 1
    _logger.debug("Wrote %d data lines", lines)
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Command line options of the raw converter."""
    parser = argparse.ArgumentParser(
        description="Extract data from SPICE transient analysis raw files to CSV"
    )
    parser.add_argument("raw_file", type=Path, help="Path to the raw file to convert")
    parser.add_argument(
        "-o", "--out", help="Name of output file. '-' or nothing means STDOUT"
    )
    parser.add_argument(
        "-d",
        "--debug",
        type=int,
        help="Debug level: 1 errors (default), 5 metadata, 10 more metadata, 0 silent",
    )
    parser.add_argument(
        "-t", "--no-titles", action="store_true", help="Do not print CSV titles"
    )
    parser.add_argument(
        "-n",
        "--lines",
        type=int,
        help="Maximum number of output lines, titles included. Use 1 to just print titles",
    )
    parser.add_argument(
        "-c",
        "--cols",
        help="Columns to print, separated with the output separator. Names are "
        "matched case insensitively; 'idx' is the point index and 'stp' the step "
        "number",
    )
    parser.add_argument(
        "-s", "--sep", help="Separator to use for output (default: comma)"
    )
    parser.add_argument(
        "-u",
        "--unsep",
        help="Replaces the separator inside variable names (default: semicolon)",
    )
    parser.add_argument(
        "-e",
        "--endian",
        help="Endianness of binary files: big or little (default: this system's)",
    )
    parser.add_argument(
        "-f",
        "--floats",
        choices=core_constants.BinaryOverrides.FLOAT_SIZES,
        help="Size of binary floats (default: guessed from the file size)",
    )
    return parser


def config_from_args(args: argparse.Namespace, base: Optional[ConvertConfig] = None) -> ConvertConfig:
    """Apply command line options on top of a base configuration."""
    config = (base or ConvertConfig()).with_overrides(
        output=args.out,
        verbosity=args.debug,
        print_titles=False if args.no_titles else None,
        max_lines=args.lines,
        separator=args.sep,
        placeholder=args.unsep,
        endianness=args.endian,
        float_size=args.floats,
    )
    if args.cols is not None:
        config = config.with_overrides(columns=config.split_columns(args.cols))
    return config


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Command-line interface for converting raw files."""
    args = build_parser().parse_args(argv)
    config = config_from_args(args, ConvertConfig.from_environment())
    configure_logging(config.verbosity)
    sys.exit(run(args.raw_file, config))


if __name__ == "__main__":
    main()
