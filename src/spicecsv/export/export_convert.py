#!/usr/bin/env python
# coding=utf-8
"""Convert SPICE exported text (LTspice TSV, ngspice wrdata) into CSV.

Titles are simplified (``V(out)`` -> ``V_out``), units are converted and, for
stepped LTspice exports, the step parameters are added as extra columns that
can be used as factors downstream.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Generator, List, Optional, Sequence, TextIO, Union

from ..config import ConvertConfig, configure_logging
from ..exceptions import SpiceCsvError, StatFailedError, UnknownColumnError
from ..raw.raw_columns import ColumnSpec
from ..raw.raw_convert import LineEmitter, open_output
from .export_read import ExportTextReader

_logger = logging.getLogger("spicecsv.ExportConvert")


def resolve_export_columns(titles: List[str], requested: Optional[Sequence[str]]) -> ColumnSpec:
    """Resolve requested names against export titles, matching exactly.

    Raises:
        UnknownColumnError: If a name is not one of the titles
    """
    positions: Dict[str, int] = {}
    for position, title in enumerate(titles):
        positions.setdefault(title, position)
    names = list(requested) if requested is not None else list(titles)
    indices = []
    for name in names:
        if name not in positions:
            raise UnknownColumnError(name, titles)
        indices.append(positions[name])
    return ColumnSpec(names=tuple(names), indices=tuple(indices))


class ExportToCsvConverter:
    """Column resolution happens on the first data row, before any output."""

    def __init__(self, export_file: Union[str, Path], config: Optional[ConvertConfig] = None):
        self.export_file = Path(export_file)
        self.config = config or ConvertConfig()
        self.columns: Optional[ColumnSpec] = None
        self._reader: Optional[ExportTextReader] = None
        self._rows: Optional[Generator[List[float], None, None]] = None
        self._first: Optional[List[float]] = None

    def prepare(self) -> "ExportToCsvConverter":
        """Validate the configuration, read the titles and the first row.

        Raises:
            SpiceCsvError: Any configuration, I/O or format error
        """
        self.config.validate()
        if not self.export_file.is_file():
            raise StatFailedError(str(self.export_file))

        self._reader = ExportTextReader(
            self.export_file, self.config.separator, self.config.placeholder
        )
        self._rows = self._reader.rows()
        try:
            self._first = next(self._rows, None)
            if self._first is not None:
                self.columns = resolve_export_columns(
                    self._reader.all_titles, self.config.columns
                )
        except SpiceCsvError:
            self._rows.close()
            raise
        return self

    def write(self, sink: TextIO) -> int:
        """Write titles and rows; returns the number of data lines."""
        if self._rows is None:
            self.prepare()
        rows = self._rows
        if rows is None:
            raise SpiceCsvError(f"Conversion of {self.export_file} was not prepared")
        if self._first is None or self.columns is None:
            _logger.warning("No data rows in %s", self.export_file)
            return 0

        emitter = LineEmitter(sink, self.columns, self.config.separator, self.config.max_lines)
        if self.config.print_titles:
            emitter.write_titles()
        try:
            emitter.process_sample(self._first)
            for row in rows:
                if emitter.exhausted:
                    break
                emitter.process_sample(row)
        finally:
            rows.close()
        return emitter.finalize()


def convert_export(
    export_file: Union[str, Path], sink: TextIO, config: Optional[ConvertConfig] = None
) -> int:
    """Convert one exported text file into CSV lines written to ``sink``."""
    return ExportToCsvConverter(export_file, config).prepare().write(sink)


def run(export_file: Union[str, Path], config: ConvertConfig) -> int:
    """Convert to the configured output; returns the process exit status."""
    try:
        converter = ExportToCsvConverter(export_file, config).prepare()
        with open_output(config) as sink:
            converter.write(sink)
    except SpiceCsvError as e:
        _logger.error("%s", e.message)
        return 1
    return 0


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Command-line interface for converting exported text."""
    parser = argparse.ArgumentParser(
        description="Transform SPICE transient analysis exported text to simple CSV"
    )
    parser.add_argument("export_file", type=Path, help="Path to the exported text file")
    parser.add_argument(
        "-o", "--out", help="Name of output file. '-' or nothing means STDOUT"
    )
    parser.add_argument(
        "-d", "--debug", type=int, help="Debug level: 1 errors (default), 5 titles and steps"
    )
    parser.add_argument(
        "-t", "--no-titles", action="store_true", help="Do not print CSV titles"
    )
    parser.add_argument(
        "-n", "--lines", type=int, help="Maximum number of output lines, titles included"
    )
    parser.add_argument(
        "-c", "--cols", help="Columns to print, separated with the output separator"
    )
    parser.add_argument("-s", "--sep", help="Separator to use for output (default: comma)")
    parser.add_argument(
        "-u", "--unsep", help="Replaces the separator inside titles (default: semicolon)"
    )

    args = parser.parse_args(argv)
    config = ConvertConfig.from_environment().with_overrides(
        output=args.out,
        verbosity=args.debug,
        print_titles=False if args.no_titles else None,
        max_lines=args.lines,
        separator=args.sep,
        placeholder=args.unsep,
    )
    if args.cols is not None:
        config = config.with_overrides(columns=config.split_columns(args.cols))

    configure_logging(config.verbosity)
    sys.exit(run(args.export_file, config))


if __name__ == "__main__":
    main()
