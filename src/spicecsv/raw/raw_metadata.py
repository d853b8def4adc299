#!/usr/bin/env python
# coding=utf-8
"""Validation of a parsed raw file header.

Turns the generic section map built by :mod:`raw_header` into a fixed
:class:`FileMetadata` record, rejecting files this package can not decode.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core import constants as core_constants
from ..core.patterns import FLAG_TOKEN_PATTERN
from ..exceptions import (
    CompressedUnsupportedError,
    FastAccessUnsupportedError,
    MissingPointCountError,
    MissingVariableCountError,
    MissingVariablesError,
    NoDataSectionError,
    UnsupportedAnalysisError,
)
from .raw_header import RawHeader

_logger = logging.getLogger("spicecsv.RawMetadata")

RFC = core_constants.RawFileConstants


@dataclass(frozen=True)
class VariableDescriptor:
    """One line of the Variables section."""

    index: int
    name: str
    kind: str

    @classmethod
    def from_line(cls, line: str, position: int) -> "VariableDescriptor":
        """Parse a tab separated ``index name kind`` line.

        Args:
            line: Stripped line of the Variables section
            position: Position of the line, used in error messages

        Raises:
            MissingVariablesError: If the line has no name field
        """
        parts = line.split("\t")
        if len(parts) < 2:
            parts = line.split()
        if len(parts) < 2:
            raise MissingVariablesError(
                f"Malformed variable description #{position}: {line!r}"
            )
        try:
            index = int(parts[0])
        except ValueError:
            raise MissingVariablesError(
                f"Malformed variable index #{position}: {line!r}"
            )
        kind = parts[2] if len(parts) > 2 else ""
        return cls(index=index, name=parts[1], kind=kind)

    def title(self, separator: str, placeholder: str) -> str:
        """Name with every separator replaced, safe to use as a column title."""
        return self.name.replace(separator, placeholder)


@dataclass(frozen=True)
class FileMetadata:
    """Validated description of a transient analysis raw file."""

    encoding: str
    file_type: str
    data_start: int
    variable_count: int
    point_count: int
    variables: Tuple[VariableDescriptor, ...]
    is_stepped: bool = False
    is_fast_access: bool = False
    is_compressed: bool = False
    time_offset: Optional[float] = None
    sections: Dict[str, List[str]] = field(default_factory=dict, compare=False)

    @property
    def is_binary(self) -> bool:
        return self.file_type == RFC.FORMAT_BINARY

    @property
    def variable_names(self) -> List[str]:
        return [v.name for v in self.variables]

    def variable_titles(self, separator: str, placeholder: str) -> List[str]:
        return [v.title(separator, placeholder) for v in self.variables]


def _parse_count(header: RawHeader, name: str, error: type) -> int:
    value = header.first(name)
    if name not in header or value is None:
        raise error(f"No {name} section found")
    try:
        return int(value)
    except ValueError:
        raise error(f"{name} is not an integer: {value!r}")


def _flag_tokens(header: RawHeader) -> List[str]:
    flags = header.first(RFC.FLAGS) or ""
    return [token.lower() for token in FLAG_TOKEN_PATTERN.findall(flags)]


def validate_header(header: RawHeader, reject_unsupported: bool = True) -> FileMetadata:
    """Check a parsed header and derive the file metadata.

    The checks run in a fixed order and the first failure wins: data section,
    analysis type, variable list, variable count, point count. FastAccess and
    compressed files are rejected after the flags are known.

    Args:
        header: Parsed header
        reject_unsupported: Raise for FastAccess and compressed files. Only
            turned off to inspect such files.

    Returns:
        FileMetadata

    Raises:
        NoDataSectionError: No Values or Binary section
        UnsupportedAnalysisError: Not a transient analysis
        MissingVariablesError: No or inconsistent Variables section
        MissingVariableCountError: No usable No. Variables section
        MissingPointCountError: No usable No. Points section
        FastAccessUnsupportedError: FastAccess layout
        CompressedUnsupportedError: LTspice compressed data
    """
    if header.file_type is None or header.data_start is None:
        raise NoDataSectionError()

    if RFC.PLOTNAME not in header:
        raise UnsupportedAnalysisError(None)
    if header.first(RFC.PLOTNAME) != core_constants.SimulationTypes.TRAN:
        raise UnsupportedAnalysisError(header.first(RFC.PLOTNAME))

    if RFC.VARIABLES not in header:
        raise MissingVariablesError("No variable description section")

    variable_count = _parse_count(header, RFC.NUM_VARIABLES, MissingVariableCountError)
    if variable_count < 1:
        raise MissingVariableCountError(
            f"{RFC.NUM_VARIABLES} must be at least 1, not {variable_count}"
        )
    point_count = _parse_count(header, RFC.NUM_POINTS, MissingPointCountError)

    variables = tuple(
        VariableDescriptor.from_line(line, position)
        for position, line in enumerate(header.sections[RFC.VARIABLES])
        if line
    )
    if len(variables) != variable_count:
        raise MissingVariablesError(
            f"Found {len(variables)} variable descriptions, "
            f"expected {variable_count}"
        )

    is_stepped = False
    is_fast_access = False
    is_compressed = False
    if RFC.FLAGS in header:
        tokens = _flag_tokens(header)
        is_fast_access = RFC.FLAG_FAST_ACCESS in tokens
        is_stepped = RFC.FLAG_STEPPED in tokens
        command = header.first(RFC.COMMAND) or ""
        if RFC.LTSPICE in command and RFC.FLAG_NO_COMPRESSION not in tokens:
            is_compressed = True

    time_offset = None
    offset_value = header.first(RFC.OFFSET)
    if offset_value is not None:
        try:
            time_offset = float(offset_value)
        except ValueError:
            _logger.warning("Ignoring non numeric time offset %r", offset_value)

    metadata = FileMetadata(
        encoding=header.encoding,
        file_type=header.file_type,
        data_start=header.data_start,
        variable_count=variable_count,
        point_count=point_count,
        variables=variables,
        is_stepped=is_stepped,
        is_fast_access=is_fast_access,
        is_compressed=is_compressed,
        time_offset=time_offset,
        sections=header.sections,
    )
    log_metadata(metadata)

    if reject_unsupported:
        if metadata.is_fast_access:
            raise FastAccessUnsupportedError()
        if metadata.is_compressed:
            raise CompressedUnsupportedError()
    return metadata


def log_metadata(metadata: FileMetadata) -> None:
    """Log the metadata summary (INFO) and every raw section (DEBUG)."""
    if _logger.isEnabledFor(logging.INFO):
        _logger.info("File encoding ... %r", metadata.encoding)
        _logger.info("Data starts at .. %d", metadata.data_start)
        _logger.info("Num variables ... %d", metadata.variable_count)
        _logger.info("Num points ...... %d", metadata.point_count)
        _logger.info("File Type ....... %r", metadata.file_type)
        _logger.info("Stepped file .... %r", metadata.is_stepped)
        _logger.info("Fast Access ..... %r", metadata.is_fast_access)
        _logger.info("Compressed ...... %r", metadata.is_compressed)
        _logger.info("Time Offset ..... %r", metadata.time_offset)
        _logger.info("Variables:")
        for variable in metadata.variables:
            _logger.info("   %3d %-11s %s", variable.index, variable.kind, variable.name)

    if _logger.isEnabledFor(logging.DEBUG):
        _logger.debug("File Metadata:")
        for name, values in metadata.sections.items():
            _logger.debug("   %r => %r", name, values)
