#!/usr/bin/env python
# coding=utf-8
"""Raw file header parsing.

The header of a raw file is a list of ``Name: value`` lines, some of them
followed by continuation lines (the ``Variables`` section for instance). It
ends at the first ``Values:`` or ``Binary:`` line, after which the sample data
starts. This module turns the header into an ordered section map and records
the byte offset of the data so the decoder can seek straight to it.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

from ..core import constants as core_constants
from ..core.patterns import SECTION_HEADER_PATTERN
from ..exceptions import InputOpenFailedError, OrphanDataError

_logger = logging.getLogger("spicecsv.RawHeader")

_NEWLINE = {
    core_constants.Encodings.UTF8: b"\n",
    core_constants.Encodings.UTF16_LE: "\n".encode(core_constants.Encodings.UTF16_LE),
}


def read_raw_line(f: BinaryIO, encoding: str) -> bytes:
    """Read one line of encoded text from a binary stream.

    UTF-16LE lines are read one code unit at a time so that a ``0x0A`` byte
    inside a wide character is never taken for a line end, and the stream
    position is always the exact byte offset of the next line.

    :param f: stream opened in binary mode
    :param encoding: encoding returned by the encoding detector
    :return: the raw bytes of the line including its terminator, or an empty
        bytes object at end of file
    """
    unit = core_constants.Encodings.UNIT_SIZE[encoding]
    if unit == 1:
        return f.readline()

    newline = _NEWLINE[encoding]
    buffer = bytearray()
    while True:
        code_unit = f.read(unit)
        buffer += code_unit
        if len(code_unit) < unit or code_unit == newline:
            break
    return bytes(buffer)


def decode_line(raw: bytes, encoding: str) -> str:
    """Decode a line read by :func:`read_raw_line`, dropping its terminator."""
    return raw.decode(encoding, errors="replace").rstrip("\r\n")


@dataclass
class RawHeader:
    """Sections of a raw file header and where the data starts."""

    encoding: str
    sections: Dict[str, List[str]] = field(default_factory=dict)
    file_type: Optional[str] = None
    data_start: Optional[int] = None

    def first(self, name: str) -> Optional[str]:
        """First value of a section, or None if absent or empty."""
        values = self.sections.get(name)
        if values:
            return values[0]
        return None

    def __contains__(self, name: str) -> bool:
        return name in self.sections


class RawHeaderParser:
    """Reads the header of a raw file section by section."""

    def __init__(self, raw_file: Union[str, Path], encoding: str) -> None:
        """Initialize the parser.

        Args:
            raw_file: Path to the raw file
            encoding: Header encoding, as found by the encoding detector
        """
        self.raw_file = Path(raw_file)
        self.encoding = encoding

    def parse(self) -> RawHeader:
        """Parse the header.

        Returns:
            RawHeader. ``file_type`` and ``data_start`` stay None when the file
            ends before a Values or Binary section.

        Raises:
            OrphanDataError: If a continuation line precedes every section name
        """
        try:
            f = open(self.raw_file, "rb")
        except OSError as e:
            raise InputOpenFailedError(str(self.raw_file), e)
        with f:
            return self.parse_stream(f)

    def parse_stream(self, f: BinaryIO) -> RawHeader:
        """Parse the header from an open binary stream positioned at offset 0."""
        header = RawHeader(encoding=self.encoding)
        section_name: Optional[str] = None

        while True:
            raw = read_raw_line(f, self.encoding)
            if not raw:
                _logger.debug("End of file reached inside the header")
                break
            line = decode_line(raw, self.encoding)

            match = SECTION_HEADER_PATTERN.match(line)
            if match:
                section_name = match.group(1).strip()
                section_value = match.group(2).strip()
                if section_name in core_constants.RawFileConstants.DATA_SECTIONS:
                    header.file_type = (
                        core_constants.RawFileConstants.FORMAT_ASCII
                        if section_name == core_constants.RawFileConstants.VALUES
                        else core_constants.RawFileConstants.FORMAT_BINARY
                    )
                    header.data_start = f.tell()
                    break
                header.sections[section_name] = [section_value] if section_value else []
            elif section_name is not None:
                header.sections[section_name].append(line.strip())
            else:
                raise OrphanDataError(line)

        return header


def parse_header(raw_file: Union[str, Path], encoding: str) -> RawHeader:
    """Convenience wrapper around :class:`RawHeaderParser`."""
    return RawHeaderParser(raw_file, encoding).parse()
