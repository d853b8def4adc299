#!/usr/bin/env python
# coding=utf-8
"""Reader of SPICE waveform data exported as text.

LTspice ("File > Export data as text") writes a TSV file, ngspice ``wrdata``
(with ``wr_vecnames`` set) a whitespace separated one. Both start with a line
of trace names followed by one line of numbers per point. Stepped LTspice
exports precede each run with a line like::

    Step Information: Rload=1K Cload=10n  (Run: 2/6)

Numbers may carry an engineering suffix (``10n``, ``1.5Meg``).
"""

import logging
from pathlib import Path
from typing import Generator, List, Optional, TextIO, Tuple, Union

from ..core import constants as core_constants
from ..core.patterns import (
    EXPORT_STEP_INFO_PATTERN,
    LEADING_SLASH_PATTERN,
    PROBE_EMBEDDED_PATTERN,
    PROBE_WHOLE_PATTERN,
    QUOTED_PATTERN,
    SI_NUMBER_PATTERN,
)
from ..exceptions import ExportFormatError, InputOpenFailedError, InvalidNumberError

_logger = logging.getLogger("spicecsv.ExportRead")


def parse_si_number(token: str, line_number: Optional[int] = None) -> float:
    """Parse a number with an optional SI suffix.

    The suffixes are SPICE ones, so ``M`` is milli and ``Meg`` mega.

    :param token: text such as ``4.7K`` or ``1e-3``
    :param line_number: line of the token, for error messages
    :return: the scaled value
    :raises InvalidNumberError: if the token does not follow the grammar
    """
    match = SI_NUMBER_PATTERN.match(token)
    if match is None:
        raise InvalidNumberError(token, line_number)
    return float(match.group(1)) * core_constants.SI_SUFFIXES[match.group(2)]


def simplify_title(name: str, separator: str, placeholder: str) -> str:
    """Turn a trace name into a plain column title.

    ``V(/out)`` becomes ``V_out`` and ``I(R1)`` becomes ``I_R1``, separators
    are replaced with the placeholder, surrounding quotes and a leading slash
    are removed.
    """
    title = name.strip()
    title = PROBE_WHOLE_PATTERN.sub(r"\1_\2", title, count=1)
    title = PROBE_EMBEDDED_PATTERN.sub(r"\1_\2", title, count=1)
    title = title.replace(separator, placeholder)
    title = QUOTED_PATTERN.sub(r"\1", title, count=1)
    title = LEADING_SLASH_PATTERN.sub("", title, count=1)
    return title


def parse_step_information(text: str, line_number: Optional[int] = None) -> Tuple[List[str], List[float]]:
    """Split the ``k1=v1 k2=v2`` part of a step information line."""
    titles: List[str] = []
    values: List[float] = []
    for pair in text.split():
        name, _, value = pair.partition("=")
        titles.append(name)
        values.append(parse_si_number(value, line_number))
    return titles, values


class ExportTextReader:
    """Streams the rows of an exported text file."""

    def __init__(
        self,
        export_file: Union[str, Path],
        separator: str = core_constants.Defaults.SEPARATOR,
        placeholder: str = core_constants.Defaults.PLACEHOLDER,
    ) -> None:
        """Initialize the reader.

        Args:
            export_file: Path to the exported text
            separator: Output separator, removed from titles
            placeholder: Replacement for the separator in titles
        """
        self.export_file = Path(export_file)
        self.separator = separator
        self.placeholder = placeholder
        self.titles: List[str] = []
        self.step_titles: List[str] = []
        self.step_values: List[float] = []

    @property
    def all_titles(self) -> List[str]:
        """Trace titles followed by the titles of the current step parameters."""
        return self.titles + self.step_titles

    def _read_titles(self, f: TextIO) -> None:
        first = f.readline()
        if not first.strip():
            raise ExportFormatError(f"No title line in {self.export_file}")
        self.titles = [
            simplify_title(name, self.separator, self.placeholder) for name in first.split()
        ]
        _logger.info("Titles: %r", self.titles)

    def rows(self) -> Generator[List[float], None, None]:
        """Yield the values of each data line, step parameters appended."""
        try:
            f = open(self.export_file, "r", encoding="utf-8", errors="replace")
        except OSError as e:
            raise InputOpenFailedError(str(self.export_file), e)
        with f:
            self._read_titles(f)
            for line_number, line in enumerate(f, start=2):
                match = EXPORT_STEP_INFO_PATTERN.match(line.strip())
                if match:
                    self.step_titles, self.step_values = parse_step_information(
                        match.group(1), line_number
                    )
                    _logger.info("Step: %s", match.group(1).strip())
                    continue
                tokens = line.split()
                if not tokens:
                    continue
                values = [parse_si_number(token, line_number) for token in tokens]
                yield values + self.step_values
