"""Conversion of SPICE waveform data exported as text."""

from .export_read import ExportTextReader, parse_si_number, simplify_title
from .export_convert import ExportToCsvConverter, convert_export

__all__ = [
    "ExportTextReader",
    "parse_si_number",
    "simplify_title",
    "ExportToCsvConverter",
    "convert_export",
]
