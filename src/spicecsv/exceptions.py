"""
Exception hierarchy for spicecsv.

Every failure in the conversion pipeline is fatal. Library code raises one of
the classes below; only the command line front ends catch them.
"""

from typing import Any, Dict, List, Optional


class SpiceCsvError(Exception):
    """Base exception for all spicecsv errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize SpiceCsvError.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}


# File format exceptions
class FileFormatError(SpiceCsvError):
    """Base class for file format related errors."""


class InvalidRawFileError(FileFormatError):
    """Raised when a raw simulation output file is invalid."""


class UnrecognizedFormatError(InvalidRawFileError):
    """Raised when the file does not start with a raw file header."""

    def __init__(self, filepath: str, prefix: bytes) -> None:
        """
        Initialize UnrecognizedFormatError.

        Args:
            filepath: Path to the rejected file
            prefix: The bytes that were probed
        """
        message = (
            f"Could not detect the text encoding of {filepath}; "
            "it might not be a SPICE raw file"
        )
        details = {"filepath": filepath, "prefix": prefix}
        super().__init__(message, details)


class OrphanDataError(InvalidRawFileError):
    """Raised when a header line appears before any section name."""

    def __init__(self, line: str) -> None:
        message = f"Found dangling data with no section name: {line!r}"
        super().__init__(message, {"line": line})


class NoDataSectionError(InvalidRawFileError):
    """Raised when the header never reaches a Values or Binary section."""

    def __init__(self) -> None:
        super().__init__("File did not have data (no Values or Binary section)")


class MissingSectionError(InvalidRawFileError):
    """Base class for required header sections that are absent or unusable."""

    section = ""

    def __init__(self, message: str) -> None:
        super().__init__(message, {"section": self.section})


class MissingVariablesError(MissingSectionError):
    """Raised when the Variables section is absent or inconsistent."""

    section = "Variables"


class MissingVariableCountError(MissingSectionError):
    """Raised when No. Variables is absent or not an integer."""

    section = "No. Variables"


class MissingPointCountError(MissingSectionError):
    """Raised when No. Points is absent or not an integer."""

    section = "No. Points"


class TruncatedDataError(InvalidRawFileError):
    """Raised when the data region ends before the declared point count."""

    def __init__(self, point: int, expected: int, got: int) -> None:
        """
        Initialize TruncatedDataError.

        Args:
            point: Zero based index of the point being decoded
            expected: Number of bytes or lines expected
            got: Number actually available
        """
        message = f"Data ended early while reading point {point}: expected {expected}, got {got}"
        details = {"point": point, "expected": expected, "got": got}
        super().__init__(message, details)


class UnsupportedFormatError(FileFormatError):
    """Raised when a file format is recognized but not supported."""

    def __init__(
        self, file_format: str, supported_formats: Optional[List[str]] = None
    ) -> None:
        """
        Initialize UnsupportedFormatError.

        Args:
            file_format: The unsupported format
            supported_formats: List of supported formats
        """
        message = f"Unsupported file format: {file_format}"
        details = {"format": file_format, "supported": supported_formats}
        super().__init__(message, details)


class UnsupportedAnalysisError(UnsupportedFormatError):
    """Raised when the raw file holds anything but a transient analysis."""

    def __init__(self, plotname: Optional[str]) -> None:
        if plotname is None:
            super().__init__("no analysis type (no Plotname line)")
        else:
            super().__init__(
                f"analysis {plotname!r}, only transient analysis (.tran) is supported",
                ["Transient Analysis"],
            )
        self.details["plotname"] = plotname


class FastAccessUnsupportedError(UnsupportedFormatError):
    """Raised for LTspice FastAccess raw files."""

    def __init__(self) -> None:
        super().__init__("FastAccess")


class CompressedUnsupportedError(UnsupportedFormatError):
    """Raised for LTspice raw files with compressed plot windows."""

    def __init__(self) -> None:
        super().__init__("LTspice compressed data (add: .option plotwinsize=0)")


class ExportFormatError(FileFormatError):
    """Base class for errors in exported text files."""


class InvalidNumberError(ExportFormatError):
    """Raised when an exported value is not a number with an optional SI suffix."""

    def __init__(self, token: str, line_number: Optional[int] = None) -> None:
        message = f"Not a number: {token!r}"
        if line_number is not None:
            message += f" (line {line_number})"
        super().__init__(message, {"token": token, "line": line_number})


# Column exceptions
class ColumnError(SpiceCsvError):
    """Base class for column selection errors."""


class UnknownColumnError(ColumnError):
    """Raised when a requested column is not found in the file."""

    def __init__(self, column: str, available: Optional[List[str]] = None) -> None:
        """
        Initialize UnknownColumnError.

        Args:
            column: The column name that wasn't found
            available: Optional list of available column titles
        """
        message = f"Requested column not found in file: '{column}'"
        details = {"column": column, "available": available}
        super().__init__(message, details)


# Configuration exceptions
class ConfigurationError(SpiceCsvError):
    """Base class for configuration-related errors."""


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid."""


class InvalidEndiannessError(InvalidConfigurationError):
    """Raised when the endianness override is not 'big' or 'little'."""

    def __init__(self, value: Any) -> None:
        message = f"The endianness must be 'big' or 'little', not {value!r}"
        super().__init__(message, {"endianness": value})


class ConflictingSeparatorsError(InvalidConfigurationError):
    """Raised when the separator and its placeholder are the same."""

    def __init__(self, separator: str) -> None:
        message = f"Separator & placeholder can't be the same: {separator!r}"
        super().__init__(message, {"separator": separator})


# I/O exceptions
class SpiceCsvIOError(SpiceCsvError):
    """Base class for I/O related errors."""


class StatFailedError(SpiceCsvIOError):
    """Raised when the input file cannot be found or stat'ed."""

    def __init__(self, filepath: str, original_error: Optional[Exception] = None) -> None:
        """
        Initialize StatFailedError.

        Args:
            filepath: Path to the input file
            original_error: Original exception if any
        """
        message = f"Could not stat input file: {filepath!r}"
        details = {
            "filepath": filepath,
            "original_error": str(original_error) if original_error else None,
        }
        super().__init__(message, details)


class OutputOpenFailedError(SpiceCsvIOError):
    """Raised when the output file cannot be opened for writing."""

    def __init__(self, filepath: str, original_error: Optional[Exception] = None) -> None:
        message = f"Failed to open output file: {filepath!r}"
        details = {
            "filepath": filepath,
            "original_error": str(original_error) if original_error else None,
        }
        super().__init__(message, details)


class InputOpenFailedError(SpiceCsvIOError):
    """Raised when the input file exists but cannot be opened for reading."""

    def __init__(self, filepath: str, original_error: Optional[Exception] = None) -> None:
        message = f"Could not open input file: {filepath!r}"
        details = {
            "filepath": filepath,
            "original_error": str(original_error) if original_error else None,
        }
        super().__init__(message, details)
