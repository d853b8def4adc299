"""Unit tests for raw header encoding detection."""

from pathlib import Path

import pytest

from spicecsv.core.constants import Encodings
from spicecsv.exceptions import InputOpenFailedError, UnrecognizedFormatError
from spicecsv.utils.detect_encoding import classify_prefix, detect_encoding


class TestClassifyPrefix:
    """Test the six byte probe."""

    def test_single_byte_title(self) -> None:
        assert classify_prefix(b"Title:") == Encodings.UTF8

    def test_utf16_title(self) -> None:
        assert classify_prefix("Tit".encode("utf_16_le")) == Encodings.UTF16_LE

    def test_longer_prefix_is_truncated(self) -> None:
        assert classify_prefix(b"Title: * circuit\n") == Encodings.UTF8

    @pytest.mark.parametrize(
        "prefix",
        [b"", b"Title", b"title:", b"Plotna", "Plo".encode("utf_16_le"), b"\xff\xfeT\x00i\x00"],
    )
    def test_rejected_prefixes(self, prefix: bytes) -> None:
        assert classify_prefix(prefix) == ""


class TestDetectEncoding:
    """Test detection on files."""

    def test_ascii_file(self, temp_dir: Path) -> None:
        raw_file = temp_dir / "ascii.raw"
        raw_file.write_bytes(b"Title: * test\nDate: today\n")
        assert detect_encoding(raw_file) == Encodings.UTF8

    def test_utf16_file(self, temp_dir: Path) -> None:
        raw_file = temp_dir / "wide.raw"
        raw_file.write_bytes("Title: * test\nDate: today\n".encode("utf_16_le"))
        assert detect_encoding(raw_file) == Encodings.UTF16_LE

    def test_not_a_raw_file(self, temp_dir: Path) -> None:
        raw_file = temp_dir / "other.raw"
        raw_file.write_bytes(b"Binary data placeholder")
        with pytest.raises(UnrecognizedFormatError) as excinfo:
            detect_encoding(raw_file)
        assert excinfo.value.details["prefix"] == b"Binary"

    def test_directory(self, temp_dir: Path) -> None:
        with pytest.raises(InputOpenFailedError) as excinfo:
            detect_encoding(temp_dir)
        assert excinfo.value.details["filepath"] == str(temp_dir)
