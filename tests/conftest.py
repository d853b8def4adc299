"""Pytest configuration and shared fixtures for spicecsv tests."""

import struct
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

# Add src to path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

DEFAULT_VARIABLES = [("time", "time"), ("v1", "voltage"), ("i1", "current")]


def build_header(
    variables: Sequence[Tuple[str, str]] = DEFAULT_VARIABLES,
    num_points: int = 2,
    data_section: str = "Values",
    plotname: Optional[str] = "Transient Analysis",
    flags: Optional[str] = "real forward",
    command: Optional[str] = None,
    offset: Optional[str] = None,
    num_variables: Optional[int] = None,
) -> str:
    """Text of a raw file header, up to and including the data section line."""
    lines = ["Title: * Test Circuit", "Date: Mon Jan 01 00:00:00 2024"]
    if plotname is not None:
        lines.append(f"Plotname: {plotname}")
    if flags is not None:
        lines.append(f"Flags: {flags}")
    lines.append(
        f"No. Variables: {len(variables) if num_variables is None else num_variables}"
    )
    lines.append(f"No. Points: {num_points}")
    if offset is not None:
        lines.append(f"Offset: {offset}")
    if command is not None:
        lines.append(f"Command: {command}")
    lines.append("Variables:")
    for i, (name, kind) in enumerate(variables):
        lines.append(f"\t{i}\t{name}\t{kind}")
    lines.append(f"{data_section}:")
    return "\n".join(lines) + "\n"


def ascii_values(points: Sequence[Sequence[str]]) -> str:
    """Values section body: ``idx<TAB>var0`` then one line per other variable."""
    lines: List[str] = []
    for idx, values in enumerate(points):
        lines.append(f"{idx}\t{values[0]}")
        lines.extend(f"\t{v}" for v in values[1:])
        lines.append("")
    return "\n".join(lines)


def binary_records(
    points: Sequence[Sequence[float]], value_format: str = "d", byte_order: str = "<"
) -> bytes:
    """Binary section body: time as double, other values as ``value_format``."""
    data = b""
    for values in points:
        fmt = byte_order + "d" + value_format * (len(values) - 1)
        data += struct.pack(fmt, *values)
    return data


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Return a temporary directory for test output."""
    return tmp_path


@pytest.fixture
def write_raw(temp_dir: Path) -> Callable[..., Path]:
    """Factory writing a raw file made of a header and a data body."""

    def _write(
        header: str,
        body: bytes = b"",
        name: str = "test.raw",
        encoding: str = "utf-8",
    ) -> Path:
        path = temp_dir / name
        path.write_bytes(header.encode(encoding) + body)
        return path

    return _write


@pytest.fixture
def ascii_raw(write_raw: Callable[..., Path]) -> Path:
    """Three variables, two points, ASCII data."""
    points = [["0.0", "1.0", "2.0"], ["1e-6", "1.1", "2.1"]]
    return write_raw(build_header(), ascii_values(points).encode("utf-8"))


@pytest.fixture
def binary_raw(write_raw: Callable[..., Path]) -> Path:
    """Three variables, three points, little endian doubles."""
    points = [[0.0, 1.0, 2.0], [1e-6, 1.5, 2.5], [2e-6, 1.75, 2.75]]
    header = build_header(num_points=3, data_section="Binary")
    return write_raw(header, binary_records(points, "d", "<"), name="binary.raw")


@pytest.fixture
def stepped_ascii_raw(write_raw: Callable[..., Path]) -> Path:
    """Two variables, two steps of two points each."""
    points = [["0.0", "1.0"], ["1e-3", "2.0"], ["0.0", "3.0"], ["1e-3", "4.0"]]
    header = build_header(
        variables=[("time", "time"), ("V(out)", "voltage")],
        num_points=4,
        flags="real forward stepped",
    )
    return write_raw(header, ascii_values(points).encode("utf-8"), name="stepped.raw")
