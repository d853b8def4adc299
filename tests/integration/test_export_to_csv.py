"""End to end tests of the exported text converter."""

import io
import logging
import os
from pathlib import Path
from typing import Iterator

import pytest

from spicecsv.config import ConvertConfig
from spicecsv.exceptions import (
    InputOpenFailedError,
    InvalidNumberError,
    StatFailedError,
    UnknownColumnError,
)
from spicecsv.export.export_convert import (
    ExportToCsvConverter,
    convert_export,
    main,
    resolve_export_columns,
    run,
)

STEPPED_EXPORT = (
    "time\tV(/out)\tI(R1)\n"
    "Step Information: Rload=1K  (Run: 1/2)\n"
    "0.000000000000000e+000\t1.0\t1m\n"
    "1.000000000000000e-003\t2.0\t2m\n"
    "Step Information: Rload=2K  (Run: 2/2)\n"
    "0.000000000000000e+000\t3.0\t3m\n"
    "1.000000000000000e-003\t4.0\t4m\n"
)


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    saved_level, saved_handlers = root.level, root.handlers[:]
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def plain_export(temp_dir: Path) -> Path:
    path = temp_dir / "plain.txt"
    path.write_text("time V(out)\n0 1.5\n1u 2K\n\n2u 3Meg\n")
    return path


@pytest.fixture
def stepped_export(temp_dir: Path) -> Path:
    path = temp_dir / "stepped.txt"
    # Suffixes in the currents use SPICE units: M is milli
    path.write_text(STEPPED_EXPORT.replace("m\n", "M\n"))
    return path


def convert(export_file: Path, **options: object) -> str:
    sink = io.StringIO()
    convert_export(export_file, sink, ConvertConfig(**options))
    return sink.getvalue()


class TestResolveExportColumns:
    """Exact title matching."""

    def test_default_is_every_title(self) -> None:
        spec = resolve_export_columns(["time", "V_out"], None)
        assert spec.names == ("time", "V_out")
        assert spec.indices == (0, 1)

    def test_matching_is_case_sensitive(self) -> None:
        with pytest.raises(UnknownColumnError):
            resolve_export_columns(["time", "V_out"], ["v_out"])


class TestExportConversion:
    """Conversion of exported text."""

    def test_plain(self, plain_export: Path) -> None:
        assert convert(plain_export).splitlines() == [
            "time,V_out",
            "0.0,1.5",
            "1e-06,2000.0",
            "2e-06,3000000.0",
        ]

    def test_step_columns(self, stepped_export: Path) -> None:
        lines = convert(stepped_export).splitlines()
        assert lines[0] == "time,V_out,I_R1,Rload"
        assert lines[1] == "0.0,1.0,0.001,1000.0"
        assert lines[4] == "0.001,4.0,0.004,2000.0"
        assert len(lines) == 5

    def test_selected_columns_and_cap(self, stepped_export: Path) -> None:
        output = convert(stepped_export, columns=("Rload", "V_out"), max_lines=3)
        assert output == "Rload,V_out\n1000.0,1.0\n1000.0,2.0\n"

    def test_separator(self, plain_export: Path) -> None:
        output = convert(plain_export, separator="\t", print_titles=False, max_lines=2)
        assert output == "0.0\t1.5\n"

    def test_unknown_column_writes_nothing(self, plain_export: Path) -> None:
        sink = io.StringIO()
        with pytest.raises(UnknownColumnError):
            convert_export(plain_export, sink, ConvertConfig(columns=("V(out)",)))
        assert sink.getvalue() == ""

    def test_bad_number(self, temp_dir: Path) -> None:
        path = temp_dir / "bad.txt"
        path.write_text("time v\n0 1\n1 2volts\n")
        with pytest.raises(InvalidNumberError):
            convert(path)

    def test_missing_file(self, temp_dir: Path) -> None:
        with pytest.raises(StatFailedError):
            convert(temp_dir / "missing.txt")

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0, reason="root reads any file"
    )
    def test_unreadable_file(self, plain_export: Path, temp_dir: Path) -> None:
        plain_export.chmod(0)
        try:
            with pytest.raises(InputOpenFailedError):
                convert(plain_export)
            assert run(plain_export, ConvertConfig(output=str(temp_dir / "out.csv"))) == 1
        finally:
            plain_export.chmod(0o644)

    def test_run_directory_input(self, temp_dir: Path) -> None:
        assert run(temp_dir, ConvertConfig(output=str(temp_dir / "out.csv"))) == 1

    def test_write_prepares_on_demand(self, plain_export: Path) -> None:
        sink = io.StringIO()
        assert ExportToCsvConverter(plain_export).write(sink) == 3
        assert sink.getvalue().splitlines()[0] == "time,V_out"

    def test_titles_only_file(self, temp_dir: Path) -> None:
        path = temp_dir / "titles.txt"
        path.write_text("time v\n")
        assert convert(path) == ""


class TestCommandLine:
    """The spicecsv-export2csv entry point."""

    def test_stdout(self, plain_export: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([str(plain_export), "-n", "2"])
        assert excinfo.value.code == 0
        assert capsys.readouterr().out == "time,V_out\n0.0,1.5\n"

    def test_output_file(self, stepped_export: Path, temp_dir: Path) -> None:
        out = temp_dir / "out.csv"
        with pytest.raises(SystemExit) as excinfo:
            main([str(stepped_export), "-o", str(out), "-c", "time,Rload", "-t"])
        assert excinfo.value.code == 0
        assert out.read_text().splitlines() == [
            "0.0,1000.0",
            "0.001,1000.0",
            "0.0,2000.0",
            "0.001,2000.0",
        ]

    def test_failure_exit_status(self, temp_dir: Path) -> None:
        with pytest.raises(SystemExit) as excinfo:
            main([str(temp_dir / "missing.txt"), "-d", "0"])
        assert excinfo.value.code == 1
