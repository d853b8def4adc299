"""Unit tests for raw header validation."""

from typing import Dict, List, Optional

import pytest

from spicecsv.core.constants import Encodings
from spicecsv.exceptions import (
    CompressedUnsupportedError,
    FastAccessUnsupportedError,
    MissingPointCountError,
    MissingVariableCountError,
    MissingVariablesError,
    NoDataSectionError,
    UnsupportedAnalysisError,
)
from spicecsv.raw.raw_header import RawHeader
from spicecsv.raw.raw_metadata import VariableDescriptor, validate_header


def make_header(
    overrides: Optional[Dict[str, Optional[List[str]]]] = None,
    file_type: Optional[str] = "binary",
) -> RawHeader:
    """A valid three variable header, with sections replaced or removed."""
    sections: Dict[str, List[str]] = {
        "Title": ["* Test"],
        "Plotname": ["Transient Analysis"],
        "Flags": ["real forward"],
        "No. Variables": ["3"],
        "No. Points": ["10"],
        "Variables": ["0\ttime\ttime", "1\tV(in)\tvoltage", "2\tI(R1)\tdevice_current"],
    }
    for name, values in (overrides or {}).items():
        if values is None:
            sections.pop(name, None)
        else:
            sections[name] = values
    return RawHeader(
        encoding=Encodings.UTF8,
        sections=sections,
        file_type=file_type,
        data_start=None if file_type is None else 200,
    )


class TestVariableDescriptor:
    """Test parsing of Variables lines."""

    def test_tab_separated(self) -> None:
        variable = VariableDescriptor.from_line("1\tV(in)\tvoltage", 1)
        assert variable == VariableDescriptor(1, "V(in)", "voltage")

    def test_name_with_spaces_is_kept(self) -> None:
        variable = VariableDescriptor.from_line("2\tV(a, b)\tvoltage", 2)
        assert variable.name == "V(a, b)"

    def test_whitespace_fallback(self) -> None:
        variable = VariableDescriptor.from_line("0 time time", 0)
        assert variable.name == "time"
        assert variable.kind == "time"

    def test_title_replaces_separator(self) -> None:
        variable = VariableDescriptor(1, "V(a,b,c)", "voltage")
        assert variable.title(",", ";") == "V(a;b;c)"
        assert variable.title("\t", ";") == "V(a,b,c)"

    @pytest.mark.parametrize("line", ["time", "x\ttime\ttime"])
    def test_malformed(self, line: str) -> None:
        with pytest.raises(MissingVariablesError):
            VariableDescriptor.from_line(line, 0)


class TestValidateHeader:
    """Test the validation order and derived fields."""

    def test_valid_header(self) -> None:
        metadata = validate_header(make_header())

        assert metadata.variable_count == 3
        assert metadata.point_count == 10
        assert metadata.is_binary
        assert metadata.data_start == 200
        assert metadata.variable_names == ["time", "V(in)", "I(R1)"]
        assert metadata.variables[2].kind == "device_current"
        assert not metadata.is_stepped
        assert not metadata.is_fast_access
        assert not metadata.is_compressed
        assert metadata.time_offset is None

    def test_no_data_section_checked_first(self) -> None:
        header = make_header({"Plotname": None}, file_type=None)
        with pytest.raises(NoDataSectionError):
            validate_header(header)

    def test_missing_plotname(self) -> None:
        with pytest.raises(UnsupportedAnalysisError) as excinfo:
            validate_header(make_header({"Plotname": None, "Variables": None}))
        assert excinfo.value.details["plotname"] is None

    def test_other_analysis(self) -> None:
        with pytest.raises(UnsupportedAnalysisError):
            validate_header(make_header({"Plotname": ["AC Analysis"]}))

    def test_missing_variables(self) -> None:
        with pytest.raises(MissingVariablesError):
            validate_header(make_header({"Variables": None, "No. Variables": None}))

    def test_missing_variable_count(self) -> None:
        with pytest.raises(MissingVariableCountError):
            validate_header(make_header({"No. Variables": None, "No. Points": None}))

    @pytest.mark.parametrize("count", ["0", "-2"])
    def test_variable_count_below_one(self, count: str) -> None:
        header = make_header({"No. Variables": [count], "Variables": []})
        with pytest.raises(MissingVariableCountError):
            validate_header(header)

    def test_non_integer_variable_count(self) -> None:
        with pytest.raises(MissingVariableCountError):
            validate_header(make_header({"No. Variables": ["three"]}))

    def test_missing_point_count(self) -> None:
        with pytest.raises(MissingPointCountError):
            validate_header(make_header({"No. Points": None}))

    def test_variable_count_mismatch(self) -> None:
        with pytest.raises(MissingVariablesError):
            validate_header(make_header({"No. Variables": ["4"]}))

    def test_stepped_flag(self) -> None:
        metadata = validate_header(make_header({"Flags": ["real forward stepped"]}))
        assert metadata.is_stepped

    def test_fast_access_rejected(self) -> None:
        with pytest.raises(FastAccessUnsupportedError):
            validate_header(make_header({"Flags": ["real forward fastaccess"]}))

    def test_fast_access_inspectable(self) -> None:
        header = make_header({"Flags": ["real forward fastaccess"]})
        metadata = validate_header(header, reject_unsupported=False)
        assert metadata.is_fast_access

    def test_ltspice_without_nocompression_is_compressed(self) -> None:
        header = make_header({"Command": ["Linear Technology Corporation LTspice XVII"]})
        with pytest.raises(CompressedUnsupportedError):
            validate_header(header)

    def test_ltspice_with_nocompression(self) -> None:
        header = make_header(
            {
                "Command": ["Linear Technology Corporation LTspice XVII"],
                "Flags": ["real forward nocompression"],
            }
        )
        assert not validate_header(header).is_compressed

    def test_ngspice_command_is_not_compressed(self) -> None:
        header = make_header({"Command": ["version 41"]})
        assert not validate_header(header).is_compressed

    def test_compression_needs_flags_section(self) -> None:
        header = make_header({"Command": ["LTspice XVII"], "Flags": None})
        assert not validate_header(header).is_compressed

    def test_time_offset(self) -> None:
        metadata = validate_header(make_header({"Offset": ["1.5e-3"]}))
        assert metadata.time_offset == pytest.approx(1.5e-3)

    def test_bad_time_offset_is_ignored(self) -> None:
        metadata = validate_header(make_header({"Offset": ["soon"]}))
        assert metadata.time_offset is None

    def test_titles_use_placeholder(self) -> None:
        header = make_header({"Variables": ["0\ttime\ttime", "1\tV(a,b)\tvoltage", "2\tx\tvoltage"]})
        metadata = validate_header(header)
        assert metadata.variable_titles(",", ";") == ["time", "V(a;b)", "x"]
