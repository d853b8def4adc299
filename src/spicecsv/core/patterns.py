"""
Centralized regex patterns for spicecsv.

This module contains the regex patterns used by the raw header parser and the
text export reader.
"""

import re
from typing import Pattern

# Raw header patterns
SECTION_HEADER_PATTERN: Pattern[str] = re.compile(r"^([A-Za-z][^:]+):\s*(.*)")
FLAG_TOKEN_PATTERN: Pattern[str] = re.compile(r"\w+")

# Step information line in LTspice exported text
EXPORT_STEP_INFO_PATTERN: Pattern[str] = re.compile(
    r"^Step Information:(.+)\(Run:.*$"
)

# Number with an optional engineering suffix. Longer suffixes first.
SI_NUMBER_PATTERN: Pattern[str] = re.compile(
    r"^([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)(Meg|Mil|f|T|p|G|n|u|K|M)?$"
)

# Trace name simplification: V(/foo) -> V_foo
PROBE_WHOLE_PATTERN: Pattern[str] = re.compile(r"^([vViI])\(/*(.+)\)$")
PROBE_EMBEDDED_PATTERN: Pattern[str] = re.compile(r"([vViI])\(/*([^)]+)\)")
QUOTED_PATTERN: Pattern[str] = re.compile(r'^"(.+)"$')
LEADING_SLASH_PATTERN: Pattern[str] = re.compile(r"^/")
