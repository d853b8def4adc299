#!/usr/bin/env python
# coding=utf-8
"""Pragmatic detection of the raw file header encoding.

LTspice writes its raw files with a UTF-16LE header while ngspice and Xyce
use plain single byte text. Every raw file starts with ``Title:`` so looking
at the first six bytes is enough to tell them apart, no generic unicode
detection library needed.
"""

import logging
from pathlib import Path
from typing import Union

from ..core import constants as core_constants
from ..exceptions import InputOpenFailedError, UnrecognizedFormatError

_logger = logging.getLogger("spicecsv.DetectEncoding")


def classify_prefix(prefix: bytes) -> str:
    """Return the encoding implied by the first bytes of a raw file.

    :param prefix: first bytes of the file, read in binary mode
    :return: one of the :class:`Encodings` names, or an empty string if the
        prefix matches neither supported encoding
    """
    probe = prefix[: core_constants.RawFileConstants.PROBE_SIZE]
    if probe == core_constants.RawFileConstants.MAGIC:
        return core_constants.Encodings.UTF8
    if len(probe) == core_constants.RawFileConstants.PROBE_SIZE:
        try:
            text = probe.decode(core_constants.Encodings.UTF16_LE)
        except UnicodeDecodeError:
            return ""
        if text == core_constants.RawFileConstants.MAGIC_UTF16:
            return core_constants.Encodings.UTF16_LE
    return ""


def detect_encoding(file_path: Union[str, Path]) -> str:
    """Detect whether a raw file header is single byte text or UTF-16LE.

    :param file_path: path to the raw file
    :return: detected encoding
    :raises UnrecognizedFormatError: when the file does not start with a
        ``Title:`` line in either encoding
    """
    try:
        with open(file_path, "rb") as f:
            prefix = f.read(core_constants.RawFileConstants.PROBE_SIZE)
    except OSError as e:
        raise InputOpenFailedError(str(file_path), e)

    encoding = classify_prefix(prefix)
    if not encoding:
        raise UnrecognizedFormatError(str(file_path), prefix)
    _logger.debug("Detected header encoding %s for %s", encoding, file_path)
    return encoding
