#!/usr/bin/env python
# coding=utf-8
"""Column selection for raw file samples.

Every decoded sample is a canonical tuple ``[stp, idx, var0, var1, ...]``.
The projector maps the column names asked for by the user onto positions in
that tuple.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import ConvertConfig
from ..core import constants as core_constants
from ..exceptions import UnknownColumnError
from .raw_metadata import FileMetadata

_logger = logging.getLogger("spicecsv.RawColumns")


@dataclass(frozen=True)
class ColumnSpec:
    """Requested column names and their positions in the canonical tuple."""

    names: Tuple[str, ...]
    indices: Tuple[int, ...]

    def project(self, sample: Sequence[Any]) -> List[Any]:
        """Select and reorder the values of one sample."""
        return [sample[i] for i in self.indices]


class ColumnProjector:
    """Resolves column names against the titles of one raw file."""

    def __init__(self, metadata: FileMetadata, config: ConvertConfig) -> None:
        """Build the canonical titles.

        Args:
            metadata: Validated raw file metadata
            config: Run configuration, for the separator and its placeholder
        """
        self.metadata = metadata
        self.variable_titles = metadata.variable_titles(config.separator, config.placeholder)
        self.titles: List[str] = (
            list(core_constants.RawFileConstants.SYNTHETIC_COLUMNS) + self.variable_titles
        )
        self._positions: Dict[str, int] = {}
        for position, title in enumerate(self.titles):
            self._positions.setdefault(title.lower(), position)

    def default_columns(self) -> List[str]:
        """``stp`` (stepped files only), ``idx`` and every variable."""
        rfc = core_constants.RawFileConstants
        prefix = [rfc.STEP_COLUMN, rfc.INDEX_COLUMN] if self.metadata.is_stepped else [rfc.INDEX_COLUMN]
        return prefix + self.variable_titles

    def index_of(self, name: str) -> int:
        """Position of a column, matched case insensitively.

        Raises:
            UnknownColumnError: If no title matches
        """
        try:
            return self._positions[name.lower()]
        except KeyError:
            raise UnknownColumnError(name, self.titles)

    def resolve(self, requested: Optional[Sequence[str]] = None) -> ColumnSpec:
        """Resolve the requested columns, or the defaults when None.

        The order of ``requested`` is kept; columns may be omitted or repeated.
        """
        names = list(requested) if requested is not None else self.default_columns()
        indices = tuple(self.index_of(name) for name in names)
        _logger.debug("Columns %r resolved to positions %r", names, indices)
        return ColumnSpec(names=tuple(names), indices=indices)
