"""
Configuration management for spicecsv.

A conversion run is described by one immutable :class:`ConvertConfig` that is
passed explicitly to every stage of the pipeline. Instances can be built from
keyword arguments, dictionaries, JSON files or environment variables.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from spicecsv.core.constants import BinaryOverrides, Defaults, Verbosity
from spicecsv.exceptions import (
    ConfigurationError,
    ConflictingSeparatorsError,
    InvalidConfigurationError,
    InvalidEndiannessError,
)

_logger = logging.getLogger("spicecsv.Config")


@dataclass(frozen=True)
class ConvertConfig:
    """Options of one conversion run."""

    # Output
    output: str = Defaults.OUTPUT
    print_titles: bool = Defaults.PRINT_TITLES
    max_lines: Optional[int] = None
    columns: Optional[Tuple[str, ...]] = None
    separator: str = Defaults.SEPARATOR
    placeholder: str = Defaults.PLACEHOLDER

    # Diagnostics
    verbosity: int = Defaults.VERBOSITY

    # Binary layout overrides
    endianness: Optional[str] = None
    float_size: Optional[str] = None

    def __post_init__(self) -> None:
        """Freeze the requested column list."""
        if self.columns is not None and not isinstance(self.columns, tuple):
            object.__setattr__(self, "columns", tuple(self.columns))

    def split_columns(self, text: str) -> Sequence[str]:
        """Split a column list given as one string on the output separator."""
        return tuple(text.split(self.separator))

    def validate(self) -> "ConvertConfig":
        """
        Check the options that do not depend on the input file.

        Returns:
            The same instance, for chaining

        Raises:
            ConflictingSeparatorsError: If separator and placeholder are equal
            InvalidEndiannessError: If the endianness override is not big/little
            InvalidConfigurationError: If the separator is empty
        """
        if not self.separator:
            raise InvalidConfigurationError("The separator can't be empty")
        if self.separator == self.placeholder:
            raise ConflictingSeparatorsError(self.separator)
        if self.endianness is not None and self.endianness not in BinaryOverrides.ENDIANNESS:
            raise InvalidEndiannessError(self.endianness)
        return self

    @property
    def writes_to_stdout(self) -> bool:
        return self.output == Defaults.OUTPUT

    def with_overrides(self, **overrides: Any) -> "ConvertConfig":
        """Return a copy with the given options replaced, ignoring None values."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ConvertConfig":
        """
        Build a configuration from a dictionary.

        Unknown keys are ignored with a warning.

        Args:
            config_dict: Dictionary with configuration values

        Returns:
            ConvertConfig instance
        """
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in config_dict.items():
            if key in known:
                values[key] = value
            else:
                _logger.warning("Ignoring unknown configuration key %r", key)
        columns = values.pop("columns", None)
        config = cls(**values)
        if isinstance(columns, str):
            columns = config.split_columns(columns)
        return replace(config, columns=columns)

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ConvertConfig":
        """
        Load configuration from a JSON file.

        Args:
            filepath: Path to configuration file

        Returns:
            ConvertConfig instance

        Raises:
            ConfigurationError: If file cannot be read or parsed
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise ConfigurationError(f"Configuration file not found: {filepath}")

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidConfigurationError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigurationError(f"Failed to read configuration file: {e}")

        if not isinstance(config_dict, dict):
            raise InvalidConfigurationError(
                f"Configuration file must hold a JSON object: {filepath}"
            )
        return cls.from_dict(config_dict)

    @classmethod
    def from_environment(cls) -> "ConvertConfig":
        """
        Create configuration from environment variables.

        Environment variables are prefixed with SPICECSV_, e.g.:
        - SPICECSV_SEPARATOR=;
        - SPICECSV_VERBOSITY=5
        - SPICECSV_FLOAT_SIZE=double

        Returns:
            ConvertConfig instance
        """
        env_mapping: Dict[str, tuple[str, Callable[[str], Any]]] = {
            "SPICECSV_OUTPUT": ("output", str),
            "SPICECSV_VERBOSITY": ("verbosity", int),
            "SPICECSV_PRINT_TITLES": ("print_titles", lambda x: x.lower() == "true"),
            "SPICECSV_MAX_LINES": ("max_lines", int),
            "SPICECSV_SEPARATOR": ("separator", str),
            "SPICECSV_PLACEHOLDER": ("placeholder", str),
            "SPICECSV_ENDIANNESS": ("endianness", str),
            "SPICECSV_FLOAT_SIZE": ("float_size", str),
        }

        values: Dict[str, Any] = {}
        for env_var, (attr, converter) in env_mapping.items():
            value = os.environ.get(env_var)
            if value is not None:
                try:
                    values[attr] = converter(value)
                except ValueError as e:
                    _logger.warning("Failed to set %s from %s: %s", attr, env_var, e)

        return cls(**values)


def verbosity_to_log_level(verbosity: int) -> int:
    """
    Map the numeric debug level onto a logging level.

    Args:
        verbosity: Debug level as given on the command line

    Returns:
        Level for the diagnostic handler
    """
    if verbosity >= Verbosity.FULL_METADATA:
        return logging.DEBUG
    if verbosity >= Verbosity.METADATA:
        return logging.INFO
    if verbosity >= Verbosity.ERRORS:
        return logging.WARNING
    return logging.CRITICAL + 1


def configure_logging(verbosity: int) -> None:
    """Send spicecsv diagnostics to stderr at the level implied by verbosity."""
    logging.basicConfig(
        level=verbosity_to_log_level(verbosity),
        format="%(levelname)s: %(message)s",
        force=True,
    )
