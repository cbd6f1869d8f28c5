from __future__ import annotations

"""
File Engine Configuration.

Defines the immutable configuration consumed by the file engine and the
helpers that build it, either from the default location or from a plain
mapping (e.g. a parsed JSON/TOML section). Mapping input is validated and
normalized; in non-strict mode invalid values fall back to defaults with
a warning.
"""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple, Union

from filelogger.domain import constants as const
from filelogger.domain.levels import LogLevel
from filelogger.infra.fs import get_default_log_dir, normalize_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileLoggerConfiguration:
    """
    Immutable settings for one file engine instance.

    Attributes:
        log_directory: Directory where log files live.
        file_name_prefix: Prefix used to create and discover log files.
        maximum_file_size: Size in bytes that triggers a rotation.
        maximum_file_age: Age in seconds that triggers a rotation
                          (never used for retention).
        maximum_number_of_log_files: Retention cap on matching files.
        minimum_log_level: Messages below this level are dropped up front.
        should_use_multi_process_locking: Wrap each write in an advisory lock.
    """
    log_directory: Path
    file_name_prefix: str = const.DEFAULT_FILE_NAME_PREFIX
    maximum_file_size: int = const.DEFAULT_MAXIMUM_FILE_SIZE
    maximum_file_age: float = const.DEFAULT_MAXIMUM_FILE_AGE
    maximum_number_of_log_files: int = const.DEFAULT_MAXIMUM_NUMBER_OF_LOG_FILES
    minimum_log_level: LogLevel = LogLevel.DEBUG
    should_use_multi_process_locking: bool = True

    def __post_init__(self) -> None:
        # Frozen dataclass: coerce through object.__setattr__
        object.__setattr__(self, "log_directory", Path(self.log_directory))
        object.__setattr__(self, "minimum_log_level", LogLevel(self.minimum_log_level))

        if not self.file_name_prefix:
            raise ValueError("file_name_prefix must not be empty")
        if self.maximum_file_size <= 0:
            raise ValueError("maximum_file_size must be positive")
        if self.maximum_file_age < 0:
            raise ValueError("maximum_file_age must not be negative")
        if self.maximum_number_of_log_files < 1:
            raise ValueError("maximum_number_of_log_files must be at least 1")

    @classmethod
    def default(cls) -> FileLoggerConfiguration:
        """
        Build the configuration pointing at the per-user default log folder.

        Returns:
            FileLoggerConfiguration: Defaults with '<user data dir>/Logs'.
        """
        return cls(log_directory=Path(get_default_log_dir()))

    @classmethod
    def from_dict(
            cls,
            data: Any,
            *,
            strict: bool = False,
    ) -> Tuple[FileLoggerConfiguration, List[str]]:
        """
        Validate and normalize a mapping into a configuration.

        Unknown keys are ignored with a warning. Missing keys take their
        default values.

        strict=False:
          - invalid values are replaced by defaults and reported in warnings.
          - a non-mapping input yields the default configuration.

        strict=True:
          - type or value errors raise TypeError/ValueError.

        Args:
            data: Raw mapping (usually decoded from a settings file).
            strict: Raise instead of correcting invalid input.

        Returns:
            Tuple[FileLoggerConfiguration, List[str]]: (configuration, warnings).
        """
        warnings: List[str] = []
        defaults = cls.default()

        if not isinstance(data, Mapping):
            msg = f"Invalid configuration: expected a mapping, got {type(data).__name__}."
            if strict:
                raise TypeError(msg)
            warnings.append(msg + " Using defaults.")
            logger.warning(msg)
            return defaults, warnings

        known = {f.name for f in fields(cls)}
        for key in data:
            if key not in known:
                warnings.append(f"Unknown configuration key ignored: {key}")

        values: Dict[str, Any] = {
            "log_directory": normalize_path(
                data.get("log_directory"), str(defaults.log_directory)
            ),
            "file_name_prefix": _as_str(
                data.get("file_name_prefix"), defaults.file_name_prefix,
                "file_name_prefix", warnings, strict,
            ),
            "maximum_file_size": _as_positive_number(
                data.get("maximum_file_size"), defaults.maximum_file_size,
                "maximum_file_size", warnings, strict, int,
            ),
            "maximum_file_age": _as_positive_number(
                data.get("maximum_file_age"), defaults.maximum_file_age,
                "maximum_file_age", warnings, strict, float, allow_zero=True,
            ),
            "maximum_number_of_log_files": _as_positive_number(
                data.get("maximum_number_of_log_files"), defaults.maximum_number_of_log_files,
                "maximum_number_of_log_files", warnings, strict, int,
            ),
            "minimum_log_level": _as_level(
                data.get("minimum_log_level"), defaults.minimum_log_level, warnings, strict,
            ),
            "should_use_multi_process_locking": _as_bool(
                data.get("should_use_multi_process_locking"),
                defaults.should_use_multi_process_locking,
                "should_use_multi_process_locking", warnings, strict,
            ),
        }

        for w in warnings:
            logger.warning(w)

        return cls(**values), warnings


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _as_str(value: Any, default: str, key: str, warnings: List[str], strict: bool) -> str:
    if value is None:
        return default
    if isinstance(value, str) and value.strip():
        return value.strip()
    msg = f"'{key}' must be a non-empty string, got {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(msg + " Using default.")
    return default


def _as_positive_number(
        value: Any,
        default: Union[int, float],
        key: str,
        warnings: List[str],
        strict: bool,
        kind: type,
        allow_zero: bool = False,
) -> Any:
    if value is None:
        return default
    # bool is an int subclass; reject it explicitly
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if value > 0 or (allow_zero and value == 0):
            return kind(value)
    qualifier = "non-negative" if allow_zero else "positive"
    msg = f"'{key}' must be a {qualifier} number, got {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(msg + " Using default.")
    return default


def _as_bool(value: Any, default: bool, key: str, warnings: List[str], strict: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    msg = f"'{key}' must be a boolean, got {value!r}."
    if strict:
        raise TypeError(msg)
    warnings.append(msg + " Using default.")
    return default


def _as_level(value: Any, default: LogLevel, warnings: List[str], strict: bool) -> LogLevel:
    if value is None:
        return default
    try:
        if isinstance(value, str):
            return LogLevel.parse(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return LogLevel(value)
    except ValueError:
        pass
    msg = f"'minimum_log_level' is not a valid level: {value!r}."
    if strict:
        raise ValueError(msg)
    warnings.append(msg + " Using default.")
    return default
