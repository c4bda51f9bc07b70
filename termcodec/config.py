"""Configuration for termcodec.

A ``CodecConfig`` selects the failure policy of a codec ("fail fast" or
"substitute and continue") and the log level used by the command line.
It can be built directly, from environment variables, or from a YAML file::

    fail_on_error: true
    log_level: DEBUG
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

ENV_FAIL_ON_ERROR = "TERMCODEC_FAIL_ON_ERROR"
ENV_LOG_LEVEL = "TERMCODEC_LOG_LEVEL"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class CodecConfig:
    """Failure policy and logging configuration."""

    fail_on_error: bool = False  # Raise on the first error instead of substituting U+FFFD
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {self.log_level}")
        object.__setattr__(self, "log_level", level)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CodecConfig":
        """Build a config from ``TERMCODEC_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``

        Returns:
            CodecConfig with defaults for unset variables.
        """
        if environ is None:
            environ = os.environ
        values: Dict[str, Any] = {}
        if ENV_FAIL_ON_ERROR in environ:
            values["fail_on_error"] = environ[ENV_FAIL_ON_ERROR].strip().lower() in _TRUE_VALUES
        if ENV_LOG_LEVEL in environ:
            values["log_level"] = environ[ENV_LOG_LEVEL].strip()
        return cls(**values)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "CodecConfig":
        """Load a config from a YAML mapping.

        Args:
            path: YAML file with any of the keys ``fail_on_error`` and ``log_level``

        Returns:
            CodecConfig with defaults for missing keys.

        Raises:
            FileNotFoundError: If ``path`` does not exist.
            ValueError: If the document is not a mapping or has unknown keys.
        """
        with Path(path).open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        non_string = [key for key in data if not isinstance(key, str)]
        if non_string:
            raise ValueError(f"{path}: keys must be strings, got {non_string!r}")
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"{path}: unknown keys {unknown}. Valid: {sorted(known)}")
        if "fail_on_error" in data and not isinstance(data["fail_on_error"], bool):
            raise ValueError(f"{path}: fail_on_error must be a boolean")
        return cls(**data)
