"""Scanner configuration."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

INFER_UNANNOTATED_TYPES_ENV = "TYPED_SCHEMA_INFER_UNANNOTATED_TYPES"
MAX_DEPTH_ENV = "TYPED_SCHEMA_MAX_DEPTH"

DEFAULT_MAX_DEPTH = 64

_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


class ConfigurationError(ValueError):
    """Raised when scanner settings are invalid."""


@dataclass(frozen=True)
class ScannerConfig:
    """Settings consulted during one scan."""

    # Infer schemas for fields carrying no @schema metadata
    infer_unannotated_types: bool = True
    # Ancestor-chain depth at which traversal stops descending
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self) -> None:
        if self.max_depth < 1:
            raise ConfigurationError(f"max_depth must be positive, got {self.max_depth}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ScannerConfig:
        """Build a config from environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ

        infer = True
        raw_infer = env.get(INFER_UNANNOTATED_TYPES_ENV)
        if raw_infer is not None:
            infer = _parse_bool(INFER_UNANNOTATED_TYPES_ENV, raw_infer)

        max_depth = DEFAULT_MAX_DEPTH
        raw_depth = env.get(MAX_DEPTH_ENV)
        if raw_depth is not None:
            try:
                max_depth = int(raw_depth.strip())
            except ValueError as exc:
                raise ConfigurationError(f"{MAX_DEPTH_ENV} must be an integer, got {raw_depth!r}") from exc

        return cls(infer_unannotated_types=infer, max_depth=max_depth)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {raw!r}")
