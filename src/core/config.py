"""Runtime configuration model for verhandle.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_CANONICAL_URL_PREFIX,
    DEFAULT_DATA_ROOT,
    DEFAULT_HANDLE_PREFIX,
    DEFAULT_SUPPORTED_SCHEMES,
    HANDLE_SEPARATOR,
)
from core.errors import HandleConfigError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class HandleConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory for repository state.
        prefix: Handle naming authority used for freshly minted handles.
        canonical_url_prefix: URL prefix used to build descriptive URIs.
        supported_schemes: Identifier prefixes accepted by ``supports``.
    """

    data_root: Path
    prefix: str = DEFAULT_HANDLE_PREFIX
    canonical_url_prefix: str = DEFAULT_CANONICAL_URL_PREFIX
    supported_schemes: tuple[str, ...] = DEFAULT_SUPPORTED_SCHEMES

    @classmethod
    def from_env(cls) -> "HandleConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            HandleConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv("VERHANDLE_DATA_ROOT", str(DEFAULT_DATA_ROOT))
        prefix = _parse_prefix(os.getenv("VERHANDLE_PREFIX"))
        canonical_url_prefix = os.getenv("VERHANDLE_CANONICAL_PREFIX") or DEFAULT_CANONICAL_URL_PREFIX
        supported_schemes = _parse_schemes(os.getenv("VERHANDLE_SUPPORTED_SCHEMES"))
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            prefix=prefix,
            canonical_url_prefix=canonical_url_prefix,
            supported_schemes=supported_schemes,
        )


def _parse_prefix(raw_value: str | None) -> str:
    """Parse the handle prefix environment value.

    Args:
        raw_value: Raw string from environment, if set.

    Returns:
        Validated handle prefix.

    Raises:
        HandleConfigError: If value is blank or contains a separator.
    """
    if raw_value is None:
        _LOGGER.error("handle_prefix_not_configured", prefix=DEFAULT_HANDLE_PREFIX)
        return DEFAULT_HANDLE_PREFIX
    prefix = raw_value.strip()
    if not prefix or HANDLE_SEPARATOR in prefix:
        raise HandleConfigError(
            "Invalid VERHANDLE_PREFIX value: "
            f"expected a naming authority without '/', got '{raw_value}'. "
            "Set VERHANDLE_PREFIX to a value such as 123456789."
        )
    return prefix


def _parse_schemes(raw_value: str | None) -> tuple[str, ...]:
    """Parse the comma-separated supported scheme list.

    Args:
        raw_value: Raw string from environment, if set.

    Returns:
        Tuple of non-empty scheme prefixes.

    Raises:
        HandleConfigError: If the value contains no schemes.
    """
    if raw_value is None:
        return DEFAULT_SUPPORTED_SCHEMES
    schemes = tuple(part.strip() for part in raw_value.split(",") if part.strip())
    if not schemes:
        raise HandleConfigError(
            "Invalid VERHANDLE_SUPPORTED_SCHEMES value: no schemes listed. "
            "Provide a comma-separated list such as 'hdl,info:hdl,http://'."
        )
    return schemes
