"""Identifier string grammar.

Identifiers have the form ``prefix/suffix`` or ``prefix/suffix.N``.
This module decomposes and composes them without side effects so
version-aware logic never pattern-matches raw strings itself.
"""

from __future__ import annotations

from core.constants import HANDLE_SEPARATOR, VERSION_SEPARATOR
from core.errors import IdentifierError
from core.types import ParsedIdentifier

_BARE_SCHEMES = ("info:hdl/", "hdl:")


def parse_identifier(identifier: str) -> ParsedIdentifier:
    """Split an identifier into canonical form and optional version.

    A version is recognized only when the text after the last ``/``
    ends in ``.`` followed by digits without a leading zero. The version
    is taken from the final ``.`` so ``12/3.4.5`` parses as canonical
    ``12/3.4`` and version 5, while ``12/3.01`` has no version.

    Args:
        identifier: Raw identifier string.

    Returns:
        Parsed identifier value.
    """
    head, separator, tail = identifier.rpartition(HANDLE_SEPARATOR)
    if not separator:
        return ParsedIdentifier(canonical=identifier)
    stem, dot, digits = tail.rpartition(VERSION_SEPARATOR)
    if not dot or not stem or not _is_version_number(digits):
        return ParsedIdentifier(canonical=identifier)
    return ParsedIdentifier(canonical=f"{head}{HANDLE_SEPARATOR}{stem}", version=int(digits))


def canonical_of(identifier: str) -> str:
    """Return the identifier with any version suffix removed."""
    return parse_identifier(identifier).canonical


def compose_identifier(canonical: str, number: int) -> str:
    """Build the versioned identifier ``canonical.N``.

    Args:
        canonical: Identifier without version suffix.
        number: Positive version number.

    Returns:
        Versioned identifier string.

    Raises:
        IdentifierError: If the number is not positive or the canonical
            already carries a version suffix.
    """
    if number < 1:
        raise IdentifierError(
            f"Cannot build versioned identifier for '{canonical}' with version {number}. "
            "Version numbers start at 1."
        )
    if parse_identifier(canonical).is_versioned:
        raise IdentifierError(
            f"Identifier '{canonical}' already carries a version suffix. "
            "Strip it with canonical_of before composing."
        )
    return f"{canonical}{VERSION_SEPARATOR}{number}"


def extract_handle_from_url(url: str) -> str | None:
    """Take the last two path segments of a URL as a handle.

    Args:
        url: URL or path-shaped string.

    Returns:
        ``segment/segment`` string, or None when the shape does not fit.
    """
    if HANDLE_SEPARATOR not in url:
        return None
    segments = url.rstrip(HANDLE_SEPARATOR).split(HANDLE_SEPARATOR)
    if len(segments) < 2 or not segments[-2] or not segments[-1]:
        return None
    return f"{segments[-2]}{HANDLE_SEPARATOR}{segments[-1]}"


def normalize_identifier(identifier: str, canonical_url_prefix: str) -> str:
    """Strip a scheme or resolver URL so only the bare handle remains.

    Args:
        identifier: Identifier as supplied by a caller.
        canonical_url_prefix: Configured resolver URL prefix.

    Returns:
        Bare ``prefix/suffix[.N]`` handle string.
    """
    text = identifier.strip()
    if canonical_url_prefix and text.startswith(canonical_url_prefix):
        return text[len(canonical_url_prefix):]
    for scheme in _BARE_SCHEMES:
        if text.startswith(scheme):
            return text[len(scheme):]
    if "://" in text:
        return extract_handle_from_url(text) or text
    return text


def canonical_url(canonical_url_prefix: str, identifier: str) -> str:
    """Return the resolver URL for an identifier."""
    return f"{canonical_url_prefix}{identifier}"


def _is_version_number(text: str) -> bool:
    # parse_identifier and compose_identifier must round-trip
    if not text or not text.isascii() or not text.isdigit():
        return False
    return not text.startswith("0")
