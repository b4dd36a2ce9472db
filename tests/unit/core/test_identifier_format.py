"""Unit tests for identifier parsing and composition."""

from __future__ import annotations

import pytest

from core.errors import IdentifierError
from core.identifier_format import (
    canonical_of,
    canonical_url,
    compose_identifier,
    extract_handle_from_url,
    normalize_identifier,
    parse_identifier,
)
from core.types import ParsedIdentifier


def test_parse_identifier_splits_version_suffix() -> None:
    """Versioned handles should decompose into canonical and number."""
    assert parse_identifier("123456789/42.3") == ParsedIdentifier("123456789/42", 3)


def test_parse_identifier_without_suffix_has_no_version() -> None:
    """Plain handles should parse to themselves."""
    assert parse_identifier("123456789/42") == ParsedIdentifier("123456789/42", None)


def test_parse_identifier_uses_final_dot_only() -> None:
    """Multi-dot suffixes should split at the last dot only."""
    parsed = parse_identifier("12/3.4.5")

    assert (parsed.canonical, parsed.version) == ("12/3.4", 5)


def test_parse_identifier_ignores_dots_before_last_slash() -> None:
    """A dotted prefix is not a version suffix."""
    assert parse_identifier("10.1234/abc") == ParsedIdentifier("10.1234/abc", None)


@pytest.mark.parametrize("identifier", ["12.5", "1/.5", "1/2.0", "1/2.01", "1/2.x", "1/2.", "1/2.٣"])
def test_parse_identifier_rejects_non_version_suffixes(identifier: str) -> None:
    """Only positive ASCII digits after a dot in the last segment count."""
    assert parse_identifier(identifier).version is None


def test_compose_identifier_round_trips_through_parse() -> None:
    """Parsing a composed identifier should return its parts."""
    for number in (1, 2, 17):
        composed = compose_identifier("123456789/42", number)
        assert parse_identifier(composed) == ParsedIdentifier("123456789/42", number)


def test_parse_identifier_keeps_zero_padded_suffix_in_canonical() -> None:
    """Zero-padded digits are not a version, so no information is lost."""
    parsed = parse_identifier("123456789/42.01")

    assert parsed == ParsedIdentifier("123456789/42.01", None)
    assert canonical_of("123456789/42.01") == "123456789/42.01"


def test_compose_identifier_rejects_zero() -> None:
    """Version numbers start at one."""
    with pytest.raises(IdentifierError):
        compose_identifier("123456789/42", 0)


def test_compose_identifier_rejects_versioned_canonical() -> None:
    """Composing onto an already versioned handle is refused."""
    with pytest.raises(IdentifierError):
        compose_identifier("123456789/42.1", 2)


def test_canonical_of_strips_version() -> None:
    """Canonical form drops the version suffix."""
    assert canonical_of("123456789/42.7") == "123456789/42"


def test_extract_handle_from_url_takes_last_two_segments() -> None:
    """Resolver URLs should yield prefix/suffix."""
    assert extract_handle_from_url("http://hdl.handle.net/123456789/42") == "123456789/42"


@pytest.mark.parametrize("url", ["plain", "a/", "/b"])
def test_extract_handle_from_url_rejects_short_paths(url: str) -> None:
    """Strings without two non-empty segments are not handle-shaped."""
    assert extract_handle_from_url(url) is None


def test_normalize_identifier_strips_schemes() -> None:
    """Known schemes and the resolver prefix should be removed."""
    prefix = "http://hdl.handle.net/"

    normalized = [
        normalize_identifier("hdl:123456789/42", prefix),
        normalize_identifier("info:hdl/123456789/42", prefix),
        normalize_identifier("http://hdl.handle.net/123456789/42", prefix),
        normalize_identifier("https://repo.example.org/handle/123456789/42", prefix),
        normalize_identifier(" 123456789/42 ", prefix),
    ]

    assert set(normalized) == {"123456789/42"}


def test_canonical_url_prepends_prefix() -> None:
    """Resolver URLs are prefix plus handle."""
    assert canonical_url("http://hdl.handle.net/", "1/2") == "http://hdl.handle.net/1/2"
