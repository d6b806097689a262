"""
Tests for URL normalization and resolution.
"""

from urllib.parse import urlsplit

import pytest

from curse_parser.exceptions import MalformedURLError
from curse_parser.urls import normalize, page_url, resolve

BASE = "https://mods.example.com/mc-mods/minecraft/238424-taam"


def test_normalize_defaults_scheme_to_https():
    url = normalize("//example.com/x")
    assert urlsplit(url).scheme == "https"
    assert url == "https://example.com/x"


def test_normalize_keeps_existing_scheme():
    assert urlsplit(normalize("http://example.com/x")).scheme == "http"
    assert normalize("  http://example.com/x\n") == "http://example.com/x"


@pytest.mark.parametrize("text", [
    "http://[::1",              # unterminated IPv6 host
    "http://example.com:abc/",  # non-numeric port
    "https://example.com/%zz",  # bad percent-escape
    "https://exa mple.com/",    # space in host
    "https://example.com/\x01",
])
def test_normalize_rejects_malformed(text):
    with pytest.raises(MalformedURLError):
        normalize(text)


def test_resolve_absolute_path():
    assert resolve("/members/alice", BASE) == "https://mods.example.com/members/alice"


def test_resolve_relative_path():
    assert resolve("files", BASE) == "https://mods.example.com/mc-mods/minecraft/files"
    assert resolve("../wow", BASE) == "https://mods.example.com/mc-mods/wow"


def test_resolve_schemeless_reference():
    assert resolve("//media.example.com/a.png", BASE) == "https://media.example.com/a.png"
    assert resolve("//media.example.com/a.png", "http://mods.example.com/") == \
        "http://media.example.com/a.png"


def test_resolve_leaves_absolute_references_alone():
    assert resolve("https://other.example.com/y", BASE) == "https://other.example.com/y"
    assert resolve("http://other.example.com/y", BASE) == "http://other.example.com/y"


def test_resolve_against_schemeless_base_defaults_scheme():
    assert resolve("/x", "//mods.example.com/a") == "https://mods.example.com/x"


def test_resolve_rejects_malformed_text_and_base():
    with pytest.raises(MalformedURLError):
        resolve("http://[::1", BASE)
    with pytest.raises(MalformedURLError):
        resolve("/x", "http://[::1")


def test_page_url_sets_page_parameter():
    listing = "https://minecraft.example.com/projects/taam/files"
    assert page_url(listing, 2) == "https://minecraft.example.com/projects/taam/files?page=2"
    assert page_url(listing + "?filter-game-version=1.12&page=1", 3) == \
        "https://minecraft.example.com/projects/taam/files?filter-game-version=1.12&page=3"


def test_page_url_keeps_other_parameters_verbatim():
    listing = "https://minecraft.example.com/projects/taam/files"
    assert page_url(listing + "?filter=a%20b&flag", 2) == listing + "?filter=a%20b&flag&page=2"
    assert page_url(listing + "?page=1&sort=-date#top", 4) == listing + "?sort=-date&page=4"
    assert page_url(listing + "?p=1", 2, param="p") == listing + "?p=2"
