"""
URL normalization and resolution for extracted link strings.

Pages link to assets as absolute URLs, schemeless URLs ("//media.example.com/x.png")
and relative paths ("/members/alice"). Everything handed back to callers is an
absolute URL string; a missing scheme defaults to https.
"""

import re
from urllib.parse import SplitResult, unquote_plus, urlencode, urljoin, urlsplit, urlunsplit

from .exceptions import MalformedURLError

DEFAULT_SCHEME = "https"

# Percent signs must start a two-digit hex escape
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def _split(text: str) -> SplitResult:
    """Split a URL string, rejecting what a strict URL parser would reject."""
    if _CONTROL_CHARS.search(text):
        raise MalformedURLError(text, "contains control characters")
    if _BAD_ESCAPE.search(text):
        raise MalformedURLError(text, "invalid percent-escape")
    try:
        parts = urlsplit(text)
        # .port validates the port component lazily
        parts.port
    except ValueError as e:
        raise MalformedURLError(text, str(e)) from e
    if " " in parts.netloc:
        raise MalformedURLError(text, "invalid host")
    return parts


def _with_default_scheme(parts: SplitResult) -> str:
    if not parts.scheme:
        parts = parts._replace(scheme=DEFAULT_SCHEME)
    return urlunsplit(parts)


def normalize(text: str) -> str:
    """
    Parse an absolute or schemeless URL and return it as an absolute URL string.

    Raises:
        MalformedURLError: if text cannot be parsed as a URL
    """
    return _with_default_scheme(_split(text.strip()))


def resolve(text: str, base: str) -> str:
    """
    Resolve a URL reference against a base URL (RFC 3986 reference resolution).

    Absolute references come back unchanged apart from scheme defaulting.

    Raises:
        MalformedURLError: if text or base cannot be parsed
    """
    text = text.strip()
    base = base.strip()
    _split(text)
    _split(base)
    try:
        joined = urljoin(base, text)
    except ValueError as e:
        raise MalformedURLError(text, f"cannot resolve against {base!r}: {e}") from e
    return _with_default_scheme(_split(joined))


def page_url(listing_url: str, page: int, param: str = "page") -> str:
    """Return listing_url with the page query parameter set to page."""
    parts = _split(listing_url.strip())
    # Other parameters are kept byte for byte, encoding included
    segments = [
        segment for segment in parts.query.split("&")
        if segment and unquote_plus(segment.split("=", 1)[0]) != param
    ]
    segments.append(urlencode({param: page}))
    return _with_default_scheme(parts._replace(query="&".join(segments), fragment=""))
