"""
Turns fetched HTML bytes into an lxml document tree.

Decoding follows what a browser would do: honour the charset declared in a
<meta> tag (with WHATWG label remapping), and only guess when nothing usable
is declared. The decoded text is scrubbed of characters libxml2 rejects
before parsing.
"""

import re
from typing import Optional

from bs4 import UnicodeDammit
from lxml import etree, html as lxml_html

from .exceptions import UpstreamParseError
from .logger import get_module_logger

logger = get_module_logger("document")

# WHATWG encoding spec: browsers silently remap these charsets.
# https://encoding.spec.whatwg.org/#names-and-labels
WHATWG_CHARSET_MAP = {
    'iso-8859-1': 'windows-1252',
    'iso8859-1': 'windows-1252',
    'iso88591': 'windows-1252',
    'latin-1': 'windows-1252',
    'latin1': 'windows-1252',
    'us-ascii': 'windows-1252',
    'ascii': 'windows-1252',
    'iso-8859-9': 'windows-1254',
    'iso-8859-11': 'windows-874',
}

# Tried in order when the page declares nothing usable
FALLBACK_ENCODINGS = ["utf-8", "windows-1252"]

# Control characters other than tab, newline and carriage return
_CONTROL_CHARS = ''.join(chr(c) for c in range(32) if c not in (9, 10, 13))
_CONTROL_TABLE = str.maketrans('', '', _CONTROL_CHARS)

# lxml refuses unicode input that carries an XML encoding declaration
_XML_DECLARATION = re.compile(r'^\s*<\?xml[^>]*\?>', re.IGNORECASE)


def detect_charset_from_bytes(raw_bytes: bytes) -> Optional[str]:
    """
    Detect the declared charset from the first 2048 bytes.

    Looks for <meta charset=...> and the legacy
    <meta http-equiv="Content-Type" content="...; charset=...">.

    Returns the browser-equivalent charset, or None if nothing is declared.
    """
    # Charset declarations must appear within the first 1024 bytes; 2048 for slack
    head_str = raw_bytes[:2048].decode('ascii', errors='ignore')

    charset = None

    m = re.search(r'<meta[^>]+charset=["\']?\s*([^\s"\';>]+)', head_str, re.IGNORECASE)
    if m:
        charset = m.group(1).strip().lower()

    if not charset:
        m = re.search(
            r'<meta[^>]+content=["\'][^"\']*charset=([^\s"\';>]+)',
            head_str, re.IGNORECASE
        )
        if m:
            charset = m.group(1).strip().lower()

    if not charset:
        return None

    return WHATWG_CHARSET_MAP.get(charset, charset)


def decode_html(raw_bytes: bytes, url: Optional[str] = None) -> str:
    """Decode HTML bytes using the declared charset, falling back to detection."""
    charset = detect_charset_from_bytes(raw_bytes)
    if charset:
        try:
            return raw_bytes.decode(charset, errors='replace')
        except LookupError:
            logger.warning(f"Unknown declared charset '{charset}' for {url or 'document'}, detecting")

    dammit = UnicodeDammit(raw_bytes, FALLBACK_ENCODINGS, is_html=True)
    if dammit.unicode_markup is None:
        raise UpstreamParseError("could not determine document encoding", url=url)
    logger.debug(f"Decoded {url or 'document'} as {dammit.original_encoding}")
    return dammit.unicode_markup


def load_document(raw: bytes, url: Optional[str] = None) -> etree._Element:
    """
    Parse HTML bytes into the root element of an lxml tree.

    Raises:
        UpstreamParseError: if the bytes are empty or cannot be parsed
    """
    text = decode_html(raw, url) if isinstance(raw, bytes) else raw
    text = _XML_DECLARATION.sub('', text).translate(_CONTROL_TABLE)

    if not text.strip():
        raise UpstreamParseError("document is empty", url=url)

    try:
        return lxml_html.document_fromstring(text)
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        raise UpstreamParseError(f"error parsing html: {e}", url=url) from e
