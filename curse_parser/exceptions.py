"""
Custom exceptions for the curse-parser extraction engine.

Error philosophy:
  - ExtractionError subclasses (NotFoundError, MalformedNumberError,
    MalformedURLError) are raised by the typed accessors for a single selector.
  - FieldError  → FAIL HARD: names the record field that could not be read.
    The whole parse is aborted, there is no partial record.
  - PageError   → FAIL HARD: names the page of a multi-page listing that failed.
    Records gathered from earlier pages are discarded with it.
  - UpstreamFetchError / UpstreamParseError → the fetch or markup collaborator failed.
  - CompileError → a selector was rejected by the XPath compiler. Selectors are
    literals today, but this stays a normal exception rather than a crash.

Optional fields never raise for absence; they resolve to a neutral value inside
the accessor layer (see FieldAccessor.read).
"""

from typing import Optional


class CurseParserError(Exception):
    """Base exception for all curse-parser errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to a JSON-safe error response."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details
        }


# --- Single-selector failures raised by the accessor layer ---

class ExtractionError(CurseParserError):
    """Raised when a selector result cannot be turned into a typed value."""
    pass


class NotFoundError(ExtractionError):
    """Raised when a required selector matched nothing."""

    def __init__(self, selector: str, details: Optional[dict] = None):
        super().__init__(f"node not found: {selector}", details)
        self.selector = selector
        self.details.setdefault("selector", selector)


class MalformedNumberError(ExtractionError):
    """Raised when text cannot be parsed as a number."""

    def __init__(self, text: str, reason: str = "not a number", details: Optional[dict] = None):
        super().__init__(f"malformed number {text!r}: {reason}", details)
        self.text = text
        self.details.setdefault("text", text)


class MalformedURLError(ExtractionError):
    """Raised when text cannot be parsed as a URL or resolved against a base."""

    def __init__(self, text: str, reason: str = "invalid URL", details: Optional[dict] = None):
        super().__init__(f"malformed URL {text!r}: {reason}", details)
        self.text = text
        self.details.setdefault("text", text)


# --- Selector compilation ---

class CompileError(CurseParserError):
    """Raised when the XPath compiler rejects a selector."""

    def __init__(self, selector: str, reason: str, details: Optional[dict] = None):
        super().__init__(f"cannot compile selector {selector!r}: {reason}", details)
        self.selector = selector
        self.details.setdefault("selector", selector)


# --- Upstream collaborators ---

class UpstreamFetchError(CurseParserError):
    """Raised when a page could not be fetched."""

    def __init__(
        self,
        message: str,
        url: str,
        status_code: Optional[int] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code  # None for connection-level failures
        self.details.setdefault("url", url)
        if status_code is not None:
            self.details.setdefault("status_code", status_code)


class UpstreamParseError(CurseParserError):
    """Raised when fetched bytes could not be parsed into a document tree."""

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, details)
        self.url = url
        if url:
            self.details.setdefault("url", url)


# --- Aggregated failures surfaced to callers of the page parsers ---

class FieldError(CurseParserError):
    """
    Raised when a record field could not be read.

    Wraps the underlying ExtractionError so the caller can tell which field
    failed and why.
    """

    def __init__(self, field: str, cause: CurseParserError, details: Optional[dict] = None):
        super().__init__(f"error resolving value '{field}': {cause.message}", details)
        self.field = field
        self.cause = cause
        self.details.setdefault("field", field)
        self.details.setdefault("cause", cause.to_response())


class PageError(CurseParserError):
    """
    Raised when one page of a multi-page listing failed.

    Carries the page index and URL. The accumulated records of the walk are
    dropped with it.
    """

    def __init__(self, page: int, url: str, cause: Exception, details: Optional[dict] = None):
        reason = cause.message if isinstance(cause, CurseParserError) else str(cause)
        super().__init__(f"error processing listing page {page} ({url}): {reason}", details)
        self.page = page
        self.url = url
        self.cause = cause
        self.details.setdefault("page", page)
        self.details.setdefault("url", url)
        if isinstance(cause, CurseParserError):
            self.details.setdefault("cause", cause.to_response())
        else:
            self.details.setdefault("cause", {"error": type(cause).__name__, "message": str(cause)})
