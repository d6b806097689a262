"""
In-memory cache of compiled XPath selectors.

Page parsers pass the same literal selectors on every call, often once per
row of a listing. Compiling each selector once and reusing the compiled
lxml.etree.XPath object avoids re-parsing the expression every time.

Entries are keyed by the exact selector text and are never evicted. The cache
is an ordinary object: a process normally shares one (see get_default_cache),
but tests and isolated callers can create their own.
"""

import threading
from typing import Callable, Optional

from lxml import etree

from .exceptions import CompileError
from .logger import get_module_logger

logger = get_module_logger("query_cache")

# The compiler receives the selector text and returns a callable compiled query
Compiler = Callable[[str], Callable]


def compile_xpath(selector: str) -> etree.XPath:
    """Compile a selector with lxml, turning syntax errors into CompileError."""
    try:
        return etree.XPath(selector)
    except etree.XPathError as e:
        raise CompileError(selector, str(e)) from e


class QueryCache:
    """
    Thread-safe memo of compiled queries.

    Two threads missing on the same selector at once may both compile it.
    Compiled queries for the same text are equivalent, so whichever result is
    stored first is kept and returned to both.
    """

    def __init__(self, compiler: Optional[Compiler] = None):
        """
        Initialize the cache.

        Args:
            compiler: Callable turning selector text into a compiled query.
                      Defaults to lxml's XPath compiler.
        """
        self._compiler = compiler or compile_xpath
        self._queries: dict[str, Callable] = {}
        self._lock = threading.Lock()

    def get_or_compile(self, selector: str) -> Callable:
        """
        Return the compiled query for selector, compiling it on first use.

        Raises:
            CompileError: if the compiler rejects the selector
        """
        with self._lock:
            query = self._queries.get(selector)
        if query is not None:
            return query

        logger.debug(f"Compiling selector: {selector}")
        compiled = self._compiler(selector)

        with self._lock:
            return self._queries.setdefault(selector, compiled)

    def insert(self, selector: str, compiled: Callable) -> None:
        """
        Preload a compiled query for selector.

        UNSAFE: the compiled query is trusted as-is. Nothing checks that it
        actually corresponds to the selector text, and it replaces any entry
        already stored under that text.
        """
        with self._lock:
            self._queries[selector] = compiled

    def clear(self) -> int:
        """Drop every compiled query. Returns the number of entries removed."""
        with self._lock:
            count = len(self._queries)
            self._queries.clear()
        logger.debug(f"Cleared {count} compiled selectors")
        return count

    def __contains__(self, selector: str) -> bool:
        with self._lock:
            return selector in self._queries

    def __len__(self) -> int:
        with self._lock:
            return len(self._queries)


# Process-wide cache used when callers don't supply their own.
_default_cache: Optional[QueryCache] = None
_default_cache_lock = threading.Lock()


def get_default_cache() -> QueryCache:
    """Get or create the default cache instance."""
    global _default_cache
    with _default_cache_lock:
        if _default_cache is None:
            _default_cache = QueryCache()
        return _default_cache
