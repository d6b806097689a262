"""
Typed field accessors over lxml document trees.

Every read is "apply this selector to this context node": the selector is
compiled through the QueryCache, evaluated against the context, and the
result is converted to the requested type.

Presence contract:
  string, node         → (value, found) tuples, never raise for absence
  iter_nodes,
  iter_strings         → empty iterator when nothing matches
  url, url_with_base,
  unsigned_int,
  signed_int,
  unix_timestamp       → raise NotFoundError / MalformedNumberError / MalformedURLError

read() and read_all() apply a FieldSpec's required/optional trait uniformly,
so page modules describe fields instead of repeating error branches.
"""

from datetime import datetime
from typing import Any, Iterable, Iterator, Optional

from lxml import etree

from . import numbers, urls
from .exceptions import CompileError, ExtractionError, FieldError, NotFoundError
from .logger import get_module_logger
from .query_cache import QueryCache, get_default_cache
from .schemas import FieldKind, FieldSpec

logger = get_module_logger("accessor")

# XPath string-value of a node: concatenated descendant text
_STRING_VALUE = etree.XPath("string()")


def _is_element(item) -> bool:
    # Comments and processing instructions subclass _Element too
    return isinstance(item, etree._Element) and isinstance(item.tag, str)


def _string_value(item) -> str:
    if isinstance(item, etree._Element):
        return _STRING_VALUE(item)
    if isinstance(item, bool):
        return "true" if item else "false"
    if isinstance(item, float) and item.is_integer():
        return str(int(item))
    return str(item)


class FieldAccessor:
    """Typed, presence-checked reads of selector results."""

    def __init__(self, cache: Optional[QueryCache] = None):
        self.cache = cache if cache is not None else get_default_cache()

    def _evaluate(self, context, selector: str) -> list:
        """Evaluate selector against context, always returning a list."""
        query = self.cache.get_or_compile(selector)
        try:
            result = query(context)
        except etree.XPathEvalError as e:
            # Undefined variables and unknown functions only surface here
            raise CompileError(selector, str(e)) from e
        if isinstance(result, list):
            return result
        # Scalar results from XPath functions (string(), count(), ...)
        if isinstance(result, str) and result == "":
            return []
        return [result]

    # --- Presence-returning reads ---

    def string(self, context, selector: str) -> tuple[str, bool]:
        """Trimmed string value of the first match, and whether anything matched."""
        result = self._evaluate(context, selector)
        if not result:
            return "", False
        return _string_value(result[0]).strip(), True

    def node(self, context, selector: str) -> tuple[Optional[etree._Element], bool]:
        """First matching element, and whether one was found."""
        for item in self._evaluate(context, selector):
            if _is_element(item):
                return item, True
        return None, False

    def iter_nodes(self, context, selector: str) -> Iterator[etree._Element]:
        """Iterate the matching elements in document order."""
        return (item for item in self._evaluate(context, selector) if _is_element(item))

    def iter_strings(self, context, selector: str) -> Iterator[str]:
        """Trimmed string value of every match: elements, attributes and text nodes alike."""
        return (_string_value(item).strip() for item in self._evaluate(context, selector))

    # --- Raising reads ---

    def required_string(self, context, selector: str) -> str:
        value, found = self.string(context, selector)
        if not found:
            raise NotFoundError(selector)
        return value

    def url(self, context, selector: str) -> str:
        """Absolute URL from the first match; schemeless URLs default to https."""
        return urls.normalize(self.required_string(context, selector))

    def url_with_base(self, context, selector: str, base: str) -> str:
        """URL from the first match, resolved against base."""
        return urls.resolve(self.required_string(context, selector), base)

    def unsigned_int(self, context, selector: str) -> int:
        return numbers.parse_unsigned(self.required_string(context, selector))

    def signed_int(self, context, selector: str) -> int:
        return numbers.parse_signed(self.required_string(context, selector))

    def unix_timestamp(self, context, selector: str) -> datetime:
        """
        UTC datetime from Unix epoch seconds.

        Errors always propagate; no epoch or "now" value is substituted.
        """
        return numbers.parse_unix_timestamp(self.required_string(context, selector))

    # --- Declarative reads ---

    def read(self, context, spec: FieldSpec, base: Optional[str] = None) -> Any:
        """
        Read one field according to its FieldSpec.

        Raises:
            FieldError: required field absent, any field present but malformed,
                        or a selector that cannot be evaluated
        """
        try:
            if spec.kind == FieldKind.PRESENCE:
                _, found = self.string(context, spec.selector)
                return found

            text = self.required_string(context, spec.selector)
            if spec.transform is not None:
                text = spec.transform(text)
            return self._convert(text, spec, base)
        except NotFoundError as e:
            if not spec.required:
                logger.warning(f"Optional field '{spec.name}' not present ({spec.selector})")
                return spec.default
            raise FieldError(spec.name, e) from e
        except (ExtractionError, CompileError) as e:
            raise FieldError(spec.name, e) from e

    def read_all(self, context, specs: Iterable[FieldSpec], base: Optional[str] = None) -> dict:
        """Read several fields into a {name: value} dict, stopping at the first failure."""
        return {spec.name: self.read(context, spec, base) for spec in specs}

    @staticmethod
    def _convert(text: str, spec: FieldSpec, base: Optional[str]) -> Any:
        if spec.kind == FieldKind.STRING:
            return text
        if spec.kind == FieldKind.URL:
            if spec.base_relative and base is not None:
                return urls.resolve(text, base)
            return urls.normalize(text)
        if spec.kind == FieldKind.UNSIGNED:
            return numbers.parse_unsigned(text)
        if spec.kind == FieldKind.SIGNED:
            return numbers.parse_signed(text)
        if spec.kind == FieldKind.TIMESTAMP:
            return numbers.parse_unix_timestamp(text)
        raise ValueError(f"unsupported field kind: {spec.kind}")
