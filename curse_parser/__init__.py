"""
curse-parser

Extracts typed project records (title, authors, categories, files,
timestamps, counters) from the HTML pages of a modding-content site and its
successor platform.

Public API surface:
  Orchestrator      : CurseParser, fetch_curse, fetch_curseforge
  Extraction engine : QueryCache, FieldAccessor, ListingAggregator
  Collaborators     : BasePageFetcher, HttpPageFetcher, load_document
  Parsing helpers   : numbers (parse_unsigned, ...), urls (normalize, resolve)
  Data models       : FieldSpec, FieldKind, CurseProject, CurseForgeProject, ...
  Error types       : CurseParserError and subclasses
"""

# --- Orchestrator ---
from .main import CurseParser, fetch_curse, fetch_curseforge

# --- Extraction engine ---
from .query_cache import QueryCache, get_default_cache
from .accessor import FieldAccessor
from .pagination import ListingAggregator
from .numbers import parse_signed, parse_unix_timestamp, parse_unsigned
from .urls import normalize, resolve

# --- Collaborators ---
from .fetcher import BasePageFetcher, HttpPageFetcher
from .document import load_document
from .config import Settings

# --- Page mappings ---
from .pages.curse import parse_curse
from .pages.curseforge import Option, Section, derive_curseforge_urls, parse_curseforge

# --- Data models ---
from .schemas import (
    Author,
    Category,
    CurseForgeProject,
    CurseProject,
    FieldKind,
    FieldSpec,
    File,
    Image,
)

# --- Exceptions ---
from .exceptions import (
    CompileError,
    CurseParserError,
    ExtractionError,
    FieldError,
    MalformedNumberError,
    MalformedURLError,
    NotFoundError,
    PageError,
    UpstreamFetchError,
    UpstreamParseError,
)

__version__ = "0.1.0"
__all__ = [
    "CurseParser",
    "fetch_curse",
    "fetch_curseforge",
    "QueryCache",
    "get_default_cache",
    "FieldAccessor",
    "ListingAggregator",
    "parse_signed",
    "parse_unix_timestamp",
    "parse_unsigned",
    "normalize",
    "resolve",
    "BasePageFetcher",
    "HttpPageFetcher",
    "load_document",
    "Settings",
    "parse_curse",
    "parse_curseforge",
    "derive_curseforge_urls",
    "Option",
    "Section",
    "Author",
    "Category",
    "CurseForgeProject",
    "CurseProject",
    "FieldKind",
    "FieldSpec",
    "File",
    "Image",
    "CompileError",
    "CurseParserError",
    "ExtractionError",
    "FieldError",
    "MalformedNumberError",
    "MalformedURLError",
    "NotFoundError",
    "PageError",
    "UpstreamFetchError",
    "UpstreamParseError",
]
