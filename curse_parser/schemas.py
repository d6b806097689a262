"""
Pydantic schemas for field descriptors and extracted records.

FieldSpec: declarative description of one field (selector, type, required/optional),
           consumed by FieldAccessor.read()
Records:   Author, Category, Image, File, CurseProject, CurseForgeProject

Data flow:
  page module (FieldSpec tables) → FieldAccessor.read_all() → dict → record model
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Field descriptors ---

class FieldKind(str, Enum):
    """How the text matched by a selector is turned into a value."""
    STRING = "string"          # trimmed text
    URL = "url"                # absolute URL string
    UNSIGNED = "unsigned"      # non-negative int, separators stripped, "-" = 0
    SIGNED = "signed"          # int with optional sign
    TIMESTAMP = "timestamp"    # Unix epoch seconds → UTC datetime
    PRESENCE = "presence"      # True if the selector matches anything


class FieldSpec(BaseModel):
    """
    One field of a record.

    required=True  → absence or a malformed value aborts the whole parse.
    required=False → absence yields `default`; a present but malformed value
                     still aborts, so "empty" and "unreadable" stay distinct.
    """
    model_config = ConfigDict(frozen=True)

    name: str
    selector: str
    kind: FieldKind = FieldKind.STRING
    required: bool = True
    default: Any = None
    # Applied to the trimmed text before typed parsing, e.g. "1,234 Likes" → "1,234"
    transform: Optional[Callable[[str], str]] = None
    # URL fields resolve against the document URL unless the page emits absolute URLs
    base_relative: bool = True


def optional(name: str, selector: str, kind: FieldKind = FieldKind.STRING, **kwargs) -> FieldSpec:
    """Shorthand for an optional FieldSpec with the kind's neutral default."""
    kwargs.setdefault("default", "" if kind == FieldKind.STRING else None)
    return FieldSpec(name=name, selector=selector, kind=kind, required=False, **kwargs)


# --- Records ---

class Author(BaseModel):
    """A project member as listed on a project page."""
    name: str
    role: str
    url: Optional[str] = None
    image_url: Optional[str] = None    # Only the successor platform shows avatars


class Category(BaseModel):
    name: str
    url: Optional[str] = None
    image_url: Optional[str] = None


class Image(BaseModel):
    url: str
    thumbnail_url: Optional[str] = None


class File(BaseModel):
    """A downloadable file from a project's file listing."""
    name: str
    url: Optional[str] = None
    direct_url: Optional[str] = None
    release_type: str = ""
    game_version: str = ""
    downloads: int = 0
    date: Optional[datetime] = None
    size_info: str = ""
    has_additional_files: bool = False


class CurseProject(BaseModel):
    """Project page on the legacy mods site."""
    title: str
    donation_url: Optional[str] = None

    likes: int = 0
    favorites: int = 0

    authors: list[Author] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    license: str = ""
    curseforge_url: Optional[str] = None

    game: str = ""
    game_url: Optional[str] = None

    avg_downloads: int = 0
    avg_downloads_timeframe: str = ""
    total_downloads: int = 0

    updated: Optional[datetime] = None
    created: Optional[datetime] = None

    screenshots: list[Image] = Field(default_factory=list)
    downloads: list[File] = Field(default_factory=list)


class CurseForgeProject(BaseModel):
    """
    Project on the successor platform.

    Filled section by section: the header comes from whichever page is parsed
    first, overview and files from their own sub-pages.
    """
    # Header: navigation
    overview_url: Optional[str] = None
    files_url: Optional[str] = None
    images_url: Optional[str] = None
    issues_url: Optional[str] = None
    wiki_url: Optional[str] = None
    source_url: Optional[str] = None
    dependencies_url: Optional[str] = None
    dependents_url: Optional[str] = None

    # Header: project
    game: str = ""
    game_url: Optional[str] = None
    title: str = ""
    project_url: Optional[str] = None
    root_game_category: str = ""
    root_game_category_url: Optional[str] = None
    image_url: Optional[str] = None
    image_thumbnail_url: Optional[str] = None
    donation_url: Optional[str] = None

    # Overview sidebar
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    total_downloads: int = 0
    license: str = ""
    license_url: Optional[str] = None
    categories: list[Category] = Field(default_factory=list)
    curse_url: Optional[str] = None
    report_project_url: Optional[str] = None
    authors: list[Author] = Field(default_factory=list)

    # Files (overview recent files and/or the paginated files listing)
    downloads: list[File] = Field(default_factory=list)
