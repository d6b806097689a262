"""
Field mappings for project pages on the successor platform.

A project is spread over several sub-pages (sections). Every sub-page carries
the same header, so the header is parsed once, from the first page loaded.

  Section.OVERVIEW → https://minecraft.curseforge.com/projects/taam
  Section.FILES    → https://minecraft.curseforge.com/projects/taam/files (paginated)
  Section.IMAGES   → https://minecraft.curseforge.com/projects/taam/images
"""

import posixpath
from enum import IntFlag
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from lxml import etree

from ..accessor import FieldAccessor
from ..logger import get_module_logger
from ..pagination import ListingAggregator
from ..schemas import Author, Category, CurseForgeProject, FieldKind, FieldSpec, File, optional
from .common import read_records, require_node, strip_suffix

logger = get_module_logger("pages.curseforge")


class Section(IntFlag):
    """Sub-pages of a project. Combine with |; HEADER alone loads only the header."""
    HEADER = 0
    OVERVIEW = 1
    FILES = 2
    IMAGES = 4


class Option(IntFlag):
    """Tweaks for the section parsers."""
    NONE = 0
    # Also collect the "recent files" box of the overview sidebar. These lack
    # the game version and duplicate entries of the files section.
    OVERVIEW_RECENT_FILES = 1
    # Only parse the first page of the files listing
    FILES_NO_PAGINATION = 2


def has_section(sections: Section, section: Section) -> bool:
    """The header is part of every selection."""
    return section == Section.HEADER or bool(sections & section)


# Sub-page path of each section, relative to the project URL
SECTION_PATHS = {
    Section.OVERVIEW: "",
    Section.FILES: "files",
    Section.IMAGES: "images",
}


def derive_curseforge_urls(project_url: str) -> dict[Section, str]:
    """
    Build the URL of every section from the project URL. No HTTP calls are made.

    https://minecraft.curseforge.com/projects/taam →
      OVERVIEW: https://minecraft.curseforge.com/projects/taam
      FILES:    https://minecraft.curseforge.com/projects/taam/files
      IMAGES:   https://minecraft.curseforge.com/projects/taam/images
    """
    parts = urlsplit(project_url.strip())
    urls = {}
    for section, rel in SECTION_PATHS.items():
        if not rel:
            urls[section] = urlunsplit(parts)
            continue
        path = posixpath.join(parts.path or "/", rel)
        urls[section] = urlunsplit(parts._replace(path=path, fragment=""))
    return urls


# --- Header ---

NAVBAR = "//nav[@class='e-header-nav']"
ATF = "//*[@id='site-main']/section[@class='atf']"


def _nav_link(name: str, label: str, required: bool = True) -> FieldSpec:
    selector = f".//li/a[contains(text(), '{label}')]/@href"
    if required:
        return FieldSpec(name=name, selector=selector, kind=FieldKind.URL)
    return optional(name, selector, FieldKind.URL)


NAVBAR_FIELDS = (
    _nav_link("overview_url", "Overview"),
    _nav_link("files_url", "Files"),
    _nav_link("images_url", "Images"),
    # Projects may disable the issue tracker or link no wiki or source
    _nav_link("issues_url", "Issues", required=False),
    _nav_link("wiki_url", "Wiki", required=False),
    _nav_link("source_url", "Source", required=False),
    _nav_link("dependencies_url", "Dependencies"),
    _nav_link("dependents_url", "Dependents"),
)

SITE_FIELDS = (
    # "Minecraft CurseForge" → "Minecraft"
    FieldSpec(name="game", selector="//*[@id='site-main']/header//h1",
              transform=strip_suffix(" CurseForge")),
    FieldSpec(name="game_url", selector="//*[@id='site-main']/header//a/@href", kind=FieldKind.URL),
)

ATF_FIELDS = (
    FieldSpec(name="title", selector=".//h1/a/span"),
    FieldSpec(name="project_url", selector=".//h1/a/@href", kind=FieldKind.URL),
    FieldSpec(name="root_game_category", selector=".//h2/a"),
    FieldSpec(name="root_game_category_url", selector=".//h2/a/@href", kind=FieldKind.URL),
    FieldSpec(name="image_url", selector=".//div[@class='avatar-wrapper']/a/@href", kind=FieldKind.URL),
    FieldSpec(name="image_thumbnail_url", selector=".//div[@class='avatar-wrapper']/a/img/@src",
              kind=FieldKind.URL),
    optional("donation_url", ".//a[@class='button tip icon-donate icon-paypal']/@href",
             FieldKind.URL, base_relative=False),
)


def parse_header(project: CurseForgeProject, document_url: str, root: etree._Element,
                 accessor: FieldAccessor) -> None:
    navbar = require_node(accessor, root, NAVBAR, "navbar")
    values = accessor.read_all(navbar, NAVBAR_FIELDS, document_url)
    values.update(accessor.read_all(root, SITE_FIELDS, document_url))

    atf = require_node(accessor, root, ATF, "atf section")
    values.update(accessor.read_all(atf, ATF_FIELDS, document_url))

    for name, value in values.items():
        setattr(project, name, value)


# --- Overview ---

SIDEBAR = "//*[@id='content']/section/div[@class='e-project-details-secondary']"
PROJECT_DETAILS = ".//ul[@class='cf-details project-details']"


def _detail(label: str, suffix: str = "") -> str:
    return (f"{PROJECT_DETAILS}/li[div[@class='info-label']='{label} ']"
            f"/div[@class='info-data']{suffix}")


SIDEBAR_FIELDS = (
    FieldSpec(name="created", selector=_detail("Created", "/abbr/@data-epoch"), kind=FieldKind.TIMESTAMP),
    FieldSpec(name="updated", selector=_detail("Last Released File", "/abbr/@data-epoch"),
              kind=FieldKind.TIMESTAMP),
    FieldSpec(name="total_downloads", selector=_detail("Total Downloads"), kind=FieldKind.UNSIGNED),
    FieldSpec(name="license", selector=_detail("License", "/a")),
    FieldSpec(name="license_url", selector=_detail("License", "/a/@href"), kind=FieldKind.URL),
    FieldSpec(name="curse_url", selector=".//li[@class='view-on-curse']/a/@href", kind=FieldKind.URL),
    FieldSpec(name="report_project_url", selector=".//li[@class='report-project']/a/@href",
              kind=FieldKind.URL),
)

CATEGORIES = ".//ul[@class='cf-details project-categories']/li"
CATEGORY_FIELDS = (
    FieldSpec(name="name", selector="a/@title"),
    FieldSpec(name="url", selector="a/@href", kind=FieldKind.URL),
    FieldSpec(name="image_url", selector="a/img/@src", kind=FieldKind.URL),
)

MEMBERS = ".//ul[@class='cf-details project-members']/li"
MEMBER_FIELDS = (
    FieldSpec(name="name", selector="div[@class='info-wrapper']/p/a[1]/span"),
    FieldSpec(name="url", selector="div[@class='info-wrapper']/p/a[1]/@href", kind=FieldKind.URL),
    FieldSpec(name="role", selector="div[@class='info-wrapper']/p/span[@class='title']"),
    FieldSpec(name="image_url", selector="div/div/a/img/@src", kind=FieldKind.URL),
)

RECENT_FILES = ".//div[@class='cf-sidebar-wrapper']//li[@class='file-tag']"
RECENT_FILE_FIELDS = (
    FieldSpec(name="release_type", selector="div[@class='e-project-file-phase-wrapper']/div/@title"),
    FieldSpec(name="direct_url", selector=".//div[@class='project-file-download-button']/a/@href",
              kind=FieldKind.URL),
    FieldSpec(name="url", selector=".//div[@class='project-file-name-container']/a/@href",
              kind=FieldKind.URL),
    FieldSpec(name="name", selector=".//div[@class='project-file-name-container']/a/text()"),
    FieldSpec(name="date", selector=".//abbr/@data-epoch", kind=FieldKind.TIMESTAMP),
)


def parse_overview(project: CurseForgeProject, document_url: str, root: etree._Element,
                   accessor: FieldAccessor, options: Option = Option.NONE) -> None:
    sidebar = require_node(accessor, root, SIDEBAR, "sidebar")

    for name, value in accessor.read_all(sidebar, SIDEBAR_FIELDS, document_url).items():
        setattr(project, name, value)

    project.categories.extend(read_records(accessor, sidebar, CATEGORIES, CATEGORY_FIELDS,
                                           Category, document_url, "Category"))
    project.authors.extend(read_records(accessor, sidebar, MEMBERS, MEMBER_FIELDS,
                                        Author, document_url, "Author"))

    if options & Option.OVERVIEW_RECENT_FILES:
        project.downloads.extend(read_records(accessor, sidebar, RECENT_FILES, RECENT_FILE_FIELDS,
                                              File, document_url, "File"))


# --- Files ---

FILE_ROWS = "//tr[@class='project-file-list-item']"
# The last page is always linked on its own, so the highest label is the page count
PAGINATION_LABELS = "//div[@class='listing-header']//a[@class='b-pagination-item']"

FILE_FIELDS = (
    FieldSpec(name="release_type", selector="td[@class='project-file-release-type']/div/@title"),
    FieldSpec(name="direct_url", selector=".//div[@class='project-file-download-button']/a/@href",
              kind=FieldKind.URL),
    FieldSpec(name="url", selector=".//div[@class='project-file-name-container']/a/@href",
              kind=FieldKind.URL),
    FieldSpec(name="name", selector=".//div[@class='project-file-name-container']/a/text()"),
    FieldSpec(name="has_additional_files",
              selector=".//div[@class='project-file-name-container']/a[@class='more-files-tag']",
              kind=FieldKind.PRESENCE),
    FieldSpec(name="size_info", selector=".//td[@class='project-file-size']/text()"),
    FieldSpec(name="date", selector=".//abbr/@data-epoch", kind=FieldKind.TIMESTAMP),
    FieldSpec(name="game_version", selector=".//span[@class='version-label']/text()"),
    FieldSpec(name="downloads", selector=".//td[@class='project-file-downloads']/text()",
              kind=FieldKind.UNSIGNED),
)


def parse_files_page(root: etree._Element, document_url: str,
                     accessor: FieldAccessor) -> list[File]:
    """Files listed on one page of the files listing."""
    return read_records(accessor, root, FILE_ROWS, FILE_FIELDS, File, document_url, "File")


def parse_files(project: CurseForgeProject, document_url: str, root: etree._Element,
                accessor: FieldAccessor, aggregator: ListingAggregator,
                options: Option = Option.NONE) -> None:
    """Parse the files listing, following its pagination unless disabled."""
    files = aggregator.aggregate(
        document_url,
        lambda page_root, page_url: parse_files_page(page_root, page_url, accessor),
        PAGINATION_LABELS,
        single_page=bool(options & Option.FILES_NO_PAGINATION),
        first_page=root,
    )
    project.downloads.extend(files)


def parse_images(project: CurseForgeProject, document_url: str, root: etree._Element,
                 accessor: FieldAccessor) -> None:
    # TODO: map the image gallery once a sample of the images page layout is available
    logger.debug(f"Images section is not parsed ({document_url})")


def parse_curseforge(
    project: CurseForgeProject,
    document_url: str,
    root: etree._Element,
    parse_header_values: bool,
    section: Section,
    options: Option = Option.NONE,
    accessor: Optional[FieldAccessor] = None,
    aggregator: Optional[ListingAggregator] = None
) -> CurseForgeProject:
    """
    Parse one sub-page into project.

    Args:
        project: Record being filled, shared across sections
        document_url: URL the page was fetched from
        root: Parsed document
        parse_header_values: Also parse the header (only for the first page loaded)
        section: The single section this page belongs to
        options: Parser tweaks
        accessor: Accessor to read with
        aggregator: Needed for Section.FILES unless FILES_NO_PAGINATION is set

    Raises:
        FieldError / PageError: if a required field or a listing page fails
    """
    accessor = accessor or FieldAccessor()

    if parse_header_values:
        parse_header(project, document_url, root, accessor)

    if section == Section.OVERVIEW:
        parse_overview(project, document_url, root, accessor, options)
    elif section == Section.FILES:
        if aggregator is None:
            if not options & Option.FILES_NO_PAGINATION:
                raise ValueError("a ListingAggregator is required to follow file pagination")
            project.downloads.extend(parse_files_page(root, document_url, accessor))
        else:
            parse_files(project, document_url, root, accessor, aggregator, options)
    elif section == Section.IMAGES:
        parse_images(project, document_url, root, accessor)

    return project
