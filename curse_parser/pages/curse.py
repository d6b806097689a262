"""
Field mappings for project pages on the legacy mods site.

Supported layouts, e.g.:
  https://mods.curse.com/mc-mods/minecraft/238424-taam
  https://mods.curse.com/texture-packs/minecraft/equanimity-32x
  https://mods.curse.com/addons/wow/pawn
"""

from typing import Optional

from lxml import etree

from ..accessor import FieldAccessor
from ..schemas import Author, Category, CurseProject, FieldKind, FieldSpec, File, Image, optional
from .common import first_field, nth_field, read_records, require_node, strip_prefix, strip_suffix

PROJECT_OVERVIEW = "//*[@id='project-overview']"
MAIN_INFO = "div[@class='main-details']/div[@class='main-info']"
DETAILS_LIST = "div/div/ul[@class='details-list']"

AUTHORS = f"{MAIN_INFO}/ul[@class='authors group']/li"
CATEGORIES = f"{MAIN_INFO}/a"
SCREENSHOTS = "//div[@id='screenshot-gallery']//div[@class='listing-body']/ul/li/a"
DOWNLOADS = "//div[@id='tab-other-downloads']//div[@class='listing-body']/table/tbody/tr"

OVERVIEW_FIELDS = (
    FieldSpec(name="title", selector="header/h2"),
    # Not every project takes donations
    optional("donation_url", "div[@class='meta-info']/div/a/@href", FieldKind.URL, base_relative=False),
    # "123 Likes"
    FieldSpec(
        name="likes",
        selector=f"{MAIN_INFO}/div[@class='appreciate']/ul/li[@class='grats']/span",
        kind=FieldKind.UNSIGNED,
        transform=first_field,
    ),
)

DETAILS_FIELDS = (
    FieldSpec(name="game", selector="li[@class='game']"),
    FieldSpec(name="game_url", selector="li[@class='game']/a/@href", kind=FieldKind.URL),
    # "1,234 Monthly Downloads"
    FieldSpec(name="avg_downloads", selector="li[@class='average-downloads']",
              kind=FieldKind.UNSIGNED, transform=first_field),
    FieldSpec(name="avg_downloads_timeframe", selector="li[@class='average-downloads']",
              transform=nth_field(1)),
    FieldSpec(name="total_downloads", selector="li[@class='downloads']",
              kind=FieldKind.UNSIGNED, transform=first_field),
    FieldSpec(name="updated", selector="li[@class='updated' and text()='Updated ']/abbr/@data-epoch",
              kind=FieldKind.TIMESTAMP),
    FieldSpec(name="created", selector="li[@class='updated' and text()='Created ']/abbr/@data-epoch",
              kind=FieldKind.TIMESTAMP),
    FieldSpec(name="favorites", selector="li[@class='favorited']",
              kind=FieldKind.UNSIGNED, transform=first_field),
    FieldSpec(name="curseforge_url", selector="li[@class='curseforge']/a/@href",
              kind=FieldKind.URL, base_relative=False),
    FieldSpec(name="license", selector="li[@class='license']", transform=strip_prefix("License: ")),
)

AUTHOR_FIELDS = (
    FieldSpec(name="name", selector="a"),
    # "Owner:" → "Owner"
    FieldSpec(name="role", selector="text()", transform=strip_suffix(":")),
    FieldSpec(name="url", selector="a/@href", kind=FieldKind.URL),
)

CATEGORY_FIELDS = (
    FieldSpec(name="name", selector="@title"),
    FieldSpec(name="url", selector="@href", kind=FieldKind.URL),
    FieldSpec(name="image_url", selector="img/@src", kind=FieldKind.URL, base_relative=False),
)

SCREENSHOT_FIELDS = (
    FieldSpec(name="url", selector="@href", kind=FieldKind.URL, base_relative=False),
)

DOWNLOAD_FIELDS = (
    FieldSpec(name="name", selector="td[1]/a"),
    FieldSpec(name="url", selector="td[1]/a/@href", kind=FieldKind.URL),
    FieldSpec(name="release_type", selector="td[2]"),
    FieldSpec(name="game_version", selector="td[3]"),
    FieldSpec(name="downloads", selector="td[4]", kind=FieldKind.UNSIGNED),
    FieldSpec(name="date", selector="td[5]/abbr/@data-epoch", kind=FieldKind.TIMESTAMP),
)


def parse_curse(
    document_url: str,
    root: etree._Element,
    accessor: Optional[FieldAccessor] = None
) -> CurseProject:
    """
    Parse a legacy project page.

    Args:
        document_url: URL the page was fetched from, used to resolve links
        root: Parsed document
        accessor: Accessor to read with (default cache if omitted)

    Raises:
        FieldError: if a required field is missing or malformed
    """
    accessor = accessor or FieldAccessor()

    overview = require_node(accessor, root, PROJECT_OVERVIEW, "project-overview")
    values = accessor.read_all(overview, OVERVIEW_FIELDS, document_url)

    values["authors"] = read_records(accessor, overview, AUTHORS, AUTHOR_FIELDS,
                                     Author, document_url, "Author")
    values["categories"] = read_records(accessor, overview, CATEGORIES, CATEGORY_FIELDS,
                                        Category, document_url, "Category")

    details = require_node(accessor, overview, DETAILS_LIST, "details-list")
    values.update(accessor.read_all(details, DETAILS_FIELDS, document_url))

    values["screenshots"] = read_records(accessor, root, SCREENSHOTS, SCREENSHOT_FIELDS,
                                         Image, document_url, "Screenshot")
    values["downloads"] = read_records(accessor, root, DOWNLOADS, DOWNLOAD_FIELDS,
                                       File, document_url, "Download")

    return CurseProject(**values)
