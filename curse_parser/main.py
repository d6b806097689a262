"""
Main orchestrator for curse-parser.

Wires the collaborators together: fetch (HttpPageFetcher) → parse
(load_document) → field mappings (pages.curse / pages.curseforge), all reading
through one FieldAccessor and its QueryCache.
"""

from typing import Optional

from .accessor import FieldAccessor
from .config import Settings
from .document import load_document
from .exceptions import CurseParserError
from .fetcher import BasePageFetcher, HttpPageFetcher
from .logger import get_module_logger
from .pages.curse import parse_curse
from .pages.curseforge import (
    Option,
    Section,
    derive_curseforge_urls,
    has_section,
    parse_curseforge,
)
from .pagination import ListingAggregator
from .query_cache import QueryCache, get_default_cache
from .schemas import CurseForgeProject, CurseProject

logger = get_module_logger("main")

# Sections are fetched in this order; the header comes from the first one
SECTION_ORDER = (Section.OVERVIEW, Section.FILES, Section.IMAGES)


class CurseParser:
    """
    Fetches and parses project pages.

    One instance owns a fetcher, a FieldAccessor over a QueryCache and a
    ListingAggregator. Instances are cheap; the cache is the process-wide
    default unless one is passed in.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        fetcher: Optional[BasePageFetcher] = None,
        cache: Optional[QueryCache] = None
    ):
        self.settings = settings or Settings()
        self.fetcher = fetcher or HttpPageFetcher(self.settings)
        self.accessor = FieldAccessor(cache if cache is not None else get_default_cache())
        self.aggregator = ListingAggregator(
            self.fetcher, self.accessor, max_workers=self.settings.max_workers
        )

        logger.info("CurseParser initialized")

    def close(self) -> None:
        self.fetcher.close()

    def __enter__(self) -> "CurseParser":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _load(self, url: str):
        return load_document(self.fetcher.fetch(url), url=url)

    # --- Legacy project pages ---

    def parse_curse_document(self, document_url: str, content: bytes) -> CurseProject:
        """Parse an already-fetched legacy project page."""
        root = load_document(content, url=document_url)
        return self._with_url(document_url, parse_curse, document_url, root, self.accessor)

    def fetch_curse(self, project_url: str) -> CurseProject:
        """Fetch and parse a legacy project page."""
        logger.info(f"Fetching {project_url}")
        content = self.fetcher.fetch(project_url)
        project = self.parse_curse_document(project_url, content)
        logger.info(f"Parsed '{project.title}': {len(project.downloads)} downloads")
        return project

    # --- Successor platform ---

    def fetch_curseforge(
        self,
        project_url: str,
        sections: Section = Section.OVERVIEW,
        options: Option = Option.NONE
    ) -> CurseForgeProject:
        """
        Fetch and parse the selected sections of a project.

        Args:
            project_url: e.g. https://minecraft.curseforge.com/projects/taam
            sections: Sections to load, combined with |. Section.HEADER alone
                      loads the overview page but parses only the header.
            options: Parser tweaks, combined with |

        Returns:
            CurseForgeProject filled from all selected sections
        """
        project = CurseForgeProject()

        if sections == Section.HEADER:
            root = self._with_url(project_url, self._load, project_url)
            return self._with_url(project_url, parse_curseforge, project, project_url, root,
                                  True, Section.HEADER, options, self.accessor, self.aggregator)

        urls = derive_curseforge_urls(project_url)
        parse_header_values = True
        for section in SECTION_ORDER:
            if not has_section(sections, section):
                continue
            url = urls[section]
            logger.info(f"Fetching {section.name.lower()} section: {url}")
            root = self._with_url(url, self._load, url)
            self._with_url(url, parse_curseforge, project, url, root, parse_header_values,
                           section, options, self.accessor, self.aggregator)
            parse_header_values = False

        logger.info(f"Parsed '{project.title}': {len(project.downloads)} downloads")
        return project

    @staticmethod
    def _with_url(url: str, func, *args):
        """Call func, recording the page URL in any CurseParserError it raises."""
        try:
            return func(*args)
        except CurseParserError as e:
            e.details.setdefault("url", url)
            raise


def fetch_curse(project_url: str, settings: Optional[Settings] = None) -> CurseProject:
    """Convenience function to fetch and parse a legacy project page."""
    with CurseParser(settings=settings) as parser:
        return parser.fetch_curse(project_url)


def fetch_curseforge(
    project_url: str,
    sections: Section = Section.OVERVIEW,
    options: Option = Option.NONE,
    settings: Optional[Settings] = None
) -> CurseForgeProject:
    """Convenience function to fetch and parse a project on the successor platform."""
    with CurseParser(settings=settings) as parser:
        return parser.fetch_curseforge(project_url, sections, options)
