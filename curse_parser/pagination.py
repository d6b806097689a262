"""
Multi-page listing aggregation.

Walks a listing split across numbered pages:

  1. Parse page 1 (fetched here, or supplied by the caller) and extract its records.
  2. Read every page label in the pagination control and take the highest.
     No pagination control means a single page.
  3. Fetch pages 2..N, extract each with the same function, and append the
     records in page order.

Any failure aborts the walk with a PageError. Records from pages that already
succeeded are dropped; callers never see a silently truncated listing.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from lxml import etree

from . import numbers, urls
from .accessor import FieldAccessor
from .document import load_document
from .exceptions import CurseParserError, PageError
from .fetcher import BasePageFetcher
from .logger import get_module_logger

logger = get_module_logger("pagination")

# extract(root, document_url) -> records of one page
Extractor = Callable[[etree._Element, str], list]


class ListingAggregator:
    """Fetches, parses and concatenates the pages of a listing."""

    def __init__(
        self,
        fetcher: BasePageFetcher,
        accessor: Optional[FieldAccessor] = None,
        max_workers: int = 1
    ):
        """
        Args:
            fetcher: Source of page bytes
            accessor: Accessor used to read the pagination control
            max_workers: Pages fetched at once after page 1. 1 keeps the walk
                         strictly sequential.
        """
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.fetcher = fetcher
        self.accessor = accessor or FieldAccessor()
        self.max_workers = max_workers

    def page_count(self, root: etree._Element, pagination_selector: str) -> int:
        """Highest page label in the pagination control, or 1 if there is none."""
        count = 1
        for label in self.accessor.iter_strings(root, pagination_selector):
            count = max(count, numbers.parse_unsigned(label))
        return count

    def aggregate(
        self,
        listing_url: str,
        extract: Extractor,
        pagination_selector: str,
        single_page: bool = False,
        first_page: Optional[etree._Element] = None,
        page_param: str = "page"
    ) -> list:
        """
        Collect the records of every page of a listing.

        Args:
            listing_url: URL of the first page; later pages add a page parameter
            extract: Per-page record extraction
            pagination_selector: Selector for the page-number labels
            single_page: Only use page 1
            first_page: Already-parsed page 1, to avoid fetching it again
            page_param: Query parameter carrying the page index

        Returns:
            Records of all pages, ordered by page index

        Raises:
            PageError: if any page fails to fetch, parse or extract
        """
        logger.info(f"Aggregating listing {listing_url}")

        try:
            root = first_page if first_page is not None else self._load(listing_url)
            records = list(extract(root, listing_url))
            last_page = 1 if single_page else self.page_count(root, pagination_selector)
        except CurseParserError as e:
            raise PageError(1, listing_url, e) from e

        logger.debug(f"Page 1: {len(records)} records")
        if last_page <= 1:
            logger.info(f"Aggregated {len(records)} records from 1 page")
            return records

        logger.info(f"Listing has {last_page} pages")
        page_urls = [
            (page, urls.page_url(listing_url, page, page_param))
            for page in range(2, last_page + 1)
        ]

        if self.max_workers == 1:
            for page, url in page_urls:
                records.extend(self._fetch_page(page, url, extract))
        else:
            records.extend(self._fetch_parallel(page_urls, extract))

        logger.info(f"Aggregated {len(records)} records from {last_page} pages")
        return records

    def _load(self, url: str) -> etree._Element:
        return load_document(self.fetcher.fetch(url), url=url)

    def _fetch_page(self, page: int, url: str, extract: Extractor) -> list:
        try:
            page_records = list(extract(self._load(url), url))
        except CurseParserError as e:
            raise PageError(page, url, e) from e
        logger.debug(f"Page {page}: {len(page_records)} records")
        return page_records

    def _fetch_parallel(self, page_urls: list[tuple[int, str]], extract: Extractor) -> list:
        """Fetch pages concurrently; results and errors are taken in page order."""
        records = []
        executor = ThreadPoolExecutor(max_workers=self.max_workers)
        try:
            futures = [
                executor.submit(self._fetch_page, page, url, extract)
                for page, url in page_urls
            ]
            for future in futures:
                records.extend(future.result())
        except BaseException:
            executor.shutdown(wait=True, cancel_futures=True)
            raise
        executor.shutdown(wait=True)
        return records
