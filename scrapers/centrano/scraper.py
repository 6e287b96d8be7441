"""
Centrano Saved Page Scraper - serves snapshots from product pages saved to disk
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from catalog.schema import RawScrapeSnapshot
from scrapers.base import BaseScraper, Credentials, ScrapeError, Supplier, slugify
from scrapers.centrano.page_parser import parse_product_page

logger = logging.getLogger(__name__)


class SavedPageScraper(BaseScraper):
    """
    Looks up `<snapshot_dir>/<slug of search term>.html`.

    Saved pages need no login, so credentials are accepted and ignored.
    """

    def __init__(self, snapshot_dir: Path):
        self.snapshot_dir = Path(snapshot_dir)

    @property
    def supplier(self) -> Supplier:
        return Supplier.CENTRANO

    def health_check(self) -> bool:
        return self.snapshot_dir.is_dir()

    def page_path(self, search_term: str) -> Path:
        return self.snapshot_dir / f"{slugify(search_term)}.html"

    def fetch_snapshot(
        self,
        credentials: Optional[Credentials],
        search_term: str,
        status: Dict[str, str],
    ) -> RawScrapeSnapshot:
        path = self.page_path(search_term)
        if not path.is_file():
            raise ScrapeError("search", f"Product not found: {search_term!r}")
        status['search'] = "ok"

        try:
            html = path.read_text(encoding='utf-8')
        except OSError as e:
            raise ScrapeError("productClick", f"Cannot read {path}: {e}") from e
        status['productClick'] = "ok"

        logger.info(f"Loaded saved page {path}")
        return parse_product_page(html)
