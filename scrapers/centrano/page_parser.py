"""
Centrano Product Page Parser

Builds a RawScrapeSnapshot from the HTML of a Centrano product page (as
rendered after the product was opened). Only reads the page; no requests
are made here.
"""
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from catalog.html_cleaner import absolute_url
from catalog.images import best_quality_url, extract_urls_from_onclick
from catalog.schema import RawScrapeSnapshot, RawTextBlock
from catalog.text_normalizer import collapse_whitespace

logger = logging.getLogger(__name__)

PRODUCT_CARD = "div.medium-24.large-5.columns"
TITLE_CANDIDATES = ".hide-for-large, [style*='text-align: center']"
VARIANT_ROWS = ".variant_list .row, .variant-row, .variant_list_row, .row"
VARIANT_NODES = f".show-for-large, {VARIANT_ROWS}"
GALLERY_IMAGES = "div#zoom_popup .img-container.slick-slide div.wrapper img"
DESCRIPTION = "#description_content"
SPECS = "#spec_content"

_COLOUR_LINE_RE = re.compile(r'^Culoare\s*:', re.IGNORECASE)


def _text(el: Optional[Tag]) -> str:
    return collapse_whitespace(el.get_text(" ")) if el is not None else ""


def _src(img: Tag) -> Optional[str]:
    return absolute_url(img.get("src") or None)


def find_raw_title(soup: BeautifulSoup) -> str:
    """First title line in the product card that is not a colour line."""
    card = soup.select_one(PRODUCT_CARD)
    if card is not None:
        for el in card.select(TITLE_CANDIDATES):
            text = _text(el)
            if text and not _COLOUR_LINE_RE.match(text) and not text.startswith("("):
                return text

    alt = soup.select_one(".hide-for-large")
    if alt is not None:
        return _text(alt)
    return _text(soup.title)


def find_thumbnail(soup: BeautifulSoup) -> Optional[str]:
    """Main product image, upgraded to its largest rendition on the page."""
    card = soup.select_one(PRODUCT_CARD)
    img = card.find("img") if card is not None else None
    if img is None or not img.get("src"):
        return None
    all_sources = [s for s in (_src(i) for i in soup.find_all("img")) if s]
    return best_quality_url(_src(img), all_sources)


def find_variant_blocks(soup: BeautifulSoup) -> List[RawTextBlock]:
    """
    Colour headers and variant rows in document order.

    A layout row wrapping other variant rows is skipped so the whole table
    is not read as one block. Columns inside a row that was already taken
    (e.g. a "show-for-large" price column) are part of that row's block.
    """
    blocks = []
    taken = set()
    for node in soup.select(VARIANT_NODES):
        if node.select_one(VARIANT_ROWS) is not None:
            continue
        if any(id(parent) in taken for parent in node.parents):
            continue
        text = _text(node)
        if text:
            taken.add(id(node))
            blocks.append(RawTextBlock(text=text, html=str(node)))
    return blocks


def find_image_urls(soup: BeautifulSoup) -> List[str]:
    """Gallery images plus URLs passed to zoom onclick handlers."""
    urls = []
    for img in soup.select(GALLERY_IMAGES):
        src = _src(img)
        if src and src not in urls:
            urls.append(src)

    for div in soup.find_all("div", onclick=True):
        handler = div.get("onclick") or ""
        if "open_zoom_box" not in handler:
            continue
        for url in extract_urls_from_onclick(handler):
            if url not in urls:
                urls.append(url)
    return urls


def _inner_html(soup: BeautifulSoup, selector: str) -> Optional[str]:
    el = soup.select_one(selector)
    return el.decode_contents().strip() if el is not None else None


def parse_product_page(html: str) -> RawScrapeSnapshot:
    """
    Parse a product page into a snapshot.

    Args:
        html: Full page HTML

    Returns:
        RawScrapeSnapshot; fields for missing page elements are empty
    """
    soup = BeautifulSoup(html or "", "html.parser")

    description_html = _inner_html(soup, DESCRIPTION)
    specs_html = _inner_html(soup, SPECS)
    image_urls = find_image_urls(soup)
    thumbnail = find_thumbnail(soup)
    raw_title = find_raw_title(soup)

    for element in soup.find_all(["script", "style"]):
        element.decompose()
    rows = find_variant_blocks(soup)
    full_text = _text(soup.body if soup.body is not None else soup)

    logger.info(f"Parsed page: title={raw_title!r}, {len(rows)} blocks, {len(image_urls)} images")

    return RawScrapeSnapshot(
        raw_title=raw_title,
        full_page_text=full_text,
        rows=tuple(rows),
        thumbnail_url=thumbnail,
        image_urls=tuple(image_urls),
        description_html=description_html,
        specs_html=specs_html,
    )
