"""
Product Images

Orders the gallery URLs found on a product page and downloads them one at
a time. A failed image gives None for that slot; the rest of the batch
carries on.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
from urllib.parse import urlparse

import requests

from .config import ImageConfig
from .html_cleaner import absolute_url

logger = logging.getLogger(__name__)

# "/1200/" style size folder in CDN paths; larger is better quality
_SIZE_FOLDER_RE = re.compile(r'/(\d+)/')
_ONCLICK_ARGS_RE = re.compile(r'\(([\s\S]*)\)')
_ONCLICK_URL_RE = re.compile(r'//[^,\'")\s]+?\.(?:webp|jpe?g|png|gif)', re.IGNORECASE)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


def file_name(url: str) -> str:
    """Last path segment of a URL, including the leading slash."""
    path = urlparse(url).path or url
    return path[path.rfind("/"):]


def size_folder(url: str) -> int:
    match = _SIZE_FOLDER_RE.search(urlparse(url).path or "")
    return int(match.group(1)) if match else 0


def best_quality_url(url: str, candidates: Iterable[str]) -> str:
    """
    Pick the largest rendition of the same file among candidates.

    Renditions share a file name and differ by a numeric size folder,
    e.g. ".../400/deck.jpg" and ".../1200/deck.jpg".
    """
    name = file_name(url)
    best, best_size = url, 0
    for candidate in candidates:
        if not candidate.endswith(name):
            continue
        candidate_size = size_folder(candidate)
        if candidate_size > best_size:
            best, best_size = candidate, candidate_size
    return best


def extract_urls_from_onclick(handler: Optional[str]) -> List[str]:
    """
    Image URLs passed as arguments to an onclick handler.

    Example:
        >>> extract_urls_from_onclick("open_zoom_box('//cdn.x/1200/a.jpg', 2)")
        ['https://cdn.x/1200/a.jpg']
    """
    if not handler:
        return []
    match = _ONCLICK_ARGS_RE.search(handler)
    if not match:
        return []
    urls = []
    for raw in _ONCLICK_URL_RE.findall(match.group(1)):
        url = absolute_url(raw)
        if url not in urls:
            urls.append(url)
    return urls


def order_image_urls(thumbnail: Optional[str], urls: Sequence[str]) -> List[str]:
    """
    Deduplicate gallery URLs and put the best thumbnail rendition first.

    Args:
        thumbnail: Main product image, if known
        urls: Gallery URLs in page order

    Returns:
        Ordered list of absolute URLs
    """
    ordered = []
    for url in urls:
        url = absolute_url(url)
        if url and url not in ordered:
            ordered.append(url)

    thumbnail = absolute_url(thumbnail)
    if not thumbnail:
        return ordered

    best = best_quality_url(thumbnail, ordered)
    return [best] + [u for u in ordered if u != best]


class ImageDownloader:
    """
    Downloads product images into the configured output directory.

    Usage:
        downloader = ImageDownloader(ImageConfig(), base_url="https://shop")
        public_url = downloader(url, 0)

    Saved files are named "processed_<key>_<index><ext>"; without an
    explicit key each downloader gets a random one, so two requests never
    write the same file.
    """

    def __init__(
        self,
        config: Optional[ImageConfig] = None,
        base_url: str = "",
        session: Optional[requests.Session] = None,
        key: Optional[str] = None,
    ):
        self.config = config or ImageConfig()
        self.key = key or uuid.uuid4().hex[:12]
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': self.config.user_agent})

    def __call__(self, url: str, index: int) -> str:
        response = self.session.get(url, timeout=self.config.timeout)
        response.raise_for_status()

        suffix = Path(urlparse(url).path).suffix.lower()
        if suffix not in IMAGE_EXTENSIONS:
            suffix = ".jpg"

        self.config.output_dir.mkdir(parents=True, exist_ok=True)
        name = f"processed_{self.key}_{index}{suffix}"
        (self.config.output_dir / name).write_bytes(response.content)

        return f"{self.base_url}/processed/{name}"


def process_images(
    urls: Sequence[str],
    handler: Callable[[str, int], str],
) -> List[Optional[str]]:
    """
    Run `handler(url, index)` for each image, sequentially.

    Returns:
        One entry per input URL: the handler result, or None if it failed
    """
    results: List[Optional[str]] = []
    for index, url in enumerate(urls):
        try:
            results.append(handler(url, index))
        except Exception as e:
            logger.warning(f"Image {index} failed ({url}): {e}")
            results.append(None)

    done = sum(1 for r in results if r)
    logger.info(f"Images: {done}/{len(urls)} processed")
    return results
