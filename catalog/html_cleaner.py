"""
HTML Cleaner

Prepares supplier description/spec fragments for the storefront and reads
text out of row markup.

Cleaning:
- Drop <script> and <style> elements
- Drop inline event handlers (onclick, onmouseover, ...)
- Make protocol-relative image URLs absolute (https)
- Let images scale with the container
"""

import re
from typing import List, Optional

from bs4 import BeautifulSoup

from .text_normalizer import collapse_whitespace


EVENT_ATTRIBUTES = ("onclick", "onmouseover", "onmouseout", "onchange")
IMAGE_STYLE = "max-width: 100%; height: auto;"

# Supplier highlights the current price in this colour
HIGHLIGHT_COLOUR_RE = re.compile(r'color\s*:\s*#?0066cc', re.IGNORECASE)


def absolute_url(url: Optional[str]) -> Optional[str]:
    """Turn "//cdn.example/x.jpg" into "https://cdn.example/x.jpg"."""
    if url and url.startswith("//"):
        return f"https:{url}"
    return url


def clean_html(fragment: Optional[str]) -> Optional[str]:
    """
    Clean an HTML fragment for import.

    Args:
        fragment: Inner HTML of the description or specs container

    Returns:
        Cleaned inner HTML, or None if there was no fragment

    Example:
        >>> clean_html('<p onclick="x()">Deck</p><script>t()</script>')
        '<p>Deck</p>'
    """
    if fragment is None:
        return None

    soup = BeautifulSoup(fragment, "html.parser")

    for element in soup.find_all(["script", "style"]):
        element.decompose()

    for element in soup.find_all(True):
        for attr in EVENT_ATTRIBUTES:
            if attr in element.attrs:
                del element.attrs[attr]

    for img in soup.find_all("img"):
        src = img.get("src") or ""
        if src.startswith("//"):
            img["src"] = absolute_url(src)
        existing = (img.get("style") or "").strip()
        if existing and not existing.endswith(";"):
            existing += ";"
        img["style"] = f"{existing} {IMAGE_STYLE}".strip()

    return soup.decode().strip()


def html_to_text(fragment: Optional[str]) -> str:
    """Visible text of a fragment with whitespace collapsed."""
    if not fragment:
        return ""
    soup = BeautifulSoup(fragment, "html.parser")
    return collapse_whitespace(soup.get_text(" "))


def highlighted_texts(fragment: Optional[str]) -> List[str]:
    """
    Texts of the <span> elements styled with the highlight colour.

    Example:
        >>> highlighted_texts('<span style="color:#0066cc">38,00 €</span>')
        ['38,00 €']
    """
    if not fragment:
        return []
    soup = BeautifulSoup(fragment, "html.parser")
    return [
        collapse_whitespace(span.get_text(" "))
        for span in soup.find_all("span")
        if HIGHLIGHT_COLOUR_RE.search(span.get("style") or "")
    ]
