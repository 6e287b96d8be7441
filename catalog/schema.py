"""
Catalog Import Schema

Typed records flowing through the pipeline:

    RawScrapeSnapshot  ->  (classification, variants)  ->  ProductRecord

A snapshot is produced once per request by a scraper and never mutated.
A ProductRecord is the storefront-ready output; `to_dict()` gives the flat
object returned over HTTP.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Dict, Any, List, Tuple


# Fixed inventory metadata carried by every variant
INVENTORY_POLICY = "continue"
INVENTORY_MANAGEMENT = "shopify"
DEFAULT_OPTION_VALUE = "Default"


@dataclass(frozen=True)
class RawTextBlock:
    """
    One row of a variant table, or a colour header.

    `text` is the rendered text of the element; `html` holds its markup
    when the price needs to be read from a specific sub-element.
    """
    text: str
    html: Optional[str] = None


@dataclass(frozen=True)
class RawScrapeSnapshot:
    """Everything the scraper captured from one product page."""
    raw_title: str
    full_page_text: str
    rows: Tuple[RawTextBlock, ...] = ()
    thumbnail_url: Optional[str] = None
    image_urls: Tuple[str, ...] = ()
    description_html: Optional[str] = None
    specs_html: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawScrapeSnapshot":
        """Create a snapshot from its JSON form (camelCase or snake_case keys)."""
        def pick(*keys, default=None):
            for key in keys:
                if data.get(key) is not None:
                    return data[key]
            return default

        rows = []
        for row in pick('rows', default=[]):
            if isinstance(row, str):
                rows.append(RawTextBlock(text=row))
            else:
                rows.append(RawTextBlock(text=row.get('text') or '', html=row.get('html')))

        return cls(
            raw_title=pick('raw_title', 'rawTitle', default=''),
            full_page_text=pick('full_page_text', 'fullPageText', default=''),
            rows=tuple(rows),
            thumbnail_url=pick('thumbnail_url', 'thumbnailUrl'),
            image_urls=tuple(pick('image_urls', 'imageUrls', default=[])),
            description_html=pick('description_html', 'descriptionHtml'),
            specs_html=pick('specs_html', 'specsHtml'),
        )


@dataclass(frozen=True)
class VariantRow:
    """A parsed variant row. `price_source` is in the source currency."""
    colour: Optional[str] = None
    size: Optional[str] = None
    price_source: Optional[Decimal] = None


@dataclass
class ProductOption:
    name: str
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "values": list(self.values)}


@dataclass
class Variant:
    """
    A priced storefront variant.

    `price` is a PriceTarget string ("189.99") or None when no source amount
    was found. It is never coerced to zero.
    """
    option1: str
    option2: Optional[str] = None
    price: Optional[str] = None
    inventory_policy: str = INVENTORY_POLICY
    taxable: bool = False
    inventory_management: str = INVENTORY_MANAGEMENT

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"option1": self.option1}
        if self.option2 is not None:
            out["option2"] = self.option2
        out.update({
            "price": self.price,
            "inventory_policy": self.inventory_policy,
            "taxable": self.taxable,
            "inventory_management": self.inventory_management,
        })
        return out


@dataclass
class ProductRecord:
    """
    Storefront-ready product.

    Required fields for import:
    - title, options, variants

    vendor/tag/product_type may be absent: an unclassified product is a
    valid outcome, not a failure.
    """

    # === Identity ===
    title: str

    # === Classification ===
    vendor: Optional[str] = None
    tag: Optional[str] = None
    product_type: Optional[str] = None

    # === Option/variant matrix ===
    options: List[ProductOption] = field(default_factory=list)
    variants: List[Variant] = field(default_factory=list)
    colours: List[str] = field(default_factory=list)
    sizes: List[str] = field(default_factory=list)

    # === Content ===
    description_html: Optional[str] = None
    specs_html: Optional[str] = None
    image_urls: List[str] = field(default_factory=list)

    # === Diagnostics ===
    status: Dict[str, str] = field(default_factory=dict)

    @property
    def count(self) -> int:
        """Number of gallery images discovered for the product."""
        return len(self.image_urls)

    def to_dict(self) -> Dict[str, Any]:
        """Flat output object for the catalog-submission step."""
        out: Dict[str, Any] = {
            "success": True,
            "title": self.title,
        }
        if self.vendor:
            out["vendor"] = self.vendor
        if self.tag:
            out["tag"] = self.tag
        out.update({
            "product_type": self.product_type or "",
            "options": [o.to_dict() for o in self.options],
            "variants": [v.to_dict() for v in self.variants],
            "description_html": self.description_html,
            "specs_html": self.specs_html,
            "colours": list(self.colours),
            "sizes": list(self.sizes),
            "imageUrls": list(self.image_urls),
            "count": self.count,
            "status": dict(self.status),
        })
        return out


class PipelineError(Exception):
    """
    Single structured failure raised at the pipeline boundary.

    Carries the per-stage status recorded before the failure.
    """
    def __init__(self, message: str, status: Optional[Dict[str, str]] = None):
        self.status = dict(status or {})
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": str(self), "status": dict(self.status)}
