"""
Product Processor

Main orchestrator that transforms a RawScrapeSnapshot into a ProductRecord.
Combines title cleaning, vendor and type detection, variant parsing,
pricing and title building.

Usage:
    processor = ProductProcessor()

    # Transform single snapshot
    record = processor.transform(snapshot, search_term="Tilt Formula Deck")
    payload = record.to_dict()
"""

import logging
from typing import Dict, List, Optional

from .config import AppConfig, default_config
from .html_cleaner import clean_html, html_to_text
from .images import order_image_urls
from .pricing import PriceConverter, highest_amount
from .row_parser import build_colour_price_map, parse_variant_rows
from .schema import PipelineError, ProductOption, ProductRecord, RawScrapeSnapshot, Variant
from .text_normalizer import clean_title
from .title_builder import build_title
from .type_classifier import ProductTypeClassifier, apply_type_overrides, get_classifier
from .variants import VariantAssembler
from .vendor_extractor import detect_vendor

logger = logging.getLogger(__name__)

STATUS_OK = "ok"


def check_matrix(options: List[ProductOption], variants: List[Variant]) -> None:
    """
    Verify the option/variant invariants.

    Raises:
        ValueError: if a variant uses an undeclared value or a
            (colour, size) pair repeats
    """
    declared = [set(o.values) for o in options]
    seen = set()
    for variant in variants:
        values = [variant.option1] if variant.option2 is None else [variant.option1, variant.option2]
        if len(values) != len(declared):
            raise ValueError(f"Variant {values} does not match options {[o.name for o in options]}")
        for value, allowed in zip(values, declared):
            if value not in allowed:
                raise ValueError(f"Option value {value!r} is not declared")
        key = tuple(values)
        if key in seen:
            raise ValueError(f"Duplicate variant {key}")
        seen.add(key)


class ProductProcessor:
    """
    Processes raw page snapshots into storefront records.

    Runs every standardization step in the correct order. Missing vendor or
    type is a valid result; any other failure is reported once as a
    PipelineError carrying the stage status recorded so far.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        classifier: Optional[ProductTypeClassifier] = None,
        vendors: Optional[List[str]] = None,
    ):
        self.config = config or default_config
        self.classifier = classifier or get_classifier()
        self.vendors = vendors
        self.converter = PriceConverter.from_config(self.config.pricing)
        self.assembler = VariantAssembler(self.converter)
        self.stats = {
            'processed': 0,
            'vendors_detected': 0,
            'types_detected': 0,
            'variants_built': 0,
            'errors': 0,
        }

    def transform(
        self,
        snapshot: RawScrapeSnapshot,
        search_term: str,
        status: Optional[Dict[str, str]] = None,
    ) -> ProductRecord:
        """
        Transform a snapshot into a ProductRecord.

        Args:
            snapshot: Raw page data from the scraper
            search_term: Operator search term, used in the title
            status: Stage status mapping to extend (shared with the caller)

        Returns:
            Complete ProductRecord

        Raises:
            PipelineError: on any unexpected failure
        """
        status = status if status is not None else {}
        self.stats['processed'] += 1

        try:
            return self._build(snapshot, search_term, status)
        except Exception as e:
            self.stats['errors'] += 1
            logger.exception(f"Standardization failed for {search_term!r}")
            raise PipelineError(f"Standardization failed: {e}", status) from e

    def _build(self, snapshot: RawScrapeSnapshot, search_term: str, status: Dict[str, str]) -> ProductRecord:
        # Step 1: Clean title
        product_title = clean_title(snapshot.raw_title)

        # Step 2: Vendor and type, page text first then title
        vendor = (detect_vendor(snapshot.full_page_text, self.vendors)
                  or detect_vendor(product_title, self.vendors))
        product_type = (self.classifier.classify(snapshot.full_page_text)
                        or self.classifier.classify(product_title))
        if vendor:
            self.stats['vendors_detected'] += 1
        if product_type:
            self.stats['types_detected'] += 1
        logger.info(f"Classified {product_title!r}: vendor={vendor}, type={product_type}")
        status['classify'] = STATUS_OK

        # Step 3: Variant rows and prices
        fallback_price = highest_amount(snapshot.full_page_text)
        parsed = parse_variant_rows(snapshot.rows)
        colour_prices = {} if parsed.sizes else build_colour_price_map(snapshot.rows, parsed.rows)
        logger.debug(f"Colours: {parsed.colours}, sizes: {parsed.sizes}, fallback: {fallback_price}")

        options, variants = self.assembler.assemble(
            parsed.colours, parsed.sizes, parsed.rows, colour_prices, fallback_price,
        )
        check_matrix(options, variants)
        self.stats['variants_built'] += len(variants)
        status['variants'] = STATUS_OK

        # Step 4: Description and specs
        description_html = clean_html(snapshot.description_html)
        specs_html = clean_html(snapshot.specs_html)

        # Step 5: Business overrides, then title
        resolution = apply_type_overrides(product_type, product_title, html_to_text(snapshot.specs_html))
        title = build_title(resolution.display_type, vendor, search_term)
        status['title'] = STATUS_OK

        # Step 6: Gallery order
        image_urls = order_image_urls(snapshot.thumbnail_url, snapshot.image_urls)

        return ProductRecord(
            title=title,
            vendor=vendor,
            tag=vendor,
            product_type=resolution.product_type,
            options=options,
            variants=variants,
            colours=list(parsed.colours),
            sizes=list(parsed.sizes),
            description_html=description_html,
            specs_html=specs_html,
            image_urls=image_urls,
            status=status,
        )

    def get_stats(self) -> Dict[str, int]:
        """Return processing statistics."""
        return self.stats.copy()

    def reset_stats(self):
        """Reset processing statistics."""
        self.stats = {
            'processed': 0,
            'vendors_detected': 0,
            'types_detected': 0,
            'variants_built': 0,
            'errors': 0,
        }


# === Convenience Functions ===

def standardize_snapshot(snapshot: RawScrapeSnapshot, search_term: str) -> ProductRecord:
    """
    Convenience function to standardize a single snapshot.

    Example:
        record = standardize_snapshot(snapshot, "Tilt Formula Deck")
    """
    processor = ProductProcessor()
    return processor.transform(snapshot, search_term)
