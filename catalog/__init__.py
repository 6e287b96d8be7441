"""
Centrano Catalog Import

Turns a supplier product page snapshot into a storefront-ready record.

Key Components:
- RawScrapeSnapshot / ProductRecord: Input and output schema
- normalize / contains_word: Accent-folded matching helpers
- detect_vendor: Longest-name-first vendor detection
- ProductTypeClassifier: Override → alias table → literal type detection
- build_title: Title composition with word dedupe
- PriceConverter: EUR → RON bucketed ".99" pricing
- VariantAssembler: Option/variant matrix
- ProductProcessor: Main orchestrator
"""

from .config import AppConfig, PricingConfig, ImageConfig, ConfigError, load_config
from .schema import (
    RawScrapeSnapshot,
    RawTextBlock,
    VariantRow,
    ProductOption,
    Variant,
    ProductRecord,
    PipelineError,
)
from .text_normalizer import normalize, contains_word, fold_accents, clean_title
from .vendor_extractor import detect_vendor, VENDORS
from .type_classifier import (
    ProductTypeClassifier,
    TypeRule,
    detect_product_type,
    apply_type_overrides,
    PRODUCT_TYPES,
    TYPE_ALIASES,
)
from .title_builder import build_title, dedupe_title_words
from .pricing import extract_amounts, pick_canonical_amount, PriceConverter, convert
from .size_parser import extract_size_value, extract_colour
from .variants import VariantAssembler
from .processor import ProductProcessor, standardize_snapshot

__all__ = [
    # Configuration
    'AppConfig',
    'PricingConfig',
    'ImageConfig',
    'ConfigError',
    'load_config',

    # Schema
    'RawScrapeSnapshot',
    'RawTextBlock',
    'VariantRow',
    'ProductOption',
    'Variant',
    'ProductRecord',
    'PipelineError',

    # Text
    'normalize',
    'contains_word',
    'fold_accents',
    'clean_title',

    # Classification
    'detect_vendor',
    'VENDORS',
    'ProductTypeClassifier',
    'TypeRule',
    'detect_product_type',
    'apply_type_overrides',
    'PRODUCT_TYPES',
    'TYPE_ALIASES',

    # Title
    'build_title',
    'dedupe_title_words',

    # Pricing and variants
    'extract_amounts',
    'pick_canonical_amount',
    'PriceConverter',
    'convert',
    'extract_size_value',
    'extract_colour',
    'VariantAssembler',

    # Processor
    'ProductProcessor',
    'standardize_snapshot',
]
