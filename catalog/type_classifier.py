"""
Product Type Classifier

Classifies products into the storefront's product types using three tiers,
evaluated in strict order (first hit wins):

1. Hard override: clamp vocabulary ("clamp", "clemă", "SCS") → "Clamp"
2. Alias rules: ordered (label, patterns) table of synonyms
3. Literal fallback: whole-word match on the canonical type names

All rules run over normalized text (accents folded, lowercase).

Example:
    classifier = ProductTypeClassifier()
    classifier.classify("SCS Clamp Universal Bolt Kit")
    # Returns: 'Clamp'
"""

import logging
import re
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple

from .text_normalizer import contains_word, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TypeRule:
    """A canonical product type and the patterns that select it."""
    label: str
    patterns: Tuple[re.Pattern, ...]

    def matches(self, normalized_text: str) -> bool:
        return any(p.search(normalized_text) for p in self.patterns)


def _rule(label: str, *patterns: str) -> TypeRule:
    return TypeRule(label, tuple(re.compile(p, re.IGNORECASE) for p in patterns))


# === Canonical Product Types ===

PRODUCT_TYPES: Tuple[str, ...] = (
    "Adaptor", "Bar End", "BPM", "Casca", "Ceara", "Clamp", "Complete", "Deck", "Deck End",
    "Distantieri", "Diverse", "Frana", "Furca", "Genunchiere", "Ghidon", "Glezniere", "Griptape",
    "Headset", "Imbracaminte", "Imbus", "Inbus", "Kendama", "Mansoane", "Peg", "Roti", "Roata",
    "Roți", "Rulmenti", "Sporting Goods", "Stand", "Sticker", "Suruburi", "Talpici",
)

CLAMP = "Clamp"

# Clamp vocabulary collides with hardware terms in later rules, so it is
# checked before the alias table.
CLAMP_OVERRIDE = _rule(
    CLAMP,
    r'\bclamps?\b',
    r'\bclema\b',       # "Clemă"
    r'\bscs\b',
)

# === Alias Table ===
# Order is significant: the first matching rule wins. "tool" is listed
# under Imbus and must stay after the more specific rules.

TYPE_ALIASES: Tuple[TypeRule, ...] = (
    _rule("Mansoane",
          r'\bmans?oane\b',     # Mansoane, Manșoane
          r'\bgrips?\b'),
    _rule("Bar End",
          r'\bbar\s*end(s)?\b',
          r'\bbar-?ends?\b',
          r'\bbarends?\b'),
    _rule(CLAMP,
          r'\bclamps?\b',
          r'\bclema\b',
          r'\bscs\b'),
    _rule("Adaptor",
          r'\badaptors?\b',
          r'\badapters?\b',
          r'\bshim(s)?\b',
          r'\bc[-\s]?ring\b',
          r'\bsleeves?\b'),
    _rule("Distantieri",
          r'\bspacer(s)?\b',
          r'\bdistantier(i)?\b'),
    _rule("Deck End",
          r'\bdeck\s*end(s)?\b',
          r'\bplugs?\b'),
    _rule("Ceara",
          r'\bceara\b',
          r'\bwax\b'),
    _rule("Stand",
          r'\bstand\b'),
    _rule("Top Cap",
          r'\btop\s*cap\b',
          r'\bstar[-\s]?nut\b',
          r'\bstarnut\b'),
    _rule("Suruburi",           # bolts, nuts, axles
          r'\bbolt(s)?\b',
          r'\bsurub(uri)?\b',
          r'\bnut(s)?\b',
          r'\bpiulita\b',
          r'\bax\b',
          r'\bosie(i)?\b'),
    _rule("Rulmenti",           # bearings
          r'\bbearing(s)?\b',
          r'\brulment(i)?\b'),
    _rule("Imbus",              # tools
          r'\btool(s)?\b',
          r'\bimbus\b',
          r'\binbus\b'),
)


class ProductTypeClassifier:
    """
    Pattern-based product type classifier.

    The alias table and type list can be replaced for testing; both are
    kept as tuples so their order is fixed.
    """

    def __init__(
        self,
        aliases: Sequence[TypeRule] = TYPE_ALIASES,
        product_types: Sequence[str] = PRODUCT_TYPES,
        override: Optional[TypeRule] = CLAMP_OVERRIDE,
    ):
        self.aliases = tuple(aliases)
        self.product_types = tuple(product_types)
        self.override = override

    def classify(self, text: Optional[str]) -> Optional[str]:
        """
        Classify text into a canonical product type.

        Args:
            text: Page text or product title

        Returns:
            Canonical product type or None if nothing matched
        """
        ntext = normalize(text)
        if not ntext:
            return None

        # Tier 1: hard override
        if self.override is not None and self.override.matches(ntext):
            return self.override.label

        # Tier 2: aliases, in declared order
        for rule in self.aliases:
            if rule.matches(ntext):
                return rule.label

        # Tier 3: literal canonical names
        for product_type in self.product_types:
            if contains_word(ntext, product_type):
                return product_type

        return None


class TypeResolution(NamedTuple):
    """Stored product type and the word shown in the title."""
    product_type: Optional[str]
    display_type: Optional[str]


# Spec sheet rows that only complete scooters have
_HANDLEBAR_HEIGHT = normalize("Înălțime Ghidon")
_DECK_LENGTH = normalize("Lungime Deck")
COMPLETE = "Complete"
COMPLETE_DISPLAY = "Trotineta"
SCS = "SCS"


def is_complete_scooter(specs_text: Optional[str]) -> bool:
    """True if the spec sheet lists both handlebar height and deck length."""
    nspecs = normalize(specs_text)
    return _HANDLEBAR_HEIGHT in nspecs and _DECK_LENGTH in nspecs


def is_scs(title: Optional[str]) -> bool:
    return bool(title) and re.search(r'\bscs\b', title, re.IGNORECASE) is not None


def apply_type_overrides(
    product_type: Optional[str],
    raw_title: Optional[str],
    specs_text: Optional[str],
) -> TypeResolution:
    """
    Business rules applied after classification.

    - A spec sheet with handlebar height and deck length means a complete
      scooter: stored as "Complete", shown as "Trotineta".
    - A clamp whose title says "SCS" is shown as "SCS" but stored as "Clamp".

    Example:
        >>> apply_type_overrides("Clamp", "Clamp SCS Tilt", None)
        TypeResolution(product_type='Clamp', display_type='SCS')
    """
    display_type = product_type

    if is_complete_scooter(specs_text):
        logger.debug(f"Complete scooter spec sheet detected (was {product_type!r})")
        product_type = COMPLETE
        display_type = COMPLETE_DISPLAY

    if product_type == CLAMP and is_scs(raw_title):
        display_type = SCS

    return TypeResolution(product_type, display_type)


# === Convenience Functions ===

_classifier = None


def get_classifier() -> ProductTypeClassifier:
    """Get or create singleton classifier instance."""
    global _classifier
    if _classifier is None:
        _classifier = ProductTypeClassifier()
    return _classifier


def detect_product_type(text: Optional[str]) -> Optional[str]:
    """
    Convenience function to classify a single text.

    Example:
        >>> detect_product_type("Set 4 Bolts M8")
        'Suruburi'
    """
    return get_classifier().classify(text)
