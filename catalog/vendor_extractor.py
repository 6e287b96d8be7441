"""
Vendor Extractor

Detects the vendor (brand) of a product from page text using a fixed
catalog of supplier vendor names.

Vendor names nest ("Root" / "Root Industries", "North" / "North
Scooters"), so the catalog is checked longest name first and the most
specific match wins.

Example:
    "Root Industries Scooter Deck" → vendor="Root Industries"
    "Trotineta Tilt Formula"       → vendor="Tilt"
"""

from typing import Iterable, Optional, Tuple

from .text_normalizer import contains_word


# === Known Vendor Catalog ===
# Display names as they should appear on the storefront.

SUPPLIER_VENDORS = (
    "Revolution Supply Co", "Radio Bike Co", "Cadillac Wheels", "Retrospec", "Reversal",
    "Whitespace", "GoZone Skimboards", "DB Skimboards", "Family", "Colony", "Dominator",
    "Drone", "Dial 911", "Habitat Skateboards", "Meow Skateboards", "Ocean Pacific",
    "Root Industries", "Triple Eight", "Essentials Skateboarding", "Grit", "Salt", "Sisu",
    "TLC", "Apex", "Academy", "Alien Workshop", "Blueprint BMXFIX", "BSD", "Cadillac",
    "Core", "Crisp", "Division", "Doomed", "Drone Scooters", "Eclat", "Eight Ball",
    "Fiction BMX", "Figz Collection", "Flexsurfing", "Flypaper", "Fuse", "Graw Jump Ramps",
    "Habitat", "HangUp", "Heart Supply", "Hella Grip", "Hohing", "Indo", "JD Bug", "Jessup",
    "KFD", "Kitefix", "Longway", "Lucky", "Madrid", "Mafia", "Native", "North Scooters",
    "North", "Panda", "Pivot", "Prime8", "Primus", "Proto", "RAD Skateboards", "Rampage",
    "River", "Roces", "Rocker", "Root", "Skatemate", "Speed Demons", "Stolen", "Striker",
    "Supreme", "Tall Order", "Tempish", "Tilt", "Triple Skate Hook", "Trynyty", "Venom",
    "Venor Skates", "Verb", "Wethepeople", "Wildcat", "Zoo York", "Odi",
)


def build_catalog(vendors: Iterable[str]) -> Tuple[str, ...]:
    """
    Deduplicate vendor names and sort them longest first.

    Ties keep their declared order (sorted() is stable).

    Example:
        >>> build_catalog(["Root", "Root Industries", "Root"])
        ('Root Industries', 'Root')
    """
    unique = []
    seen = set()
    for vendor in vendors:
        name = (vendor or "").strip()
        if name and name not in seen:
            seen.add(name)
            unique.append(name)
    return tuple(sorted(unique, key=len, reverse=True))


# Sorted by length (longest first) for greedy matching
VENDORS: Tuple[str, ...] = build_catalog(SUPPLIER_VENDORS)


def detect_vendor(text: Optional[str], vendors: Optional[Iterable[str]] = None) -> Optional[str]:
    """
    Detect the vendor named in a piece of text.

    Args:
        text: Page text or product title
        vendors: Optional custom catalog; sorted longest first before use

    Returns:
        Canonical vendor name if found, None otherwise

    Example:
        >>> detect_vendor("Root Industries Scooter Deck")
        'Root Industries'
        >>> detect_vendor("Tiltable stand")
    """
    if not text:
        return None

    catalog = VENDORS if vendors is None else build_catalog(vendors)
    for vendor in catalog:
        if contains_word(text, vendor):
            return vendor

    return None
