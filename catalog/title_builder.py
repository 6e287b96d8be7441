"""
Title Builder

Composes the storefront title from the product type, vendor and the
search term the operator typed, then removes repeated words.

Example:
    >>> build_title("Deck", "Tilt", "Tilt Formula Deck")
    'Deck Tilt Formula'
    >>> dedupe_title_words("Trotineta Tilt Tilt Contact Pro Pro")
    'Trotineta Tilt Contact Pro'
"""

import re
from typing import Optional

from .text_normalizer import fold_accents


_WORD_RE = re.compile(r'\S+')
_KEY_STRIP_RE = re.compile(r'[^a-z0-9]+')


def _word_key(token: str) -> str:
    return _KEY_STRIP_RE.sub('', fold_accents(token).lower())


def to_title_case(text: Optional[str]) -> str:
    """Uppercase the first letter of every word, lowercase the rest."""
    if not text:
        return ""
    return _WORD_RE.sub(lambda m: m.group(0)[0].upper() + m.group(0)[1:].lower(), text)


def dedupe_title_words(title: Optional[str]) -> str:
    """
    Remove repeated words, keeping the first occurrence as written.

    Words are compared without accents, case or punctuation. Tokens that
    are pure punctuation ("-", "&") are always kept.
    """
    if not title:
        return title or ""

    seen = set()
    out = []
    for token in title.split():
        key = _word_key(token)
        if not key:
            out.append(token)
            continue
        if key not in seen:
            seen.add(key)
            out.append(token)

    return re.sub(r'\s{2,}', ' ', ' '.join(out)).strip()


def build_title(
    category_display: Optional[str],
    vendor: Optional[str],
    search_term: Optional[str],
) -> str:
    """
    Build a display title from its parts.

    Steps:
    1. Drop empty parts
    2. Drop whole parts that repeat an earlier part
    3. Title-case the joined string
    4. Drop repeated words

    Args:
        category_display: Product type word shown in the title
        vendor: Detected vendor
        search_term: Operator search term (usually the model name)

    Returns:
        Title string, "" when every part is empty
    """
    parts = [str(p).strip() for p in (category_display, vendor, search_term) if p is not None]
    parts = [p for p in parts if p]

    unique_parts = []
    seen_parts = set()
    for part in parts:
        key = fold_accents(part).lower()
        if key not in seen_parts:
            seen_parts.add(key)
            unique_parts.append(part)

    titled = to_title_case(' '.join(unique_parts))
    return dedupe_title_words(titled)


# === Testing ===
if __name__ == "__main__":
    test_cases = [
        (("Deck", "Tilt", "Tilt Formula Deck"), "Deck Tilt Formula"),
        (("Trotineta", "Root Industries", "root industries type r"), "Trotineta Root Industries Type R"),
        (("SCS", None, "Ethic SCS - Negru"), "Scs Ethic - Negru"),
        ((None, None, ""), ""),
    ]

    print("Title Builder Tests:")
    print("-" * 60)
    for args, expected in test_cases:
        result = build_title(*args)
        status = "✓" if result == expected else "✗"
        print(f"{status} {args} → '{result}' (expected: '{expected}')")
