"""
Text Normalizer

Canonical forms of supplier text for matching. The original text is never
modified in place; callers keep it for display and only compare the
normalized forms.

Key functions:
1. normalize: fold accents, lowercase, collapse whitespace
2. contains_word: whole-word containment on normalized forms
3. clean_title: strip page artefacts from a raw product title

Example:
    >>> normalize("  Înălțime   Ghidon ")
    'inaltime ghidon'
    >>> contains_word("Tiltable stand", "Tilt")
    False
"""

import re
import unicodedata
from typing import Optional


_WHITESPACE_RE = re.compile(r'\s+')
_NON_ALNUM_RE = re.compile(r'[^0-9a-z]+')

# Page artefacts that leak into the title text
_ZOOM_ARTEFACT_RE = re.compile(r'\bzoom[_-]?in\b', re.IGNORECASE)
_COLOUR_SUFFIX_RE = re.compile(r'\s*\(Culoare:[^)]+?\)\s*$', re.IGNORECASE)


def fold_accents(text: Optional[str]) -> str:
    """
    Remove diacritical marks, keeping case and spacing.

    Romanian ă/â/î/ș/ț (comma-below and cedilla forms) all decompose
    under NFD, so dropping combining marks is enough.

    Example:
        >>> fold_accents("Mănușă Șuruburi")
        'Manusa Suruburi'
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize('NFD', text)
    return ''.join(ch for ch in decomposed if not unicodedata.combining(ch))


def collapse_whitespace(text: Optional[str]) -> str:
    if not text:
        return ""
    return _WHITESPACE_RE.sub(' ', text).strip()


def normalize(text: Optional[str]) -> str:
    """
    Create the normalized form used for matching.

    - Diacritics removed
    - Lowercase
    - Whitespace runs collapsed to a single space

    Never raises; empty or missing input gives "".
    """
    if not text:
        return ""
    return collapse_whitespace(fold_accents(str(text)).lower())


def match_key(text: Optional[str]) -> str:
    """
    Normalized form with punctuation runs turned into spaces.

    Example:
        >>> match_key("Bar-Ends (x2)")
        'bar ends x2'
    """
    return collapse_whitespace(_NON_ALNUM_RE.sub(' ', normalize(text)))


def contains_word(haystack: Optional[str], word: Optional[str]) -> bool:
    """
    Whole-word containment check on normalized forms.

    Both sides are padded with a boundary space so "Tilt" is found in
    "Tilt Formula" but not in "Tiltable".

    Args:
        haystack: Text to search
        word: Word or phrase to look for

    Returns:
        True if `word` occurs as whole words in `haystack`
    """
    needle = match_key(word)
    if not needle:
        return False
    return f" {needle} " in f" {match_key(haystack)} "


def clean_title(raw_title: Optional[str]) -> str:
    """
    Clean a raw product title captured from the page.

    Removes zoom widget artefacts and a trailing "(Culoare: ...)" suffix,
    then normalizes whitespace. Casing and diacritics are preserved.

    Example:
        >>> clean_title("Deck Tilt Formula zoom_in (Culoare: Negru)")
        'Deck Tilt Formula'
    """
    cleaned = collapse_whitespace(raw_title)
    cleaned = _ZOOM_ARTEFACT_RE.sub('', cleaned)
    cleaned = _COLOUR_SUFFIX_RE.sub('', cleaned)
    return collapse_whitespace(cleaned)
