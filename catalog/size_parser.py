"""
Size Parser

Reads size and colour markers from variant rows.

Size values are unified at extraction time into one of:
- Letter sizes: "XS", "S", "M", "L", "XL", "XXL", "XXXL"
- "One Size" (one size / universal markers)
- Number with unit: "110mm", "12cm", "4.5inch", '4.5"'
- Bare number: "110", "4.5"

Example:
    >>> extract_size_value("110mm approx 4 inch")
    '110mm'
    >>> extract_size_value("M / 38")
    'M'
"""

import re
from typing import Optional

from .text_normalizer import collapse_whitespace, fold_accents


ONE_SIZE = "One Size"

# === Size Patterns ===
# Ordered by precedence: the first rule that matches anywhere in the chunk
# wins, regardless of where later rules would match.

SIZE_PATTERNS = [
    # Letter sizes, longest first inside the alternation
    (
        re.compile(r'\b(XXXL|XXL|XL|XS|S|M|L)\b', re.IGNORECASE),
        'letter'
    ),

    # "One Size", "Marime universala", "Universal"
    (
        re.compile(r'\b(one\s*size|marime\s*universala|universala?)\b', re.IGNORECASE),
        'one_size'
    ),

    # Number with unit: "110mm", "4,5 inch", '4.5"'
    (
        re.compile(r'(\d+(?:[.,]\d+)?)\s*(mm|cm|inch|["”])', re.IGNORECASE),
        'with_unit'
    ),

    # Bare number
    (
        re.compile(r'(\d+(?:[.,]\d+)?)'),
        'bare'
    ),
]

# "Culoare: Negru", "Colour: Black", "Color: Red"
COLOUR_RE = re.compile(r'(?:Culoare|Colou?r)\s*:\s*([^)]+?)(?=$|\)|,)', re.IGNORECASE)

# "Mărime: M EAN ...", "Lungime: 110mm", "Înălțime: 85 cm", "Diametru: 110"
SIZE_LABEL_RE = re.compile(
    r'(?:Marime|Lungime|Inaltime|Diametru)\s*:\s*([\s\S]*?)(?=\s*(?:EAN|IN)\b|$)',
    re.IGNORECASE,
)


def _decimal_string(number: str) -> str:
    return number.replace(',', '.')


def extract_size_value(chunk: Optional[str]) -> Optional[str]:
    """
    Extract one size value from a chunk of row text.

    Args:
        chunk: Text following a size label

    Returns:
        Unified size string or None if the chunk holds no size
    """
    if not chunk:
        return None

    text = collapse_whitespace(fold_accents(chunk))

    for pattern, pattern_type in SIZE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        if pattern_type == 'letter':
            return match.group(1).upper()

        elif pattern_type == 'one_size':
            return ONE_SIZE

        elif pattern_type == 'with_unit':
            number = _decimal_string(match.group(1))
            unit = match.group(2).lower()
            if unit in ('"', '”'):
                return f'{number}"'
            return f"{number}{unit}"

        elif pattern_type == 'bare':
            return _decimal_string(match.group(1))

    return None


def extract_colour(text: Optional[str]) -> Optional[str]:
    """
    Extract the colour from a "Culoare: ..." marker.

    Example:
        >>> extract_colour("(Culoare: Negru/Alb)")
        'Negru/Alb'
    """
    if not text:
        return None
    match = COLOUR_RE.search(collapse_whitespace(text))
    if match:
        colour = match.group(1).strip()
        return colour or None
    return None


def extract_size_chunk(text: Optional[str]) -> Optional[str]:
    """
    Return the text after a size label, up to an EAN/IN marker.

    Example:
        >>> extract_size_chunk("Mărime: XL EAN 5901234")
        'XL'
    """
    if not text:
        return None
    match = SIZE_LABEL_RE.search(collapse_whitespace(fold_accents(text)))
    if match:
        chunk = match.group(1).strip()
        return chunk or None
    return None
