"""
Variant Row Parser

Walks the text blocks of a product page in document order. Colour headers
("Culoare: Negru") set the colour for the size rows that follow them; size
rows ("Mărime: M ... 38,00 €") become VariantRows.
"""

import logging
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Optional

from .html_cleaner import highlighted_texts
from .pricing import extract_amounts, highest_amount, pick_canonical_amount
from .schema import RawTextBlock, VariantRow
from .size_parser import extract_colour, extract_size_chunk, extract_size_value
from .text_normalizer import collapse_whitespace

logger = logging.getLogger(__name__)


class ParsedVariants(NamedTuple):
    rows: List[VariantRow]
    colours: List[str]
    sizes: List[str]


def _add_unique(values: List[str], value: Optional[str]) -> None:
    if value and value not in values:
        values.append(value)


def row_price(block: RawTextBlock) -> Optional[Decimal]:
    """
    Source price of a size row.

    The highlighted price span wins when it holds an amount; otherwise the
    largest amount in the row text is used.
    """
    highlighted = highlighted_texts(block.html)
    if highlighted:
        price = pick_canonical_amount(extract_amounts(highlighted[0]))
        if price is not None:
            return price
    return highest_amount(block.text)


def parse_variant_rows(blocks: Iterable[RawTextBlock]) -> ParsedVariants:
    """
    Parse colour headers and size rows.

    Args:
        blocks: Text blocks in document order

    Returns:
        ParsedVariants with rows plus the distinct colours and sizes seen,
        both in first-seen order
    """
    rows: List[VariantRow] = []
    colours: List[str] = []
    sizes: List[str] = []
    current_colour = None

    for block in blocks:
        text = collapse_whitespace(block.text)
        if not text:
            continue

        header_colour = extract_colour(text)
        if header_colour:
            current_colour = header_colour
            _add_unique(colours, current_colour)
            continue

        chunk = extract_size_chunk(text)
        if not chunk:
            continue

        size = extract_size_value(chunk)
        if not size:
            continue
        _add_unique(sizes, size)

        price = row_price(block)
        if price is None:
            logger.debug(f"No price on size row {size!r} ({current_colour!r})")

        rows.append(VariantRow(colour=current_colour, size=size, price_source=price))

    return ParsedVariants(rows, colours, sizes)


def build_colour_price_map(
    blocks: Iterable[RawTextBlock],
    rows: Iterable[VariantRow] = (),
) -> Dict[str, Optional[Decimal]]:
    """
    Map each colour to the highest amount listed under its header.

    Used when the page has colours but no sizes. Prices already parsed on
    rows are merged in as well.

    Returns:
        Dict of colour → source price (None when the section had no amount)
    """
    prices: Dict[str, Optional[Decimal]] = {}
    current_colour = None

    for block in blocks:
        text = collapse_whitespace(block.text)
        if not text:
            continue

        header_colour = extract_colour(text)
        if header_colour:
            current_colour = header_colour
            prices.setdefault(current_colour, None)
            continue

        if current_colour:
            _merge_price(prices, current_colour, highest_amount(text))

    for row in rows:
        if row.colour and row.price_source is not None:
            _merge_price(prices, row.colour, row.price_source)

    return prices


def _merge_price(prices: Dict[str, Optional[Decimal]], colour: str, amount: Optional[Decimal]) -> None:
    if amount is None:
        return
    existing = prices.get(colour)
    prices[colour] = amount if existing is None else max(existing, amount)
