"""
Variant Assembler

Builds the storefront option/variant matrix from parsed colours, sizes and
row prices. Three data shapes are supported:

- Sized:       options Colour + Size, one variant per (colour, size)
- Colour-only: option Colour, one variant per colour
- Default:     option Colour = ["Default"], one variant

Every option value used by a variant is declared on its option, and no
(colour, size) pair appears twice.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from .pricing import PriceConverter
from .schema import DEFAULT_OPTION_VALUE, ProductOption, Variant, VariantRow

logger = logging.getLogger(__name__)

COLOUR_OPTION = "Colour"
SIZE_OPTION = "Size"


class VariantAssembler:
    """Assembles options and priced variants."""

    def __init__(self, converter: PriceConverter):
        self.converter = converter

    def assemble(
        self,
        colours: Sequence[str],
        sizes: Sequence[str],
        rows: Sequence[VariantRow],
        colour_price_map: Optional[Dict[str, Optional[Decimal]]] = None,
        fallback_price: Optional[Decimal] = None,
    ) -> Tuple[List[ProductOption], List[Variant]]:
        """
        Build options and variants for one product.

        Args:
            colours: Distinct colours observed on the page
            sizes: Distinct sizes observed on the page
            rows: Parsed size rows
            colour_price_map: Colour → source price, for the colour-only shape
            fallback_price: Page-wide source price used when a row or
                colour has no price of its own

        Returns:
            Tuple of (options, variants)
        """
        if sizes:
            options, variants = self._assemble_sized(colours, sizes, rows, fallback_price)
            shape = "sized"
        else:
            options, variants = self._assemble_by_colour(colours, colour_price_map or {}, fallback_price)
            shape = "colour-only" if colours else "default"

        logger.info(f"Variants: {len(variants)} ({shape}), options: {[o.name for o in options]}")
        return options, variants

    def _assemble_sized(
        self,
        colours: Sequence[str],
        sizes: Sequence[str],
        rows: Sequence[VariantRow],
        fallback_price: Optional[Decimal],
    ) -> Tuple[List[ProductOption], List[Variant]]:
        colour_values = list(colours)
        size_values = list(sizes)
        default_colour = colour_values[0] if colour_values else DEFAULT_OPTION_VALUE

        variants = []
        seen = set()
        for row in rows:
            if not row.size:
                continue
            colour = row.colour or default_colour
            key = (colour, row.size)
            if key in seen:
                continue
            seen.add(key)

            if colour not in colour_values:
                colour_values.append(colour)
            if row.size not in size_values:
                size_values.append(row.size)

            source = row.price_source if row.price_source is not None else fallback_price
            variants.append(self._variant(colour, row.size, source))

        options = [
            ProductOption(COLOUR_OPTION, colour_values),
            ProductOption(SIZE_OPTION, size_values),
        ]
        return options, variants

    def _assemble_by_colour(
        self,
        colours: Sequence[str],
        colour_price_map: Dict[str, Optional[Decimal]],
        fallback_price: Optional[Decimal],
    ) -> Tuple[List[ProductOption], List[Variant]]:
        colour_values = list(colours) or [DEFAULT_OPTION_VALUE]

        variants = []
        for colour in colour_values:
            source = colour_price_map.get(colour)
            if source is None:
                source = fallback_price
            variants.append(self._variant(colour, None, source))

        return [ProductOption(COLOUR_OPTION, colour_values)], variants

    def _variant(self, colour: str, size: Optional[str], source: Optional[Decimal]) -> Variant:
        return Variant(option1=colour, option2=size, price=self.converter.convert(source))
