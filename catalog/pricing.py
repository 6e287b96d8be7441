"""
Variant Pricing

Finds euro amounts in supplier text and converts them to storefront prices.

Storefront prices are rounded UP to the next price bucket (5 RON by
default) and shifted down by 0.01, so every price ends in ".99":

    38.00 EUR × 4.97 = 188.86 RON → 190 → "189.99"

Handles amount formats:
- "38 €", "38,50 €", "38.50€"
- Thousands separators: "1.234,56 €", "1,234.56 €", "1 299 €"
- "EUR" suffix instead of the symbol
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_CEILING
from typing import List, Optional, Sequence, Union

from .config import ConfigError, PricingConfig


Number = Union[Decimal, int, float, str]

_CENT = Decimal("0.01")

# Grouped thousands first, then a plain number; must be followed by a
# currency marker. Groups may be split by ".", ",", a space or NBSP.
AMOUNT_RE = re.compile(
    r'(?<![\d.,])'
    r'(\d{1,3}(?:[., \u00a0\u202f]\d{3})+(?:[.,]\d{1,2})?|\d+(?:[.,]\d+)?)'
    r'\s*(?:€|EUR\b)',
    re.IGNORECASE,
)

_SPACE_RE = re.compile(r'[\s\u00a0\u202f]+')


def parse_amount(token: str) -> Optional[Decimal]:
    """
    Parse a number written with either separator convention.

    - Both "." and "," present: the last one is the decimal separator
    - One separator used more than once: thousands separator
    - One separator followed by exactly three digits: thousands separator
    - Otherwise: decimal separator

    Spaces (including NBSP) only ever group thousands.

    Example:
        >>> parse_amount("1.234,56")
        Decimal('1234.56')
        >>> parse_amount("38,50")
        Decimal('38.50')
        >>> parse_amount("1 299")
        Decimal('1299')
    """
    if not token:
        return None

    token = _SPACE_RE.sub('', token)
    if ',' in token and '.' in token:
        decimal_sep = ',' if token.rfind(',') > token.rfind('.') else '.'
        thousands_sep = '.' if decimal_sep == ',' else ','
        token = token.replace(thousands_sep, '').replace(decimal_sep, '.')
    else:
        for sep in (',', '.'):
            if sep not in token:
                continue
            head, _, tail = token.rpartition(sep)
            if token.count(sep) > 1 or len(tail) == 3:
                token = token.replace(sep, '')
            else:
                token = head.replace(sep, '') + '.' + tail
            break

    try:
        return Decimal(token)
    except InvalidOperation:
        return None


def extract_amounts(text: Optional[str]) -> List[Decimal]:
    """
    Find every currency-marked amount in a text block.

    Example:
        >>> extract_amounts("Pret vechi 42,00 € Pret nou 38,00 €")
        [Decimal('42.00'), Decimal('38.00')]
    """
    if not text:
        return []

    amounts = []
    for match in AMOUNT_RE.finditer(text):
        value = parse_amount(match.group(1))
        if value is not None:
            amounts.append(value)
    return amounts


def pick_canonical_amount(amounts: Sequence[Decimal]) -> Optional[Decimal]:
    """
    Choose the source price from the amounts found in one block.

    When a block shows an original and a discounted price the higher one is
    taken. This is a heuristic: some layouts strike through the higher
    original price.
    """
    if not amounts:
        return None
    return max(amounts)


def highest_amount(text: Optional[str]) -> Optional[Decimal]:
    """Largest currency amount in the text, or None."""
    return pick_canonical_amount(extract_amounts(text))


def _to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


class PriceConverter:
    """
    Converts source-currency amounts to bucketed storefront prices.

    Args:
        rate: Target units per source unit
        bucket_size: Prices are rounded up to a multiple of this
    """

    def __init__(self, rate: Number, bucket_size: Number = 5):
        try:
            rate, bucket_size = _to_decimal(rate), _to_decimal(bucket_size)
        except InvalidOperation as e:
            raise ConfigError(f"Invalid pricing values: rate={rate!r}, bucket_size={bucket_size!r}") from e
        self.config = PricingConfig(rate=rate, bucket_size=bucket_size)

    @classmethod
    def from_config(cls, config: PricingConfig) -> "PriceConverter":
        return cls(config.rate, config.bucket_size)

    @property
    def rate(self) -> Decimal:
        return self.config.rate

    @property
    def bucket_size(self) -> Decimal:
        return self.config.bucket_size

    def convert(self, amount: Optional[Number]) -> Optional[str]:
        """
        Convert an amount to a PriceTarget string.

        Returns None for a missing amount; never "0.00".
        """
        if amount is None:
            return None

        converted = _to_decimal(amount) * self.rate
        buckets = (converted / self.bucket_size).to_integral_value(rounding=ROUND_CEILING)
        # Zero or negative source amounts land in the first bucket
        if buckets < 1:
            buckets = Decimal(1)

        target = buckets * self.bucket_size - _CENT
        return f"{target.quantize(_CENT):.2f}"


def convert(amount: Optional[Number], rate: Number, bucket_size: Number = 5) -> Optional[str]:
    """
    Convenience function for a single conversion.

    Example:
        >>> convert(Decimal("38.00"), Decimal("4.97"))
        '189.99'
        >>> convert(None, Decimal("4.97"))
    """
    return PriceConverter(rate, bucket_size).convert(amount)
