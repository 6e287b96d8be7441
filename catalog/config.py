"""
Catalog Import Configuration

Central configuration for pricing, image handling and snapshot sources.
Values can be overridden through environment variables so the exchange
rate can change without touching the matching code.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Optional


class ConfigError(ValueError):
    """Raised when a configuration value is unusable."""


@dataclass(frozen=True)
class PricingConfig:
    """Currency conversion settings"""
    rate: Decimal = Decimal("4.97")          # EUR -> RON
    bucket_size: Decimal = Decimal("5")      # round up to 5 RON steps
    source_currency: str = "EUR"
    target_currency: str = "RON"

    def __post_init__(self):
        if self.rate <= 0:
            raise ConfigError(f"Invalid conversion rate: {self.rate}")
        # Whole buckets keep every price ending in .99
        if self.bucket_size <= 0 or self.bucket_size != self.bucket_size.to_integral_value():
            raise ConfigError(f"Invalid price bucket size: {self.bucket_size}")


@dataclass(frozen=True)
class ImageConfig:
    """Image download settings"""
    output_dir: Path = Path("./processed")
    timeout: float = 30.0
    user_agent: str = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/120.0.0.0"


@dataclass(frozen=True)
class AppConfig:
    """Main configuration"""
    pricing: PricingConfig = field(default_factory=PricingConfig)
    images: ImageConfig = field(default_factory=ImageConfig)

    # Saved product pages, one per search term
    snapshot_dir: Path = Path("./data/pages")

    log_level: str = "INFO"


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return Decimal(raw.strip().replace(",", "."))
    except InvalidOperation:
        raise ConfigError(f"{name} is not a number: {raw!r}")


def load_config(env_prefix: str = "CATALOG_") -> AppConfig:
    """
    Build configuration from defaults plus environment overrides.

    Recognised variables (with the default prefix):
        CATALOG_EUR_RON_RATE, CATALOG_PRICE_BUCKET,
        CATALOG_SNAPSHOT_DIR, CATALOG_IMAGE_DIR, CATALOG_LOG_LEVEL
    """
    defaults = PricingConfig()
    pricing = PricingConfig(
        rate=_decimal_env(f"{env_prefix}EUR_RON_RATE", defaults.rate),
        bucket_size=_decimal_env(f"{env_prefix}PRICE_BUCKET", defaults.bucket_size),
    )

    image_dir: Optional[str] = os.environ.get(f"{env_prefix}IMAGE_DIR")
    images = ImageConfig(output_dir=Path(image_dir)) if image_dir else ImageConfig()

    snapshot_dir = os.environ.get(f"{env_prefix}SNAPSHOT_DIR")

    return AppConfig(
        pricing=pricing,
        images=images,
        snapshot_dir=Path(snapshot_dir) if snapshot_dir else AppConfig.snapshot_dir,
        log_level=os.environ.get(f"{env_prefix}LOG_LEVEL", "INFO").upper(),
    )


# Default configuration instance
default_config = AppConfig()
