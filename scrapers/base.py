from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
import re

from catalog.schema import RawScrapeSnapshot
from catalog.text_normalizer import match_key


class Supplier(Enum):
    CENTRANO = "Centrano"


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str

    def __repr__(self):
        return f"Credentials(email={self.email!r}, password='***')"


class ScrapeError(Exception):
    """Hard acquisition failure (navigation, login, search, product open)."""
    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage}: {message}")


class BaseScraper(ABC):
    """
    Produces one RawScrapeSnapshot per search.

    Implementations record each completed stage in `status` ("login",
    "search", "productClick", ...) and raise ScrapeError on a hard failure.
    Optional page elements that are missing are not failures.
    """

    @property
    @abstractmethod
    def supplier(self) -> Supplier:
        pass

    @abstractmethod
    def fetch_snapshot(
        self,
        credentials: Optional[Credentials],
        search_term: str,
        status: Dict[str, str],
    ) -> RawScrapeSnapshot:
        pass

    def health_check(self) -> bool:
        return True


# === Utility Functions ===

def slugify(text: str) -> str:
    """
    File-name friendly key for a search term.

    Example:
        >>> slugify("Tilt Formula Deck – Negru")
        'tilt-formula-deck-negru'
    """
    return re.sub(r'\s+', '-', match_key(text))
