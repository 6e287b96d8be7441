"""
Centrano Catalog Import API

POST /scrape-product-images  - acquire a product page and standardize it
POST /standardize            - standardize an already captured snapshot
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from catalog.config import load_config
from catalog.images import ImageDownloader, process_images
from catalog.processor import ProductProcessor
from catalog.schema import RawScrapeSnapshot
from scrapers.base import BaseScraper, Credentials
from scrapers.centrano.scraper import SavedPageScraper

config = load_config()

logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Centrano Catalog Import", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount(
    "/processed",
    StaticFiles(directory=str(config.images.output_dir), check_dir=False),
    name="processed",
)


class ScrapeRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    searchTerm: Optional[str] = None


class TextBlockModel(BaseModel):
    text: str = ""
    html: Optional[str] = None


class SnapshotModel(BaseModel):
    raw_title: str = ""
    full_page_text: str = ""
    rows: List[TextBlockModel] = []
    thumbnail_url: Optional[str] = None
    image_urls: List[str] = []
    description_html: Optional[str] = None
    specs_html: Optional[str] = None


class StandardizeRequest(BaseModel):
    searchTerm: str = ""
    snapshot: SnapshotModel


# === Dependencies ===

def get_scraper() -> BaseScraper:
    return SavedPageScraper(config.snapshot_dir)


def get_processor() -> ProductProcessor:
    return ProductProcessor(config)


def get_image_handler(request: Request) -> Callable[[str, int], str]:
    return ImageDownloader(config.images, base_url=str(request.base_url))


def failure(error: Exception, status: Dict[str, str]) -> JSONResponse:
    return JSONResponse(
        {"success": False, "error": str(error), "status": dict(status)},
        status_code=500,
    )


# === Routes ===

@app.get("/", response_class=PlainTextResponse)
def root():
    return "Centrano Scraper Running"


@app.post("/scrape-product-images")
def scrape_product_images(
    body: ScrapeRequest,
    scraper: BaseScraper = Depends(get_scraper),
    processor: ProductProcessor = Depends(get_processor),
    image_handler: Callable[[str, int], str] = Depends(get_image_handler),
):
    """Acquire, standardize and download images for one product."""
    if not body.email or not body.password or not body.searchTerm:
        return JSONResponse({"error": "Missing required fields"}, status_code=400)

    status: Dict[str, str] = {}
    try:
        credentials = Credentials(email=body.email, password=body.password)
        snapshot = scraper.fetch_snapshot(credentials, body.searchTerm, status)
        record = processor.transform(snapshot, body.searchTerm, status)

        processed = process_images(record.image_urls, image_handler)
        status['images'] = "ok"

        payload: Dict[str, Any] = record.to_dict()
        payload["imageUrls"] = [url for url in processed if url]
        return payload

    except Exception as e:
        logger.exception(f"Error in /scrape-product-images for {body.searchTerm!r}")
        return failure(e, status)


@app.post("/standardize")
def standardize(
    body: StandardizeRequest,
    processor: ProductProcessor = Depends(get_processor),
):
    """Standardize a snapshot captured elsewhere. Images are not downloaded."""
    status: Dict[str, str] = {}
    try:
        snapshot = RawScrapeSnapshot.from_dict(body.snapshot.model_dump())
        record = processor.transform(snapshot, body.searchTerm, status)
        return record.to_dict()
    except Exception as e:
        logger.exception("Error in /standardize")
        return failure(e, status)
