#!/usr/bin/env python3
"""
Tests for the HTTP API (api.main)

The scraper and image handler are replaced through FastAPI dependency
overrides so no pages or images are fetched.
"""

import tempfile
import unittest
from pathlib import Path

import requests
from fastapi.testclient import TestClient

from api.main import app, get_image_handler, get_scraper
from catalog.schema import RawScrapeSnapshot, RawTextBlock
from scrapers.base import BaseScraper, ScrapeError, Supplier
from scrapers.centrano.scraper import SavedPageScraper

CREDENTIALS = {"email": "shop@example.ro", "password": "secret"}


def deck_snapshot():
    return RawScrapeSnapshot(
        raw_title="Tilt Formula Deck",
        full_page_text="Tilt Formula Deck Culoare: Negru Lungime: 510mm 129,00 €",
        rows=(RawTextBlock("Culoare: Negru"), RawTextBlock("Lungime: 510mm 129,00 €")),
        image_urls=("https://cdn.centrano.ro/1200/a.jpg", "https://cdn.centrano.ro/1200/b.jpg"),
    )


class FakeScraper(BaseScraper):
    """Records stages like the real scraper, optionally failing at login."""

    def __init__(self, fail_at_login: bool = False):
        self.fail_at_login = fail_at_login

    @property
    def supplier(self):
        return Supplier.CENTRANO

    def fetch_snapshot(self, credentials, search_term, status):
        status['navigate'] = "ok"
        if self.fail_at_login:
            raise ScrapeError("login", "Invalid credentials")
        status['login'] = "ok"
        status['search'] = "ok"
        status['productClick'] = "ok"
        return deck_snapshot()


def fake_image_handler(url, index):
    if url.endswith("b.jpg"):
        raise requests.ConnectionError("reset")
    return f"http://testserver/processed/processed_{index}.jpg"


class TestScrapeProductImages(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        app.dependency_overrides[get_scraper] = lambda: FakeScraper()
        app.dependency_overrides[get_image_handler] = lambda: fake_image_handler

    def tearDown(self):
        app.dependency_overrides.clear()

    def test_root(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, "Centrano Scraper Running")

    def test_missing_fields(self):
        for body in ({}, {"email": "a@b.ro"}, {"email": "a@b.ro", "password": "x"},
                     {**CREDENTIALS, "searchTerm": ""}):
            with self.subTest(body=body):
                response = self.client.post("/scrape-product-images", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json(), {"error": "Missing required fields"})

    def test_success(self):
        response = self.client.post(
            "/scrape-product-images",
            json={**CREDENTIALS, "searchTerm": "Tilt Formula Deck"},
        )
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertTrue(data["success"])
        self.assertEqual(data["title"], "Deck Tilt Formula")
        self.assertEqual(data["vendor"], "Tilt")
        self.assertEqual(data["product_type"], "Deck")
        self.assertEqual(data["variants"][0]["price"], "644.99")
        self.assertEqual(data["imageUrls"], ["http://testserver/processed/processed_0.jpg"])
        self.assertEqual(data["count"], 2)
        self.assertEqual(data["status"], {
            "navigate": "ok",
            "login": "ok",
            "search": "ok",
            "productClick": "ok",
            "classify": "ok",
            "variants": "ok",
            "title": "ok",
            "images": "ok",
        })

    def test_failure_returns_partial_status(self):
        app.dependency_overrides[get_scraper] = lambda: FakeScraper(fail_at_login=True)

        response = self.client.post(
            "/scrape-product-images",
            json={**CREDENTIALS, "searchTerm": "Tilt Formula Deck"},
        )
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {
            "success": False,
            "error": "login: Invalid credentials",
            "status": {"navigate": "ok"},
        })

    def test_saved_page_not_found(self):
        with tempfile.TemporaryDirectory() as tmp:
            app.dependency_overrides[get_scraper] = lambda: SavedPageScraper(Path(tmp))
            response = self.client.post(
                "/scrape-product-images",
                json={**CREDENTIALS, "searchTerm": "Deck Inexistent"},
            )

        self.assertEqual(response.status_code, 500)
        self.assertFalse(response.json()["success"])
        self.assertIn("Product not found", response.json()["error"])


class TestStandardize(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def test_standardize_snapshot(self):
        response = self.client.post("/standardize", json={
            "searchTerm": "Tilt Formula Deck",
            "snapshot": {
                "raw_title": "Tilt Formula Deck",
                "full_page_text": "Tilt Formula Deck 129,00 €",
                "rows": [{"text": "Culoare: Negru"}],
            },
        })
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["title"], "Deck Tilt Formula")
        self.assertEqual(data["options"], [{"name": "Colour", "values": ["Negru"]}])
        self.assertEqual(data["variants"][0]["price"], "644.99")
        self.assertEqual(data["count"], 0)

    def test_invalid_body(self):
        response = self.client.post("/standardize", json={"searchTerm": "x"})
        self.assertEqual(response.status_code, 422)


if __name__ == '__main__':
    unittest.main()
