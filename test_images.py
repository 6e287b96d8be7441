#!/usr/bin/env python3
"""
Tests for catalog.images

Downloads go through a mocked requests session; nothing leaves the machine.
"""

import tempfile
import unittest
from pathlib import Path
from unittest import mock

import requests

from catalog.config import ImageConfig
from catalog.images import (
    ImageDownloader,
    best_quality_url,
    extract_urls_from_onclick,
    order_image_urls,
    process_images,
)

CDN = "https://cdn.centrano.ro"


class TestImageOrdering(unittest.TestCase):

    def test_best_quality_rendition(self):
        candidates = [f"{CDN}/400/deck.jpg", f"{CDN}/1200/deck.jpg", f"{CDN}/1600/side.jpg"]
        self.assertEqual(best_quality_url(f"{CDN}/400/deck.jpg", candidates), f"{CDN}/1200/deck.jpg")

    def test_best_quality_without_candidates(self):
        self.assertEqual(best_quality_url(f"{CDN}/400/deck.jpg", []), f"{CDN}/400/deck.jpg")

    def test_thumbnail_first_and_deduped(self):
        urls = [f"{CDN}/1200/side.jpg", f"{CDN}/1200/deck.jpg", "//cdn.centrano.ro/1200/side.jpg"]
        self.assertEqual(
            order_image_urls("//cdn.centrano.ro/400/deck.jpg", urls),
            [f"{CDN}/1200/deck.jpg", f"{CDN}/1200/side.jpg"],
        )

    def test_thumbnail_not_in_gallery(self):
        self.assertEqual(
            order_image_urls(f"{CDN}/400/main.jpg", [f"{CDN}/1200/side.jpg"]),
            [f"{CDN}/400/main.jpg", f"{CDN}/1200/side.jpg"],
        )

    def test_no_thumbnail(self):
        self.assertEqual(order_image_urls(None, [f"{CDN}/1200/a.jpg"]), [f"{CDN}/1200/a.jpg"])

    def test_onclick_urls(self):
        handler = "open_zoom_box('//cdn.centrano.ro/1200/a.jpg', '//cdn.centrano.ro/1200/b.webp', 2)"
        self.assertEqual(
            extract_urls_from_onclick(handler),
            [f"{CDN}/1200/a.jpg", f"{CDN}/1200/b.webp"],
        )
        self.assertEqual(extract_urls_from_onclick("toggle()"), [])
        self.assertEqual(extract_urls_from_onclick(None), [])


class TestProcessImages(unittest.TestCase):

    def test_failure_isolated_per_image(self):
        def handler(url, index):
            if index == 1:
                raise requests.ConnectionError("reset")
            return f"processed/{index}"

        results = process_images(["a", "b", "c"], handler)
        self.assertEqual(results, ["processed/0", None, "processed/2"])

    def test_sequential_order(self):
        calls = []
        process_images(["a", "b"], lambda url, index: calls.append((url, index)) or url)
        self.assertEqual(calls, [("a", 0), ("b", 1)])

    def test_empty(self):
        self.assertEqual(process_images([], lambda url, index: url), [])


class TestImageDownloader(unittest.TestCase):

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.output_dir = Path(self.tmp.name) / "processed"
        self.session = mock.Mock()
        self.session.headers = {}
        self.session.get.return_value = mock.Mock(content=b"\x89PNG")
        self.downloader = ImageDownloader(
            ImageConfig(output_dir=self.output_dir),
            base_url="https://import.example/",
            session=self.session,
            key="deck",
        )

    def tearDown(self):
        self.tmp.cleanup()

    def test_downloads_and_returns_public_url(self):
        url = self.downloader(f"{CDN}/1200/deck.png", 0)

        self.assertEqual(url, "https://import.example/processed/processed_deck_0.png")
        self.assertEqual((self.output_dir / "processed_deck_0.png").read_bytes(), b"\x89PNG")
        self.session.get.assert_called_once_with(f"{CDN}/1200/deck.png", timeout=30.0)

    def test_sets_user_agent(self):
        self.assertIn("Mozilla", self.session.headers["User-Agent"])

    def test_unknown_extension_saved_as_jpg(self):
        url = self.downloader(f"{CDN}/image?id=4", 3)
        self.assertEqual(url, "https://import.example/processed/processed_deck_3.jpg")

    def test_http_error_propagates(self):
        self.session.get.return_value.raise_for_status.side_effect = requests.HTTPError("404")
        with self.assertRaises(requests.HTTPError):
            self.downloader(f"{CDN}/1200/missing.jpg", 0)

    def test_file_names_unique_per_downloader(self):
        config = ImageConfig(output_dir=self.output_dir)
        first = ImageDownloader(config, base_url="https://import.example", session=self.session)
        second = ImageDownloader(config, base_url="https://import.example", session=self.session)

        self.assertNotEqual(first(f"{CDN}/1200/deck.png", 0), second(f"{CDN}/1200/deck.png", 0))
        self.assertEqual(len(list(self.output_dir.iterdir())), 2)


if __name__ == '__main__':
    unittest.main()
