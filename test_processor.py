#!/usr/bin/env python3
"""
Tests for catalog.processor and the record schema

End-to-end standardization of snapshots into ProductRecords.
"""

import unittest
from decimal import Decimal
from unittest import mock

from catalog.config import AppConfig, PricingConfig
from catalog.processor import ProductProcessor, check_matrix, standardize_snapshot
from catalog.schema import (
    PipelineError,
    ProductOption,
    ProductRecord,
    RawScrapeSnapshot,
    RawTextBlock,
    Variant,
)

CDN = "https://cdn.centrano.ro"


def deck_snapshot():
    return RawScrapeSnapshot(
        raw_title="Tilt Formula Deck zoom_in (Culoare: Negru)",
        full_page_text=(
            "Tilt Formula Deck Culoare: Negru Lungime: 510mm 129,00 € "
            "Culoare: Alb Lungime: 510mm 119,00 €"
        ),
        rows=(
            RawTextBlock("Culoare: Negru"),
            RawTextBlock("Lungime: 510mm 129,00 €"),
            RawTextBlock("Culoare: Alb"),
            RawTextBlock("Lungime: 510mm 119,00 €"),
        ),
        thumbnail_url="//cdn.centrano.ro/400/deck.jpg",
        image_urls=(f"{CDN}/1200/deck.jpg", f"{CDN}/1200/side.jpg", f"{CDN}/1200/deck.jpg"),
        description_html='<p onclick="x()">Deck din aluminiu</p><script>t()</script>',
        specs_html="<table><tr><td>Lungime deck</td><td>51 cm</td></tr></table>",
    )


class TestProductProcessor(unittest.TestCase):
    """Full pipeline over hand-built snapshots."""

    def setUp(self):
        self.processor = ProductProcessor()

    def test_sized_deck(self):
        status = {'search': 'ok', 'productClick': 'ok'}
        record = self.processor.transform(deck_snapshot(), "Tilt Formula Deck", status)

        self.assertEqual(record.title, "Deck Tilt Formula")
        self.assertEqual(record.vendor, "Tilt")
        self.assertEqual(record.tag, "Tilt")
        self.assertEqual(record.product_type, "Deck")
        self.assertEqual(record.colours, ["Negru", "Alb"])
        self.assertEqual(record.sizes, ["510mm"])
        self.assertEqual(
            [(v.option1, v.option2, v.price) for v in record.variants],
            [("Negru", "510mm", "644.99"), ("Alb", "510mm", "594.99")],
        )
        self.assertEqual(record.description_html, "<p>Deck din aluminiu</p>")
        self.assertEqual(record.image_urls, [f"{CDN}/1200/deck.jpg", f"{CDN}/1200/side.jpg"])
        self.assertEqual(record.count, 2)
        self.assertEqual(
            status,
            {'search': 'ok', 'productClick': 'ok', 'classify': 'ok', 'variants': 'ok', 'title': 'ok'},
        )
        self.assertIs(record.status, status)

    def test_output_dict(self):
        payload = self.processor.transform(deck_snapshot(), "Tilt Formula Deck").to_dict()

        self.assertTrue(payload["success"])
        self.assertEqual(payload["product_type"], "Deck")
        self.assertEqual(payload["options"], [
            {"name": "Colour", "values": ["Negru", "Alb"]},
            {"name": "Size", "values": ["510mm"]},
        ])
        self.assertEqual(payload["variants"][0]["option2"], "510mm")
        self.assertEqual(payload["count"], 2)
        self.assertEqual(payload["imageUrls"][0], f"{CDN}/1200/deck.jpg")

    def test_complete_scooter(self):
        snapshot = RawScrapeSnapshot(
            raw_title="Trotineta Root Industries Type R",
            full_page_text="Root Industries Type R 899,00 €",
            specs_html="<p>Înălțime ghidon: 85 cm</p><p>Lungime deck: 50 cm</p>",
        )
        record = self.processor.transform(snapshot, "Type R")

        self.assertEqual(record.product_type, "Complete")
        self.assertEqual(record.vendor, "Root Industries")
        self.assertEqual(record.title, "Trotineta Root Industries Type R")
        self.assertEqual(len(record.variants), 1)
        self.assertEqual(record.variants[0].option1, "Default")
        self.assertEqual(record.variants[0].price, "4469.99")

    def test_scs_clamp(self):
        snapshot = RawScrapeSnapshot(
            raw_title="Clamp SCS Ethic",
            full_page_text="Clamp SCS Ethic Bolt kit",
        )
        record = self.processor.transform(snapshot, "Ethic SCS")

        self.assertEqual(record.product_type, "Clamp")
        self.assertEqual(record.title, "Scs Ethic")

    def test_colour_only(self):
        snapshot = RawScrapeSnapshot(
            raw_title="Manșoane ODI Longneck",
            full_page_text="Manșoane ODI Longneck 12,00 €",
            rows=(
                RawTextBlock("Culoare: Negru"),
                RawTextBlock("Stoc 12,00 €"),
                RawTextBlock("Culoare: Roșu"),
            ),
        )
        record = self.processor.transform(snapshot, "Longneck")

        self.assertEqual(record.product_type, "Mansoane")
        self.assertEqual([o.name for o in record.options], ["Colour"])
        self.assertEqual(
            [(v.option1, v.price) for v in record.variants],
            [("Negru", "59.99"), ("Roșu", "59.99")],
        )
        self.assertEqual(record.sizes, [])

    def test_unclassified_without_price(self):
        snapshot = RawScrapeSnapshot(raw_title="Produs", full_page_text="Produs fara pret")
        record = self.processor.transform(snapshot, "Produs")
        payload = record.to_dict()

        self.assertNotIn("vendor", payload)
        self.assertNotIn("tag", payload)
        self.assertEqual(payload["product_type"], "")
        self.assertEqual(payload["variants"][0]["price"], None)
        self.assertEqual(payload["options"], [{"name": "Colour", "values": ["Default"]}])

    def test_custom_rate(self):
        config = AppConfig(pricing=PricingConfig(rate=Decimal("5")))
        processor = ProductProcessor(config)
        snapshot = RawScrapeSnapshot(raw_title="Furca", full_page_text="Furca Tilt 21,00 €")
        record = processor.transform(snapshot, "Furca")
        self.assertEqual(record.variants[0].price, "104.99")

    def test_failure_carries_partial_status(self):
        classifier = mock.Mock()
        classifier.classify.side_effect = RuntimeError("boom")
        processor = ProductProcessor(classifier=classifier)

        with self.assertRaises(PipelineError) as ctx:
            processor.transform(deck_snapshot(), "Tilt Formula Deck", {'search': 'ok'})

        self.assertIn("boom", str(ctx.exception))
        self.assertEqual(ctx.exception.status, {'search': 'ok'})
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)
        self.assertEqual(
            ctx.exception.to_dict(),
            {"success": False, "error": str(ctx.exception), "status": {'search': 'ok'}},
        )
        self.assertEqual(processor.get_stats()['errors'], 1)

    def test_stats(self):
        self.processor.transform(deck_snapshot(), "Tilt Formula Deck")
        stats = self.processor.get_stats()
        self.assertEqual(stats['processed'], 1)
        self.assertEqual(stats['vendors_detected'], 1)
        self.assertEqual(stats['types_detected'], 1)
        self.assertEqual(stats['variants_built'], 2)

        self.processor.reset_stats()
        self.assertEqual(self.processor.get_stats()['processed'], 0)

    def test_convenience_function(self):
        record = standardize_snapshot(deck_snapshot(), "Tilt Formula Deck")
        self.assertIsInstance(record, ProductRecord)
        self.assertEqual(record.title, "Deck Tilt Formula")


class TestCheckMatrix(unittest.TestCase):

    def test_valid(self):
        check_matrix([ProductOption("Colour", ["A", "B"])], [Variant("A"), Variant("B")])

    def test_undeclared_value(self):
        with self.assertRaises(ValueError):
            check_matrix([ProductOption("Colour", ["A"])], [Variant("B")])

    def test_duplicate_pair(self):
        options = [ProductOption("Colour", ["A"]), ProductOption("Size", ["S"])]
        with self.assertRaises(ValueError):
            check_matrix(options, [Variant("A", "S"), Variant("A", "S")])

    def test_option_count_mismatch(self):
        options = [ProductOption("Colour", ["A"]), ProductOption("Size", ["S"])]
        with self.assertRaises(ValueError):
            check_matrix(options, [Variant("A")])


class TestSnapshotFromDict(unittest.TestCase):

    def test_camel_case_keys(self):
        snapshot = RawScrapeSnapshot.from_dict({
            "rawTitle": "Deck",
            "fullPageText": "Deck Tilt",
            "rows": ["Culoare: Negru", {"text": "Lungime: 510mm", "html": "<div>x</div>"}],
            "thumbnailUrl": "//cdn/a.jpg",
            "imageUrls": ["https://cdn/a.jpg"],
            "specsHtml": "<p>x</p>",
        })
        self.assertEqual(snapshot.raw_title, "Deck")
        self.assertEqual(snapshot.rows[0], RawTextBlock("Culoare: Negru"))
        self.assertEqual(snapshot.rows[1].html, "<div>x</div>")
        self.assertEqual(snapshot.image_urls, ("https://cdn/a.jpg",))
        self.assertEqual(snapshot.specs_html, "<p>x</p>")
        self.assertIsNone(snapshot.description_html)

    def test_snake_case_and_defaults(self):
        snapshot = RawScrapeSnapshot.from_dict({"raw_title": "Deck"})
        self.assertEqual(snapshot.full_page_text, "")
        self.assertEqual(snapshot.rows, ())
        self.assertEqual(snapshot.image_urls, ())


if __name__ == '__main__':
    unittest.main()
