"""Supplier scrapers producing RawScrapeSnapshots."""
