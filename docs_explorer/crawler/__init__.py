"""Crawler subpackage: URL helpers, fetcher, page models and the crawl loop."""
