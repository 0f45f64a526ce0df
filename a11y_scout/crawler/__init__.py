# a11y_scout/crawler/__init__.py
"""Raw HTTP side of discovery: fetcher, sitemap resolution and fallback link extraction."""
