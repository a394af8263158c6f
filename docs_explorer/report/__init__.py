# File: docs_explorer/report/__init__.py
"""docs_explorer.report: persisting crawl results (JSON) and rendering the navigation tree (HTML)."""

from docs_explorer.report.html_report import render_html
from docs_explorer.report.json_report import save_results

__all__ = ["render_html", "save_results"]
