# docs_explorer/report/json_report.py

"""
Persistence of a crawl result as JSON.

Layout under ``output_dir``::

    <source>-docs.json      full result: pages, navigation, metadata
    pages/<name>.json       one file per page, name from url_to_filename()
    navigation.json         navigation tree only
"""
import json
from pathlib import Path
from typing import Any

from docs_explorer.crawler.models import CrawlResult
from docs_explorer.crawler.urls import url_to_filename
from docs_explorer.logger import get_logger

logger = get_logger("report")


def _dump(data: Any, path: Path) -> None:
    with path.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def save_results(result: CrawlResult, output_dir: Path | str, source_key: str) -> Path:
    """
    Write *result* to *output_dir* and return the path of the aggregate file.

    :param result: finished crawl
    :param output_dir: target directory, created if missing
    :param source_key: short source name, e.g. ``factory``
    :return: Path of ``<source_key>-docs.json``

    Example:
    ```python
    from docs_explorer.report.json_report import save_results
    main_file = save_results(result, "data/factory-docs", "factory")
    print(f"Saved to: {main_file}")
    ```
    """
    output = Path(output_dir)
    output.mkdir(parents=True, exist_ok=True)

    main_file = output / f"{source_key}-docs.json"
    _dump(result.to_dict(), main_file)

    pages_dir = output / "pages"
    pages_dir.mkdir(exist_ok=True)
    for url, page in result.pages.items():
        _dump(page.to_dict(), pages_dir / f"{url_to_filename(url)}.json")

    _dump(result.navigation_dict(), output / "navigation.json")

    logger.info("Results saved to %s", output)
    return main_file
