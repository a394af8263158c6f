"""docs_explorer.report.html_report: static HTML view of a crawl's navigation tree, via Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from docs_explorer.crawler.models import CrawlResult

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "navigation.html.j2"


def render_html(
    result: CrawlResult,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Render the navigation tree of *result* and save it.

    Args:
        result: finished crawl.
        template_dir: directory holding ``navigation.html.j2``; ``None`` uses
            the template shipped with the package.
        output_path: path of the HTML file to write.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from docs_explorer.report.html_report import render_html
    html_path = render_html(result, None, "data/factory-docs/index.html")
    ```
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "metadata": result.metadata.to_dict(),
        "navigation": result.navigation_dict(),
        "pages": result.pages,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
