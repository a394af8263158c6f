# setup.py
from setuptools import setup, find_packages

setup(
    name="docs_explorer",
    version="0.1.0",
    description="Documentation aggregator: crawler, lexical search and AI answers over developer docs",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"docs_explorer": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "aiohttp-cors>=0.7",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "docs-explorer=docs_explorer.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
