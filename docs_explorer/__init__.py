# docs_explorer/__init__.py
"""
docs_explorer package initializer.
Defines package version. The CLI group lives in :mod:`docs_explorer.cli`.
"""
__version__ = "0.1.0"
