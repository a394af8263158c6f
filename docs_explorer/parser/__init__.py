"""HTML extraction helpers."""
