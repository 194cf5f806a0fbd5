"""Bundled report template and renderer script."""
