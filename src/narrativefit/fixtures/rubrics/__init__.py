"""Bundled rubric catalogs."""
