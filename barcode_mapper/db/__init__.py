"""Catalog database access."""
