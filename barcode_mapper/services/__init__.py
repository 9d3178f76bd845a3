"""Mapping pipeline services."""
