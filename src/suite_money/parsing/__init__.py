"""Parsing of free-text monetary input."""
