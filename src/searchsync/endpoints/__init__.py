"""Endpoint resolution — index, type, document, alias and bulk addresses."""
