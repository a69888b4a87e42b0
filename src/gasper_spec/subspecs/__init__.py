"""Subspecifications of the Gasper consensus specification."""
