"""Catalog service — categories and products with a structured error pipeline."""
