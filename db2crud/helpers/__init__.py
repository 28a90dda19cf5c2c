"""Shared helpers: logging, config, type mapping and naming."""
