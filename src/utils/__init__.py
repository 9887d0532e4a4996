"""Shared helpers: configuration, plane encoding and dataset writers."""
