"""Publish self-describing JSON Schemas to a schema registry."""

__version__ = "0.1.0"
