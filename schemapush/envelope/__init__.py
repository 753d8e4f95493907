"""Self-describing JSON Schema envelope: meta-schema, validation, loading.

A self-describing schema carries its own identity in a ``self`` block
(vendor, name, format, version). That identity decides where the schema
lives in the registry.
"""
