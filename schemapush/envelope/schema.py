"""Meta-schema for the self-describing envelope.

Only the parts the registry needs to place a schema are checked here:
the ``self`` block and its four identity fields. The body of the schema
itself is opaque to schemapush and is uploaded as-is.
"""

# Vendor, name and format segments become URL path segments.
IDENTIFIER_PATTERN = r"^[a-zA-Z0-9_.-]+$"

# SchemaVer: MODEL-REVISION-ADDITION
SCHEMAVER_PATTERN = r"^[0-9]+-[0-9]+-[0-9]+$"

SELF_DESCRIBING_ENVELOPE: dict = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Self-describing JSON Schema envelope",
    "type": "object",
    "required": ["self"],
    "properties": {
        "self": {
            "type": "object",
            "required": ["vendor", "name", "format", "version"],
            "properties": {
                "vendor": {
                    "type": "string",
                    "minLength": 1,
                    "pattern": IDENTIFIER_PATTERN,
                    "description": "Reverse-DNS owner of the schema, e.g. com.acme.",
                },
                "name": {
                    "type": "string",
                    "minLength": 1,
                    "pattern": IDENTIFIER_PATTERN,
                },
                "format": {
                    "type": "string",
                    "minLength": 1,
                    "pattern": IDENTIFIER_PATTERN,
                    "description": "Schema format, normally 'jsonschema'.",
                },
                "version": {
                    "type": "string",
                    "pattern": SCHEMAVER_PATTERN,
                },
            },
        },
    },
}


def get_schema() -> dict:
    """Return the meta-schema every uploaded file must satisfy."""
    return SELF_DESCRIBING_ENVELOPE
