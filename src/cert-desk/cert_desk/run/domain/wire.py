"""Shared pydantic configuration for models exchanged with the run store."""

from pydantic import ConfigDict
from pydantic.alias_generators import to_camel

# Frozen, camelCase on the wire, snake_case accepted on construction.
WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)
