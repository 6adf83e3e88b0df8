"""Validation utilities for portable animation group documents."""

from __future__ import annotations

import json
from pathlib import Path

import jsonschema

_SCHEMA_PATH = Path(__file__).parent / "schemas" / "animation_groups.schema.json"


def validate_portable_json(data: object) -> None:
    """Validate a decoded portable document against animation_groups.schema.json.

    Parameters
    ----------
    data:
        The decoded JSON document (expected to be a list of group objects).

    Raises
    ------
    jsonschema.ValidationError
        If the data does not conform to the schema.
    """
    schema = json.loads(_SCHEMA_PATH.read_text())
    jsonschema.validate(data, schema)
