"""JSON schema for serialized Encounter records."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Union

import jsonschema

from .models import Encounter

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


@lru_cache(maxsize=None)
def load_schema(schema_name: str) -> dict:
    """Load a JSON schema from the schemas directory."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_path}")

    with open(schema_path) as f:
        return json.load(f)


def validate_encounter(record: Union[Encounter, dict]) -> dict:
    """Validate an encounter (or its dict form) against the record schema.

    Returns:
        The validated dict.

    Raises:
        jsonschema.ValidationError: If the record does not match.
    """
    data = record.to_dict() if isinstance(record, Encounter) else record
    jsonschema.validate(instance=data, schema=load_schema("encounter"))
    return data
