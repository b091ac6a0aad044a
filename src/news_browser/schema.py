"""Helpers to load and validate the provider envelope JSON schema."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError


def default_schema_path() -> Path:
    """Return the path to the bundled envelope schema file."""
    return Path(__file__).resolve().parent / "schemas" / "envelope_schema.json"


@lru_cache(maxsize=1)
def load_schema() -> Dict[str, Any]:
    """Read the bundled envelope schema once per process."""
    return json.loads(default_schema_path().read_text(encoding="utf-8"))


def format_errors(errors: Iterable[ValidationError]) -> str:
    """Join schema errors as `path: message` pairs, `$` standing for the envelope."""
    return "; ".join(
        f"{'.'.join(map(str, err.absolute_path)) or '$'}: {err.message}" for err in errors
    )


def validate_envelope(
    payload: Any, schema: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Validate a decoded response body against the envelope schema.

    Only `status` and the `articles` container are checked; every other
    field, and each article, falls back to defaults in ResponseEnvelope.from_payload.
    Raises ValueError with a readable message if validation fails.
    """
    schema_dict = schema or load_schema()
    validator = Draft202012Validator(schema_dict)
    errors = list(validator.iter_errors(payload))
    if errors:
        raise ValueError(f"Envelope validation failed: {format_errors(errors)}")
    return payload
