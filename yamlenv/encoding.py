"""Textual encodings for values headed into the environment."""

import json
from datetime import date, datetime


def encode_scalar(value: object) -> str:
    """Render a parsed scalar as the string the environment will hold.

    Booleans become ``"true"``/``"false"`` and null becomes the empty string.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def encode_structure(value: object) -> str:
    """Serialize a list-like value as compact JSON.

    Args:
        value: A sequence, or a mapping whose keys are ``0..n-1``.

    Returns:
        Compact JSON text, e.g. ``[1,2]``.
    """
    if isinstance(value, dict):
        value = list(value.values())
    return json.dumps(value, separators=(",", ":"), default=encode_scalar)
