"""Flatten a nested document into environment variable name/value pairs.

Keys along a path are joined with ``_`` (``{"DB": {"HOST": "x"}}`` becomes
``DB_HOST``). Lists, and empty collections, are stored as compact JSON.
Scalars are stored in their textual form.
"""

from collections.abc import Mapping

from yamlenv.encoding import encode_scalar, encode_structure
from yamlenv.errors import DuplicateKeyError, InvalidVariableError


KEY_SEPARATOR = "_"


def is_associative(value: object) -> bool:
    """Check whether a value is a non-empty mapping that is not list-shaped.

    A mapping whose keys are exactly ``0..n-1`` in order is treated as a list.
    """
    if not isinstance(value, Mapping) or not value:
        return False
    return list(value.keys()) != list(range(len(value)))


def combine_key(key: object, parent_key: str | None, cast_to_upper: bool) -> str:
    """Join a key onto its parent path and apply case folding."""
    text = encode_scalar(key)
    combined = f"{parent_key}{KEY_SEPARATOR}{text}" if parent_key else text
    return combined.upper() if cast_to_upper else combined


def check_variable(name: str, value: str) -> None:
    """Reject a pair the process environment cannot hold.

    Raises:
        InvalidVariableError: If the name is empty, or contains ``=`` or a
            NUL character, or the value contains a NUL character.
    """
    if not name:
        raise InvalidVariableError(name, "name is empty")
    if "=" in name:
        raise InvalidVariableError(name, 'name contains "="')
    if "\0" in name:
        raise InvalidVariableError(name.replace("\0", "\\0"), "name contains NUL")
    if "\0" in value:
        raise InvalidVariableError(name, "value contains NUL")


def flatten(
    document: Mapping[object, object],
    cast_to_upper: bool = False,
    parent_key: str | None = None,
) -> dict[str, str]:
    """Flatten a nested mapping depth-first.

    Args:
        document: Parsed document (or sub-document).
        cast_to_upper: Upper-case every combined key.
        parent_key: Combined key of the enclosing mapping, if any.

    Returns:
        Mapping of flat variable name to string value.

    Raises:
        DuplicateKeyError: If two branches produce the same flat name.
        InvalidVariableError: If a name or value cannot be stored in the
            environment.
    """
    output: dict[str, str] = {}

    for key, value in document.items():
        combined_key = combine_key(key, parent_key, cast_to_upper)

        if is_associative(value):
            nested = flatten(value, cast_to_upper, combined_key)  # type: ignore[arg-type]
            if not output.keys().isdisjoint(nested):
                raise DuplicateKeyError(combined_key)
            output.update(nested)
            continue

        if combined_key in output:
            raise DuplicateKeyError(combined_key)

        if isinstance(value, (list, tuple, Mapping)):
            text = encode_structure(value)
        else:
            text = encode_scalar(value)

        check_variable(combined_key, text)
        output[combined_key] = text

    return output
