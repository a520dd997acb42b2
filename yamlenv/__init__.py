"""Load YAML files into environment variables."""

from yamlenv.errors import (
    DuplicateKeyError,
    ImmutableOverwriteError,
    InvalidDocumentError,
    InvalidPathError,
    InvalidVariableError,
    LoaderNotInitializedError,
    ValidationError,
    YamlenvError,
)
from yamlenv.facade import DEFAULT_FILE_NAME, Yamlenv
from yamlenv.flattener import flatten
from yamlenv.loader import Loader, LoadSummary
from yamlenv.store import EnvironmentStore, MappingMirror, ProcessEnvironment
from yamlenv.validator import Validator


__all__ = [
    "DEFAULT_FILE_NAME",
    "DuplicateKeyError",
    "EnvironmentStore",
    "ImmutableOverwriteError",
    "InvalidDocumentError",
    "InvalidPathError",
    "InvalidVariableError",
    "LoadSummary",
    "Loader",
    "LoaderNotInitializedError",
    "MappingMirror",
    "ProcessEnvironment",
    "ValidationError",
    "Validator",
    "Yamlenv",
    "YamlenvError",
    "flatten",
]
