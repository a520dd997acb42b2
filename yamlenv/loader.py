"""Load a YAML environment file into the process environment."""

import hashlib
import json
import os
import time
from collections.abc import Mapping
from pathlib import Path

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field

from yamlenv.encoding import encode_scalar
from yamlenv.errors import (
    DuplicateKeyError,
    ImmutableOverwriteError,
    InvalidDocumentError,
    InvalidPathError,
    InvalidVariableError,
)
from yamlenv.flattener import flatten
from yamlenv.parser import DocumentParser, YamlDocumentParser
from yamlenv.state_machine import LoaderState, LoaderStateMachine
from yamlenv.store import EnvironmentStore, sanitize_value


logger = structlog.get_logger()


class LoadSummary(BaseModel):
    """Outcome of a successful ``Loader.load`` call.

    Holds variable names only, never values.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    file_path: str = Field(description="Path of the loaded file")
    file_sha256: str = Field(description="SHA-256 of the raw file bytes")
    immutable: bool = Field(description="Mutability mode during the load")
    cast_to_upper: bool = Field(description="Whether keys were upper-cased")
    applied: list[str] = Field(default_factory=list, description="Names written")
    skipped: list[str] = Field(
        default_factory=list, description="Pre-existing names left untouched"
    )
    duration_ms: float = Field(ge=0, description="Wall time of the load")


class Loader:
    """Loads an environment file and projects it into the environment.

    Implements a state machine for the load:
    UNLOADED -> LOADING -> PARSED -> LOADED

    In immutable mode, variables that already exist keep their value: the
    initial bulk load skips them silently, while an explicit
    ``set_environment_variable`` call raises ``ImmutableOverwriteError``.
    """

    def __init__(
        self,
        file_path: str | os.PathLike[str],
        immutable: bool = False,
        cast_to_upper: bool = False,
        store: EnvironmentStore | None = None,
        parser: DocumentParser | None = None,
    ) -> None:
        """Initialize the loader.

        Args:
            file_path: Path to the YAML environment file.
            immutable: Preserve variables that are already set.
            cast_to_upper: Upper-case every flattened variable name.
            store: Environment store to write to (default: process only).
            parser: Document parser (default: PyYAML safe loader).
        """
        self._file_path = os.fspath(file_path)
        self._immutable = immutable
        self._cast_to_upper = cast_to_upper
        self._store = store if store is not None else EnvironmentStore()
        self._parser = parser if parser is not None else YamlDocumentParser()
        self._state_machine = LoaderStateMachine()
        self._yaml_variables: dict[object, object] = {}
        self._summary: LoadSummary | None = None

    @property
    def file_path(self) -> str:
        """Get the environment file path."""
        return self._file_path

    @property
    def state(self) -> LoaderState:
        """Get the current loader state."""
        return self._state_machine.state

    @property
    def store(self) -> EnvironmentStore:
        """Get the environment store this loader writes to."""
        return self._store

    @property
    def immutable(self) -> bool:
        """Whether existing variables are protected from overwrite."""
        return self._immutable

    @property
    def summary(self) -> LoadSummary | None:
        """Get the summary of the last successful load, if any."""
        return self._summary

    def make_immutable(self) -> None:
        """Protect variables that are already set from being overwritten."""
        self._immutable = True

    def make_mutable(self) -> None:
        """Allow variables to be overwritten."""
        self._immutable = False

    def force_upper_case(self) -> None:
        """Upper-case flattened names on subsequent loads."""
        self._cast_to_upper = True

    def load(self) -> dict[str, str]:
        """Read, parse, flatten and apply the environment file.

        Returns:
            Merged view of the whole environment after the load, including
            variables that existed beforehand.

        Raises:
            InvalidPathError: If the file is missing or unreadable.
            InvalidDocumentError: If the file does not parse to a mapping.
            DuplicateKeyError: If two branches flatten to the same name.
            InvalidVariableError: If a name or value cannot be stored in the
                environment. Nothing is written in that case.
        """
        start_time = time.perf_counter()
        self._state_machine.transition(LoaderState.LOADING)

        log = logger.bind(component="loader", file_path=self._file_path)
        log.info("loading_env_file", immutable=self._immutable)

        try:
            content = self._read_file()
            checksum = hashlib.sha256(content).hexdigest()
            self._yaml_variables = self._parse(content)
            self._state_machine.transition(LoaderState.PARSED)
            log.info(
                "env_file_parsed",
                file_sha256=checksum,
                key_count=len(self._yaml_variables),
            )

            variables = flatten(self._yaml_variables, self._cast_to_upper)
            applied, skipped = self._apply(log, variables)

        except InvalidPathError as e:
            self._fail(log, "env_file_unreadable", e)
            raise
        except InvalidDocumentError as e:
            self._fail(log, "env_file_invalid", e)
            raise
        except DuplicateKeyError as e:
            self._fail(log, "env_file_duplicate_key", e, key=e.key)
            raise
        except InvalidVariableError as e:
            self._fail(log, "env_file_invalid_variable", e, reason=e.reason)
            raise
        except (OSError, ValueError) as e:
            self._fail(log, "env_file_apply_failed", e)
            raise

        self._state_machine.transition(LoaderState.LOADED)
        duration_ms = (time.perf_counter() - start_time) * 1000
        self._summary = LoadSummary(
            file_path=self._file_path,
            file_sha256=checksum,
            immutable=self._immutable,
            cast_to_upper=self._cast_to_upper,
            applied=applied,
            skipped=skipped,
            duration_ms=duration_ms,
        )
        log.info(
            "env_file_loaded",
            applied_count=len(applied),
            skipped_count=len(skipped),
            duration_ms=duration_ms,
        )

        return self._store.environ()

    def read_document(self) -> dict[object, object]:
        """Read and parse the file without touching the environment.

        Raises:
            InvalidPathError: If the file is missing or unreadable.
            InvalidDocumentError: If the file does not parse to a mapping.
        """
        return self._parse(self._read_file())

    def _read_file(self) -> bytes:
        path = Path(self._file_path)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise InvalidPathError(self._file_path)
        try:
            return path.read_bytes()
        except OSError as e:
            raise InvalidPathError(self._file_path) from e

    def _parse(self, content: bytes) -> dict[object, object]:
        try:
            document = self._parser.parse(content.decode("utf-8"))
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise InvalidDocumentError(self._file_path) from e

        if not isinstance(document, Mapping):
            raise InvalidDocumentError(self._file_path)
        return dict(document)

    def _apply(
        self,
        log: structlog.stdlib.BoundLogger,
        variables: dict[str, str],
    ) -> tuple[list[str], list[str]]:
        applied: list[str] = []
        skipped: list[str] = []
        for name, value in variables.items():
            if self.set_environment_variable(name, value, initialization=True):
                applied.append(name)
            else:
                skipped.append(name)
                log.debug("env_var_skipped_immutable", name=name)
        return applied, skipped

    def _fail(
        self,
        log: structlog.stdlib.BoundLogger,
        event: str,
        error: Exception,
        **context: object,
    ) -> None:
        self._state_machine.transition(LoaderState.FAILED)
        log.error(event, error=str(error), **context)

    def set_environment_variable(
        self,
        name: str,
        value: object = None,
        initialization: bool = False,
    ) -> bool:
        """Set a variable in every environment view.

        Args:
            name: Variable name.
            value: Value to store; sanitized first.
            initialization: True when called from the bulk load, in which
                case an existing variable is kept silently in immutable mode.

        Returns:
            True if the variable was written, False if it was skipped.

        Raises:
            ImmutableOverwriteError: If immutable, the variable exists and
                this is not the initial load.
        """
        value = sanitize_value(value)

        if self._immutable and self._store.contains(name):
            # Values set by the host before we ran win during the initial load
            if initialization:
                return False
            raise ImmutableOverwriteError(name)

        self._store.set(name, value)  # type: ignore[arg-type]
        return True

    def clear_environment_variable(self, name: str) -> None:
        """Remove a variable from every environment view.

        Does nothing while the loader is immutable.
        """
        if self._immutable:
            return
        self._store.clear(name)

    def get_environment_variable(self, name: str) -> str | None:
        """Look up a variable, returning None when it is not set."""
        return self._store.get(name)

    def get_yaml_value(self, key: str | None) -> object:
        """Look up a value in the parsed document, before flattening.

        ``key`` is first tried as a literal top-level key, then as a
        dot-separated path (``"MULTI.LEVEL.NESTED"``).
        Integer and boolean keys match their text form (``"1"``, ``"true"``),
        as they do when flattened.

        Returns:
            The raw parsed value (mapping, list or scalar), or None if any
            segment of the path is missing.
        """
        if key is None:
            return None

        value = _child(self._yaml_variables, key)
        if value is not None:
            return value

        node: object = self._yaml_variables
        for segment in key.split("."):
            node = _child(node, segment)
            if node is None:
                return None

        return node

    def summary_json(self) -> str:
        """Get the load summary as JSON with stable key ordering."""
        if self._summary is None:
            return json.dumps({}, sort_keys=True)
        return json.dumps(self._summary.model_dump(), sort_keys=True, indent=2)


def _child(node: object, key: str) -> object:
    """Get ``node[key]``, matching non-string keys by their flattened text."""
    if not isinstance(node, Mapping):
        return None
    if key in node:
        return node[key]
    for candidate, value in node.items():
        if not isinstance(candidate, str) and encode_scalar(candidate) == key:
            return value
    return None
