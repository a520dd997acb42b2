"""Shared fixtures: keep the process environment clean between tests."""

import uuid
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import structlog
import yaml

from yamlenv.errors import DuplicateKeyError
from yamlenv.flattener import flatten
from yamlenv.store import EnvironmentStore


FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _fixture_variable_names() -> set[str]:
    """Collect every name the valid fixture files can define."""
    names = {"REQUIRED_VAR"}
    for path in sorted((FIXTURES_DIR / "valid").glob("*.yaml")):
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
        for cast_to_upper in (False, True):
            try:
                names.update(flatten(document, cast_to_upper))
            except DuplicateKeyError:
                continue
    return names


FIXTURE_VARIABLES = frozenset(_fixture_variable_names())


@pytest.fixture(autouse=True)
def clean_environment() -> Generator[EnvironmentStore, None, None]:
    """Clear fixture variables from the process environment around each test."""
    store = EnvironmentStore()
    for name in FIXTURE_VARIABLES:
        store.clear(name)
    yield store
    for name in FIXTURE_VARIABLES:
        store.clear(name)


@pytest.fixture
def key_val() -> Generator[tuple[str, str], None, None]:
    """Generate a unique variable name and value, cleared afterwards."""
    key = f"YAMLENV_TEST_{uuid.uuid4().hex.upper()}"
    value = uuid.uuid4().hex
    yield key, value
    EnvironmentStore().clear(key)


@pytest.fixture
def write_yaml(tmp_path: Path) -> Callable[..., Path]:
    """Write YAML text to a temporary file and return its path."""

    def _write(content: str, name: str = "env.yaml") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Undo any structlog configuration a test installed."""
    yield
    structlog.reset_defaults()
