"""Entry point that resolves the env file and owns a loader."""

import os
from collections.abc import Sequence

import structlog

from yamlenv.errors import LoaderNotInitializedError
from yamlenv.loader import Loader
from yamlenv.store import EnvironmentStore
from yamlenv.validator import Validator


logger = structlog.get_logger()

DEFAULT_FILE_NAME = "env.yaml"


def resolve_file_path(path: str | os.PathLike[str], file: object = None) -> str:
    """Join a directory and file name.

    Trailing separators on ``path`` are dropped, and ``file`` falls back to
    ``DEFAULT_FILE_NAME`` when it is not a string.
    """
    if not isinstance(file, str):
        file = DEFAULT_FILE_NAME
    return os.fspath(path).rstrip(os.sep) + os.sep + file


class Yamlenv:
    """Load a YAML environment file from a directory.

    ``load`` keeps variables the host already set; ``overload`` lets the
    file's values win.
    """

    def __init__(
        self,
        path: str | os.PathLike[str],
        file: object = DEFAULT_FILE_NAME,
        cast_to_upper: bool = False,
        store: EnvironmentStore | None = None,
    ) -> None:
        """Initialize the facade.

        Args:
            path: Directory containing the environment file.
            file: File name inside ``path`` (default: ``env.yaml``).
            cast_to_upper: Upper-case every flattened variable name.
            store: Environment store shared by every loader created here.
        """
        self._file_path = resolve_file_path(path, file)
        self._cast_to_upper = cast_to_upper
        self._store = store if store is not None else EnvironmentStore()
        self._loader: Loader | None = None

    @property
    def file_path(self) -> str:
        """Get the resolved environment file path."""
        return self._file_path

    def load(self) -> dict[str, str]:
        """Load the file without overwriting existing variables."""
        return self._load_data(overload=False)

    def overload(self) -> dict[str, str]:
        """Load the file, overwriting existing variables."""
        return self._load_data(overload=True)

    def required(self, variables: str | Sequence[str]) -> Validator:
        """Require variables to be set and return a validator for them.

        Raises:
            ValidationError: If any of the variables is not set.
        """
        if isinstance(variables, str):
            variables = [variables]
        if self._loader is None:
            self._initialize()
        return Validator(variables, self.get_loader())

    def get_env(self, name: str, default: str | None = None) -> str | None:
        """Look up a flattened variable, or ``default`` if unset."""
        value = self.get_loader().get_environment_variable(name)
        return default if value is None else value

    def get_raw_env(self, name: str, default: object = None) -> object:
        """Look up a value in the parsed document, or ``default`` if absent."""
        value = self.get_loader().get_yaml_value(name)
        return default if value is None else value

    def get_loader(self) -> Loader:
        """Get the current loader.

        Raises:
            LoaderNotInitializedError: If nothing has been loaded yet.
        """
        if self._loader is None:
            raise LoaderNotInitializedError()
        return self._loader

    def _initialize(self, overload: bool = False) -> None:
        self._loader = Loader(
            self._file_path,
            immutable=not overload,
            cast_to_upper=self._cast_to_upper,
            store=self._store,
        )
        logger.debug(
            "yamlenv_initialized",
            component="facade",
            file_path=self._file_path,
            overload=overload,
        )

    def _load_data(self, overload: bool) -> dict[str, str]:
        self._initialize(overload)
        return self.get_loader().load()
