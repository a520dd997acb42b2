"""Domain exceptions for yamlenv.

All exceptions raised by the loader, the validator and the facade inherit
from ``YamlenvError`` so callers can handle the whole family at once.
"""

VALIDATION_PREFIX = "One or more environment variables failed assertions: "


class YamlenvError(Exception):
    """Base exception for all yamlenv errors."""


class InvalidPathError(YamlenvError):
    """Raised when the environment file is missing, unreadable or not a file."""

    def __init__(self, file_path: str) -> None:
        """Initialize the error with the offending path.

        Args:
            file_path: Path that could not be read.
        """
        self.file_path = file_path
        super().__init__(f"Unable to read the environment file at {file_path}.")


class InvalidDocumentError(YamlenvError):
    """Raised when the parser does not yield a mapping document."""

    def __init__(self, file_path: str) -> None:
        """Initialize the error with the offending path.

        Args:
            file_path: Path of the file that failed to parse.
        """
        self.file_path = file_path
        super().__init__(f"Input file does not contain valid Yaml at {file_path}.")


class DuplicateKeyError(YamlenvError):
    """Raised when two document branches flatten to the same variable name."""

    def __init__(self, key: str) -> None:
        """Initialize the error with the colliding name.

        Args:
            key: Flat name produced by more than one branch.
        """
        self.key = key
        super().__init__(
            f'Flattening produced a duplicate environment variable name: "{key}"'
        )


class InvalidVariableError(YamlenvError):
    """Raised when a flattened pair cannot be stored in the environment."""

    def __init__(self, key: str, reason: str) -> None:
        """Initialize the error.

        Args:
            key: Flat variable name of the offending pair.
            reason: What makes the name or value unusable.
        """
        self.key = key
        self.reason = reason
        super().__init__(f'Invalid environment variable "{key}": {reason}')


class ImmutableOverwriteError(YamlenvError):
    """Raised on an explicit overwrite of a set variable while immutable."""

    def __init__(self, name: str) -> None:
        """Initialize the error with the protected name.

        Args:
            name: Variable that is already set.
        """
        self.name = name
        super().__init__(
            "Environment variables cannot be overwritten in an immutable "
            f'environment. Tried overwriting "{name}"'
        )


class ValidationError(YamlenvError):
    """Raised when one or more variables fail a validator assertion.

    Every failure of a single assertion call is aggregated into one message.
    """

    def __init__(self, failures: list[str]) -> None:
        """Initialize the error.

        Args:
            failures: Per-variable failure texts, e.g. ``"FOO is missing"``.
        """
        self.failures = list(failures)
        super().__init__(f"{VALIDATION_PREFIX}{', '.join(self.failures)}.")


class LoaderNotInitializedError(YamlenvError):
    """Raised when the facade's loader is requested before any load."""

    def __init__(self) -> None:
        """Initialize the error with its fixed message."""
        super().__init__("Loader has not been initialized yet.")
