"""Assertions over a set of required environment variables."""

import re
from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING

import structlog

from yamlenv.errors import ValidationError


if TYPE_CHECKING:
    from yamlenv.loader import Loader

logger = structlog.get_logger()

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


class Validator:
    """Checks that variables exist and satisfy chained assertions.

    Construction fails immediately if any name is missing. Each assertion
    re-checks the full name list against the current environment and raises
    a single ``ValidationError`` listing every failing name; on success it
    returns the validator so calls can be chained::

        Validator(["PORT"], loader).not_empty().is_integer()
    """

    def __init__(self, variables: Sequence[str], loader: "Loader") -> None:
        """Initialize the validator.

        Args:
            variables: Names that must be set.
            loader: Loader used for lookups only.

        Raises:
            ValidationError: If any of the names is not set.
        """
        self._variables = list(variables)
        self._loader = loader

        self._assert_callback(
            lambda value: value is not None,
            "is missing",
        )

    @property
    def variables(self) -> list[str]:
        """Get the names under validation."""
        return list(self._variables)

    def not_empty(self) -> "Validator":
        """Assert every variable is non-empty after trimming whitespace."""
        return self._assert_callback(
            lambda value: value is not None and value.strip() != "",
            "is empty",
        )

    def is_integer(self) -> "Validator":
        """Assert every variable is a base-10 integer."""
        return self._assert_callback(
            lambda value: value is not None
            and _INTEGER_PATTERN.fullmatch(value.strip()) is not None,
            "is not an integer",
        )

    def allowed_values(self, choices: Iterable[str]) -> "Validator":
        """Assert every variable is one of ``choices``."""
        allowed = list(choices)
        return self._assert_callback(
            lambda value: value in allowed,
            "is not an allowed value",
        )

    def _assert_callback(
        self,
        callback: Callable[[str | None], bool],
        message: str,
    ) -> "Validator":
        failures = [
            f"{name} {message}"
            for name in self._variables
            if not callback(self._loader.get_environment_variable(name))
        ]

        if failures:
            logger.warning(
                "env_validation_failed",
                component="validator",
                assertion=message,
                failure_count=len(failures),
            )
            raise ValidationError(failures)

        return self
