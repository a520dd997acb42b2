"""Process environment store with write-through mirrors.

A host may expose more than one view of "the environment": the process
environment itself plus, for example, a WSGI ``environ`` dict or an
application-context mapping. ``EnvironmentStore`` keeps all of them in sync
so that every view reports the same value for a name after each mutation.
"""

import os
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Protocol, runtime_checkable

from yamlenv.encoding import encode_scalar, encode_structure


@runtime_checkable
class EnvironmentMirror(Protocol):
    """One view of the environment variable table."""

    def get(self, name: str) -> str | None:
        """Return the value for ``name`` or None when absent."""
        ...

    def set(self, name: str, value: str) -> None:
        """Store ``value`` under ``name``."""
        ...

    def clear(self, name: str) -> None:
        """Remove ``name``; absent names are ignored."""
        ...

    def snapshot(self) -> dict[str, str]:
        """Return a copy of every variable in this view."""
        ...


class ProcessEnvironment:
    """The real process environment (``os.environ``).

    Writes through ``os.environ`` reach the C-level environment, so child
    processes and ``os.getenv`` observe them.
    """

    def get(self, name: str) -> str | None:
        """Read a variable from the process environment."""
        return os.environ.get(name)

    def set(self, name: str, value: str) -> None:
        """Write a variable, encoding non-string values as compact JSON."""
        if not isinstance(value, str):
            value = encode_structure(value)
        os.environ[name] = value

    def clear(self, name: str) -> None:
        """Unset a variable in the process environment."""
        os.environ.pop(name, None)

    def snapshot(self) -> dict[str, str]:
        """Copy the whole process environment."""
        return dict(os.environ)


class MappingMirror:
    """A mirror backed by any mutable mapping, e.g. a WSGI ``environ``."""

    def __init__(self, mapping: MutableMapping[str, str]) -> None:
        """Wrap ``mapping``; writes go straight into it."""
        self._mapping = mapping

    def get(self, name: str) -> str | None:
        """Read a variable from the wrapped mapping."""
        return self._mapping.get(name)

    def set(self, name: str, value: str) -> None:
        """Store a value in the wrapped mapping as given."""
        self._mapping[name] = value

    def clear(self, name: str) -> None:
        """Remove a variable from the wrapped mapping."""
        self._mapping.pop(name, None)

    def snapshot(self) -> dict[str, str]:
        """Copy the wrapped mapping."""
        return dict(self._mapping)


def sanitize_value(value: object) -> object:
    """Normalize a value before it is written to the environment.

    Booleans become ``"true"``/``"false"``, null becomes the empty string,
    lists and mappings pass through untouched, and every other scalar is
    converted to text and stripped of surrounding whitespace.
    """
    if isinstance(value, (list, tuple, Mapping)):
        return value
    return encode_scalar(value).strip()


class EnvironmentStore:
    """Single logical environment table exposed through several mirrors.

    Lookups scan ``mirrors`` in the order given (most request-scoped first)
    and fall back to the process environment. Mutations write every mirror
    and the process environment.

    The optional ``host`` mirror stands for an environment owned by a parent
    host process. It is never read by ``get``; ``set`` overwrites a name there
    only when the host already defines it.
    """

    def __init__(
        self,
        mirrors: Sequence[EnvironmentMirror] = (),
        process: EnvironmentMirror | None = None,
        host: EnvironmentMirror | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            mirrors: Additional views, highest lookup priority first.
            process: Process environment view (default: ``os.environ``).
            host: Host-level environment, overwritten only when it already
                defines a name.
        """
        self._mirrors = list(mirrors)
        self._process = process if process is not None else ProcessEnvironment()
        self._host = host

    @property
    def mirrors(self) -> list[EnvironmentMirror]:
        """Get the mirrors in lookup order, process environment last."""
        return [*self._mirrors, self._process]

    def get(self, name: str) -> str | None:
        """Look a variable up in priority order, process environment last."""
        for mirror in self._mirrors:
            value = mirror.get(name)
            if value is not None:
                return value
        return self._process.get(name)

    def contains(self, name: str) -> bool:
        """Check whether any view defines ``name``, even as empty text."""
        return self.get(name) is not None

    def set(self, name: str, value: str) -> None:
        """Write a variable to every mirror and to a host that defines it."""
        if self._host is not None and self._host.get(name):
            self._host.set(name, value)

        for mirror in self.mirrors:
            mirror.set(name, value)

    def clear(self, name: str) -> None:
        """Remove a variable from every mirror except the host."""
        for mirror in self.mirrors:
            mirror.clear(name)

    def environ(self) -> dict[str, str]:
        """Return the merged view of every mirror.

        Higher-priority mirrors win over lower ones and the process
        environment, matching ``get``.
        """
        merged: dict[str, str] = {}
        for mirror in reversed(self.mirrors):
            merged.update(mirror.snapshot())
        return merged
