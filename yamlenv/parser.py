"""Document parser boundary.

The loader only needs something that turns file text into a nested
document. ``YamlDocumentParser`` is the default; anything implementing
``DocumentParser`` can replace it.
"""

from typing import Protocol, runtime_checkable

import yaml


@runtime_checkable
class DocumentParser(Protocol):
    """Protocol for structured-document parsers."""

    def parse(self, content: str) -> object:
        """Parse text into a nested document.

        Args:
            content: Raw file text.

        Returns:
            The parsed tree. Anything other than a mapping is rejected by
            the loader.

        Raises:
            yaml.YAMLError: If the text cannot be parsed.
        """
        ...


class YamlDocumentParser:
    """Parse YAML with PyYAML's safe loader."""

    def parse(self, content: str) -> object:
        return yaml.safe_load(content)
