"""Loading exported blueprint documents from JSON files.

Files hold the decoded JSON of a blueprint string, i.e. the wrapped form
``{"blueprint": {...}}`` (or any other document kind).
"""

import logging
from pathlib import Path

import orjson

from ..blueprint import Document, parse_document


class DocumentFileLoader:
    """Loads documents from JSON files."""

    def __init__(self):
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def load(self, path: Path) -> Document:
        """Load a document from a JSON file.

        Args:
            path: Path to JSON file

        Returns:
            Parsed document

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file is not valid JSON
            BlueprintError: If the JSON is not a valid document (ValueError subclass)
        """
        if not path.exists():
            raise FileNotFoundError(f"Blueprint file not found: {path}")

        self.logger.debug(f"Loading document from: {path}")

        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as e:
            raise ValueError(f"Failed to parse JSON from {path}: {e}") from e

        document = parse_document(data)
        self.logger.debug(
            f"Loaded {document.kind.value} '{document.label}' (game {document.version_string()})"
        )
        return document
