"""
Canvas search functions for Orphaned Images MCP Server.

Canvas documents are not part of the resolved link index, so their text and
JSON structure are searched directly for asset paths. The search is
deliberately permissive: a path mentioned anywhere in a canvas counts as a
reference.
"""

import json
from typing import Any

import structlog

from .config import CANVAS_EXTENSION, FILE_NODE_TYPES
from .interfaces import DocumentStore
from .models import VaultFile
from .utils import CanvasParseError, path_variants

logger = structlog.get_logger(__name__)


def contains_any(text: str, variants: tuple[str, ...]) -> bool:
    """Check whether any non-empty variant occurs in text."""
    return any(variant and variant in text for variant in variants)


def parse_canvas(text: str) -> dict[str, Any]:
    """Parse canvas text into its JSON object.

    Raises:
        CanvasParseError: If the text is not JSON or its root is not an object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CanvasParseError(str(e)) from e

    if not isinstance(data, dict):
        raise CanvasParseError(f"Canvas root is a {type(data).__name__}, not an object")
    return data


def node_references(node: Any, variants: tuple[str, ...]) -> bool:
    """Check a canvas node for a reference to any path variant.

    File-like nodes (file, image, media) are checked on their `file`
    property first; every node then falls back to a scan of all its string
    properties.
    """
    if not isinstance(node, dict):
        return False

    if node.get("type") in FILE_NODE_TYPES:
        file_ref = node.get("file")
        if isinstance(file_ref, str) and contains_any(file_ref, variants):
            return True

    return any(isinstance(value, str) and contains_any(value, variants) for value in node.values())


def edge_references(edge: Any, variants: tuple[str, ...]) -> bool:
    """Check the serialized text of a canvas edge for any path variant."""
    return contains_any(json.dumps(edge, ensure_ascii=False), variants)


def canvas_references(data: dict[str, Any], variants: tuple[str, ...]) -> bool:
    """Check the nodes, then the edges, of a parsed canvas."""
    nodes = data.get("nodes")
    edges = data.get("edges")

    if isinstance(nodes, list):
        for node in nodes:
            if node_references(node, variants):
                return True

    if isinstance(edges, list):
        for edge in edges:
            if edge_references(edge, variants):
                return True

    return False


class CanvasSearch:
    """Search the vault's canvas documents for asset paths.

    One instance serves one scan: each canvas is read and parsed at most
    once, and read or parse failures are logged once and never raised.
    """

    def __init__(self, store: DocumentStore, files: list[VaultFile] | None = None):
        self.store = store
        self._files = files
        self._documents: list[tuple[str, str]] | None = None
        self._parsed: dict[str, dict[str, Any] | None] = {}

    async def _load_documents(self) -> list[tuple[str, str]]:
        """Read every canvas document. Returns (path, text) pairs."""
        if self._documents is not None:
            return self._documents

        files = self._files if self._files is not None else await self.store.list_files()
        documents: list[tuple[str, str]] = []
        for f in files:
            if f.extension != CANVAS_EXTENSION:
                continue
            try:
                text = await self.store.read(f.path)
            except OSError as e:
                logger.warning("canvas_read_failed", path=f.path, error=str(e))
                continue
            documents.append((f.path, text))

        self._documents = documents
        return documents

    def _parse(self, canvas_path: str, text: str) -> dict[str, Any] | None:
        if canvas_path not in self._parsed:
            try:
                self._parsed[canvas_path] = parse_canvas(text)
            except CanvasParseError as e:
                logger.warning("canvas_parse_failed", path=canvas_path, error=str(e))
                self._parsed[canvas_path] = None
        return self._parsed[canvas_path]

    async def contains(self, path: str) -> bool:
        """Check whether any canvas document references the given vault path."""
        variants = path_variants(path)

        for canvas_path, text in await self._load_documents():
            # Raw text hit, no need to parse
            if contains_any(text, variants):
                logger.debug("canvas_reference_found", canvas=canvas_path, path=path, match="text")
                return True

            data = self._parse(canvas_path, text)
            if data is not None and canvas_references(data, variants):
                logger.debug("canvas_reference_found", canvas=canvas_path, path=path, match="structure")
                return True

        return False


async def is_image_in_canvas_files(path: str, store: DocumentStore) -> bool:
    """Check whether any canvas document in the store references the path."""
    return await CanvasSearch(store).contains(path)
