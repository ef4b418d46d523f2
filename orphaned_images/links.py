"""
Link index functions for Orphaned Images MCP Server.

Builds the resolved link index (source note -> linked vault files) from the
wikilinks, embeds, and Markdown links found in the vault's notes.
"""

import posixpath
import re
from collections import defaultdict
from urllib.parse import unquote

import structlog

from .config import NOTE_EXTENSION
from .interfaces import DocumentStore
from .utils import file_extension, file_name, parent_folder

logger = structlog.get_logger(__name__)

# [[target]], [[target|alias]], [[target#heading]], ![[embed.png]]
WIKILINK_PATTERN = re.compile(r'!?\[\[([^\]|#^]*)(?:[#^][^\]|]*)?(?:\|[^\]]*)?\]\]')
# [text](target), ![alt](target "title"), [text](<target with spaces>)
MARKDOWN_LINK_PATTERN = re.compile(r'!?\[[^\]]*\]\(\s*(?:<([^>]+)>|([^)\s]+))(?:\s+["\'][^)]*["\'])?\s*\)')
FENCED_CODE_PATTERN = re.compile(r'^(```|~~~).*?^\1', re.DOTALL | re.MULTILINE)
INLINE_CODE_PATTERN = re.compile(r'`[^`\n]*`')
URL_SCHEME_PATTERN = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.-]*:')


def strip_code(content: str) -> str:
    """Remove fenced code blocks and inline code spans."""
    content = FENCED_CODE_PATTERN.sub('', content)
    return INLINE_CODE_PATTERN.sub('', content)


def extract_links(content: str) -> list[str]:
    """Extract raw link paths from note content, in document order.

    Markdown link targets are percent-decoded and lose their '#fragment';
    external URLs and pure anchors are skipped.
    """
    content = strip_code(content)
    found: list[tuple[int, str]] = []

    for match in WIKILINK_PATTERN.finditer(content):
        target = match.group(1).strip()
        if target:
            found.append((match.start(), target))

    for match in MARKDOWN_LINK_PATTERN.finditer(content):
        target = (match.group(1) or match.group(2)).strip()
        if not target or target.startswith("#") or URL_SCHEME_PATTERN.match(target):
            continue
        target = unquote(target.split("#", 1)[0])
        if target:
            found.append((match.start(), target))

    found.sort(key=lambda x: x[0])
    return [target for _, target in found]


def _candidates(link: str) -> list[str]:
    """Paths a link may denote: as written, then with '.md' when it has no extension."""
    if file_extension(file_name(link)):
        return [link]
    return [link, f"{link}.{NOTE_EXTENSION}"]


def _pick_closest(matches: list[str], source_folder: str) -> str:
    """Prefer a match in the source's own folder, then the shortest path."""
    for path in matches:
        if parent_folder(path) == source_folder:
            return path
    return min(matches, key=lambda p: (len(p), p))


def resolve_link(link: str, source: str, paths: set[str], by_name: dict[str, list[str]]) -> str | None:
    """Resolve a link from a note to a vault path.

    Resolution order (first hit wins):
    1. './' or '../' links relative to the source folder
    2. Exact vault path ('/'-prefixed links are vault-absolute)
    3. Path relative to the source folder
    4. File name match, or path suffix match when the link has folders

    Returns:
        The resolved vault path, or None if the link is unresolved
    """
    source_folder = parent_folder(source)

    if link.startswith("./") or link.startswith("../"):
        joined = posixpath.normpath(posixpath.join(source_folder, link))
        for candidate in _candidates(joined):
            if candidate in paths:
                return candidate
        return None

    link = link.lstrip("/")
    if not link:
        return None

    for candidate in _candidates(link):
        if candidate in paths:
            return candidate

    if source_folder:
        for candidate in _candidates(posixpath.join(source_folder, link)):
            if candidate in paths:
                return candidate

    for candidate in _candidates(link):
        matches = by_name.get(file_name(candidate), [])
        if "/" in candidate:
            matches = [p for p in matches if p.endswith("/" + candidate)]
        if matches:
            return _pick_closest(matches, source_folder)

    return None


async def build_link_index(store: DocumentStore) -> dict[str, dict[str, int]]:
    """Build the resolved link index of every Markdown note in the store.

    Returns:
        dict mapping each readable note path to {target path: link count}.
        Unresolved links are left out; unreadable notes are logged and skipped.
    """
    files = await store.list_files()
    paths = {f.path for f in files}
    by_name: dict[str, list[str]] = defaultdict(list)
    for f in files:
        by_name[f.name].append(f.path)

    index: dict[str, dict[str, int]] = {}
    unresolved = 0

    for note in files:
        if note.extension != NOTE_EXTENSION:
            continue
        try:
            content = await store.read(note.path)
        except OSError as e:
            logger.warning("note_read_failed", path=note.path, error=str(e))
            continue

        targets: dict[str, int] = {}
        for link in extract_links(content):
            target = resolve_link(link, note.path, paths, by_name)
            if target is None:
                unresolved += 1
                continue
            targets[target] = targets.get(target, 0) + 1
        index[note.path] = targets

    logger.debug(
        "link_index_built",
        note_count=len(index),
        link_count=sum(len(t) for t in index.values()),
        unresolved=unresolved,
    )
    return index
