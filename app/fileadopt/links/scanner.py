"""Cross-reference table of file links embedded in text content.

Text content such as page bodies often points at public files with plain
``src``/``href`` attributes instead of going through the registry. The
scanner extracts those links and records which source references which
file, so such files can be recognized as in use.
"""

import logging
import re
import sqlite3
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from fileadopt.core.uri import canonicalize_link
from fileadopt.models.records import HardLinkRecord
from fileadopt.store.database import HARDLINK_TABLE, Database, store_errors

logger = logging.getLogger(__name__)

_ATTRIBUTE_RE = re.compile(r"""(?:src|href)\s*=\s*(["'])([^"']+)\1""", re.IGNORECASE)
_FILES_MARKER = "/files/"


@dataclass(frozen=True, slots=True)
class TextSource:
    """A piece of text content to scan.

    Attributes:
        source_id: Identifier of the owning content (e.g. "node:12").
        text: Raw markup.
    """

    source_id: str
    text: str

    def __post_init__(self) -> None:
        if not self.source_id:
            msg = "source_id cannot be empty"
            raise ValueError(msg)


def extract_links(text: str) -> list[str]:
    """Return canonical file links found in ``text``, in order, deduplicated."""
    links: list[str] = []
    seen: set[str] = set()
    for match in _ATTRIBUTE_RE.finditer(text):
        value = match.group(2).strip()
        if _FILES_MARKER not in value:
            continue
        link = canonicalize_link(value)
        if link not in seen:
            seen.add(link)
            links.append(link)
    return links


class LinkScanner:
    """Maintains the hard-link cross-reference table.

    Args:
        database: Shared database handle.
        clock: Wall clock for row timestamps.
    """

    def __init__(self, database: Database, *, clock: Callable[[], float] = time.time) -> None:
        self._db = database
        self._clock = clock

    @staticmethod
    def extract_links(text: str) -> list[str]:
        """See :func:`extract_links`."""
        return extract_links(text)

    def refresh(self, sources: Iterable[TextSource]) -> int:
        """Rebuild the table from ``sources``.

        Existing rows are removed first; the whole refresh is one transaction.

        Returns:
            Number of (source, file) pairs recorded.

        Raises:
            StoreError: If a write fails.
        """
        now = int(self._clock())
        recorded = 0
        with self._db.batch():
            with store_errors("truncate hard links"):
                self._db.execute(f"DELETE FROM {HARDLINK_TABLE}")
            for source in sources:
                for uri in extract_links(source.text):
                    with store_errors(f"record hard link {source.source_id} -> {uri}"):
                        self._db.execute(
                            f"""
                            INSERT OR IGNORE INTO {HARDLINK_TABLE} (source_id, uri, timestamp)
                            VALUES (?, ?, ?)
                            """,
                            (source.source_id, uri, now),
                        )
                    recorded += 1
        logger.info("Recorded %d hard link(s)", recorded)
        return recorded

    def list_references(self) -> list[HardLinkRecord]:
        """Return every recorded reference ordered by URI, then source."""
        with store_errors("list hard links"):
            rows = self._db.execute(
                f"SELECT source_id, uri, timestamp FROM {HARDLINK_TABLE} ORDER BY uri, source_id"
            ).fetchall()
        return [_to_record(row) for row in rows]

    def references_for(self, uri: str) -> list[str]:
        """Return the source ids that link to ``uri``."""
        with store_errors(f"read hard links for {uri}"):
            rows = self._db.execute(
                f"SELECT source_id FROM {HARDLINK_TABLE} WHERE uri = ? ORDER BY source_id",
                (uri,),
            ).fetchall()
        return [row["source_id"] for row in rows]


def _to_record(row: sqlite3.Row) -> HardLinkRecord:
    return HardLinkRecord(
        source_id=row["source_id"],
        uri=row["uri"],
        timestamp=int(row["timestamp"]),
    )
