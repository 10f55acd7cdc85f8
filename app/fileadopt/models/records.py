"""Persisted row types for the index, orphan and link tables."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class IndexRecord:
    """State of one file in the index.

    Attributes:
        uri: Canonical URI (unique key).
        is_ignored: True if an ignore pattern matched the file.
        is_managed: True if the registry has an entry for the file.
        directory_depth: Number of separators in the relative path.
        timestamp: Unix time the row last changed.
        id: Row id assigned by the store (0 for unsaved records).
    """

    uri: str
    is_ignored: bool
    is_managed: bool
    directory_depth: int
    timestamp: int
    id: int = 0

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.uri:
            msg = "Index record URI cannot be empty"
            raise ValueError(msg)
        if self.directory_depth < 0:
            msg = f"Directory depth cannot be negative, got {self.directory_depth}"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class OrphanRecord:
    """A file found without a registry entry.

    Attributes:
        uri: Canonical URI (unique key).
        timestamp: Unix time the orphan was last observed.
    """

    uri: str
    timestamp: int


@dataclass(frozen=True, slots=True)
class HardLinkRecord:
    """A hard-coded link from a text source to a file.

    Attributes:
        source_id: Identifier of the text source (node id, table:row, path).
        uri: Canonical URI of the linked file.
        timestamp: Unix time the link was recorded.
    """

    source_id: str
    uri: str
    timestamp: int
