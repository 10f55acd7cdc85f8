"""Registry entity handle.

Handles are what the managed-file registry returns when it creates an
entry, and what it passes to insert/delete listeners.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class EntityHandle:
    """Reference to an entry in the managed-file registry.

    Attributes:
        id: Registry identifier of the entry.
        uri: File URI recorded by the registry.
        filename: Base name of the file.
        timestamp: Modification time recorded for the entry (Unix seconds).
    """

    id: int
    uri: str
    filename: str
    timestamp: int

    def __post_init__(self) -> None:
        """Validate handle data after initialization."""
        if not self.uri:
            msg = "Entity URI cannot be empty"
            raise ValueError(msg)
