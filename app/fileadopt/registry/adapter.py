"""Scan-scoped view of registry membership.

The adapter loads every registered URI with a single query and answers
membership checks from memory. The snapshot is a plain set owned by the
caller; nothing is cached between calls.
"""

import logging

from fileadopt.core.uri import canonicalize
from fileadopt.registry.base import ManagedRegistry

logger = logging.getLogger(__name__)


class ManagedRegistryAdapter:
    """Loads registry membership snapshots.

    Args:
        registry: Registry to query.
    """

    def __init__(self, registry: ManagedRegistry) -> None:
        self._registry = registry

    def load_all(self) -> set[str]:
        """Load the canonical URI of every registry entry.

        Returns:
            A new set; callers may add to it as they adopt files.

        Raises:
            RegistryError: If the registry cannot be queried.
        """
        managed = {canonicalize(uri) for uri in self._registry.list_all_managed_uris()}
        logger.debug("Loaded %d managed URIs", len(managed))
        return managed

    @staticmethod
    def is_member(uri: str, managed: set[str]) -> bool:
        """Check whether a URI is in a membership snapshot."""
        return canonicalize(uri) in managed
