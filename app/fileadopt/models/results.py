"""Result types returned by the reconciliation engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ScanCounts:
    """Counters from a scan.

    Attributes:
        files: Files seen that match no ignore pattern.
        orphans: Seen files without a registry entry.
        adopted: Orphans adopted during the scan.
    """

    files: int = 0
    orphans: int = 0
    adopted: int = 0


@dataclass(frozen=True, slots=True)
class ScanLists:
    """Counters and the capped adoption candidate list from a scan.

    ``files`` and ``orphans`` keep counting after ``to_manage`` is full.

    Attributes:
        files: Files seen that match no ignore pattern.
        orphans: Seen files without a registry entry.
        to_manage: First orphan URIs in walk order, capped at the scan limit.
    """

    files: int = 0
    orphans: int = 0
    to_manage: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ChunkResult:
    """Output of one chunk of a resumable scan.

    Attributes:
        to_manage: Orphan URIs found in this chunk, in walk order.
        resume: Token to pass to the next chunk; empty when the walk is done.
    """

    to_manage: list[str] = field(default_factory=list)
    resume: str = ""

    @property
    def is_complete(self) -> bool:
        """True if the traversal finished in this chunk."""
        return not self.resume


@dataclass(frozen=True, slots=True)
class AdoptionResult:
    """Outcome of adopting a single file.

    Attributes:
        uri: Canonical URI of the file.
        success: True if a registry entry was created.
        error: Reason the file was not adopted, None on success.
    """

    uri: str
    success: bool
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if adoption failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class AdoptionSummary:
    """Aggregated outcome of a batch adoption.

    Attributes:
        results: One result per attempted URI, in input order.
    """

    results: tuple[AdoptionResult, ...] = ()

    @property
    def attempted(self) -> int:
        """Number of files the batch tried to adopt."""
        return len(self.results)

    @property
    def adopted(self) -> int:
        """Number of files adopted."""
        return sum(1 for r in self.results if r.success)

    @property
    def failures(self) -> list[AdoptionResult]:
        """Results of the files that were not adopted."""
        return [r for r in self.results if r.failed]
