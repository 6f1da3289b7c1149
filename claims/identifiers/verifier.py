"""
Batch DOI Verifier

Resolves every distinct DOI referenced by a run in as few requests as the
lookup service allows, and writes one cache entry per DOI. A batch that
cannot be resolved, after retries, marks all of its DOIs as unverified
(fail-closed) and does not stop the remaining batches.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence

from claims.identifiers.cache import VerificationCache, normalize_doi
from claims.identifiers.client import MAX_BATCH_SIZE, DOILookupClient
from claims.identifiers.retry import RetryOutcome, RetryPolicy, attempt_with_policy


logger = logging.getLogger(__name__)


def partition(items: Sequence[str], size: int) -> List[List[str]]:
    """Split items into consecutive batches of at most ``size``."""
    if size < 1:
        raise ValueError("Batch size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


@dataclass
class BatchResult:
    """Outcome of resolving one batch.

    Attributes:
        dois: DOIs in request order
        found: Per-DOI flags when the lookup succeeded
        outcome: Retry outcome of the lookup
    """
    dois: List[str]
    outcome: RetryOutcome
    found: List[bool] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.outcome.succeeded


@dataclass
class VerificationStats:
    identifiers: int = 0
    batches: int = 0
    requests: int = 0
    failed_batches: int = 0
    verified: int = 0


class BatchVerifier:
    """Populates a VerificationCache from the lookup service.

    Example:
        >>> verifier = BatchVerifier(DOILookupClient())
        >>> cache = verifier.verify(["10.1000/xyz", "10.1000/abc"])
        >>> cache.lookup("10.1000/xyz")
        True
    """

    def __init__(
        self,
        client: DOILookupClient,
        policy: Optional[RetryPolicy] = None,
        batch_size: int = MAX_BATCH_SIZE,
        max_workers: int = 1,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if not 1 <= batch_size <= MAX_BATCH_SIZE:
            raise ValueError(f"batch_size must be between 1 and {MAX_BATCH_SIZE}")
        self.client = client
        self.policy = policy or RetryPolicy()
        self.batch_size = batch_size
        self.max_workers = max(1, max_workers)
        self.sleep = sleep
        self.stats = VerificationStats()

    def verify(self, dois: Iterable[str], cache: Optional[VerificationCache] = None) -> VerificationCache:
        """Resolve DOIs and return the frozen cache.

        Args:
            dois: DOIs referenced by the run; duplicates are collapsed
            cache: Cache to populate (a new one by default)

        Returns:
            The populated cache, frozen against further writes
        """
        cache = cache if cache is not None else VerificationCache()
        distinct = sorted({normalize_doi(d) for d in dois if d and d.strip()})
        batches = partition(distinct, self.batch_size)
        self.stats = VerificationStats(identifiers=len(distinct), batches=len(batches))

        if batches:
            logger.info(f"Verifying {len(distinct)} DOI(s) in {len(batches)} batch(es)")

        # Batches may resolve concurrently, but only this thread writes to the cache.
        if self.max_workers > 1 and len(batches) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(self._resolve_batch, batches))
        else:
            results = [self._resolve_batch(batch) for batch in batches]

        for result in results:
            self._store(cache, result)

        return cache.freeze()

    def _resolve_batch(self, batch: List[str]) -> BatchResult:
        outcome = attempt_with_policy(
            lambda: self.client.lookup(batch),
            self.policy,
            sleep=self.sleep,
            description=f"DOI batch lookup ({len(batch)} identifiers)",
        )
        if outcome.succeeded:
            return BatchResult(dois=batch, outcome=outcome, found=outcome.value)
        return BatchResult(dois=batch, outcome=outcome)

    def _store(self, cache: VerificationCache, result: BatchResult) -> None:
        self.stats.requests += result.outcome.attempts
        if result.succeeded:
            for doi, found in zip(result.dois, result.found):
                cache.record(doi, found)
            self.stats.verified += sum(1 for f in result.found if f)
            return

        self.stats.failed_batches += 1
        logger.warning(
            f"Marking {len(result.dois)} DOI(s) as unverified after "
            f"{result.outcome.attempts} attempt(s): {result.outcome.error}"
        )
        cache.record_all(result.dois, False)
