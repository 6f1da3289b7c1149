"""
Verification Cache

Maps normalized DOIs to their verification outcome for the duration of one
run. The cache has a single writer phase: the batch verifier records each
DOI exactly once, then freezes the cache. Record validation only reads it.
"""

import re
from typing import Dict, Iterable, Iterator, Optional


_DOI_PREFIXES = re.compile(r"^(?:https?://(?:dx\.)?doi\.org/|doi:)", re.IGNORECASE)


def normalize_doi(doi: str) -> str:
    """Canonical cache key for a DOI.

    DOIs are case-insensitive, and authors paste them both bare and as
    resolver URLs.
    """
    return _DOI_PREFIXES.sub("", doi.strip()).strip().lower()


class CacheFrozenError(RuntimeError):
    """Raised when writing to a cache after its writer phase has ended."""
    pass


class VerificationCache:
    """DOI → verified flag, written once per DOI, then frozen."""

    def __init__(self, entries: Optional[Dict[str, bool]] = None):
        self._entries: Dict[str, bool] = {}
        self._frozen = False
        for doi, verified in (entries or {}).items():
            self.record(doi, verified)

    def record(self, doi: str, verified: bool) -> None:
        """Store the outcome for a DOI.

        Raises:
            CacheFrozenError: If the cache has been frozen
            ValueError: If the DOI already has an entry
        """
        if self._frozen:
            raise CacheFrozenError(f"Cannot record '{doi}': verification cache is frozen")
        key = normalize_doi(doi)
        if key in self._entries:
            raise ValueError(f"DOI '{doi}' already has a verification entry")
        self._entries[key] = bool(verified)

    def record_all(self, dois: Iterable[str], verified: bool) -> None:
        for doi in dois:
            self.record(doi, verified)

    def lookup(self, doi: str) -> Optional[bool]:
        """Verification outcome for a DOI, or None if it was never resolved."""
        return self._entries.get(normalize_doi(doi))

    def freeze(self) -> "VerificationCache":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, doi: str) -> bool:
        return normalize_doi(doi) in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
