"""
DOI Verification

Batched, retrying verification of cited DOIs and the per-run cache that
record validation reads from.
"""

from claims.identifiers.cache import VerificationCache, normalize_doi
from claims.identifiers.client import DOILookupClient, LookupClientConfig
from claims.identifiers.retry import RetryPolicy, attempt_with_policy
from claims.identifiers.verifier import BatchVerifier

__all__ = [
    "VerificationCache",
    "normalize_doi",
    "DOILookupClient",
    "LookupClientConfig",
    "RetryPolicy",
    "attempt_with_policy",
    "BatchVerifier",
]
