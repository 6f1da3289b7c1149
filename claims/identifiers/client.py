"""
Bibliographic Lookup Client

HTTP adapter for the Semantic Scholar Graph API batch endpoint, which
resolves up to 500 paper identifiers per request. The response is a JSON
array parallel to the request: a paper object where the identifier is
known, ``null`` where it is not.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import requests

from claims.identifiers.errors import (
    InvalidRequestError,
    NetworkError,
    RateLimitError,
    RequestTimeoutError,
    ResponseFormatError,
    ServiceError,
)


logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.semanticscholar.org/graph/v1/paper/batch"
MAX_BATCH_SIZE = 500


@dataclass
class LookupClientConfig:
    """Configuration for the lookup client.

    Attributes:
        endpoint: Batch lookup URL
        api_key: Optional API key, sent as ``x-api-key``
        timeout: Request timeout in seconds
    """
    endpoint: str = DEFAULT_ENDPOINT
    api_key: Optional[str] = None
    timeout: float = 30.0


class DOILookupClient:
    """Resolves batches of DOIs against the lookup service.

    Every failure is mapped onto the claims.identifiers.errors hierarchy so
    that the retry policy can classify it.
    """

    def __init__(self, config: Optional[LookupClientConfig] = None, session: Optional[requests.Session] = None):
        self.config = config or LookupClientConfig()
        self.session = session or requests.Session()

    def lookup(self, dois: Sequence[str]) -> List[bool]:
        """Look up a batch of DOIs in one request.

        Args:
            dois: Up to MAX_BATCH_SIZE normalized DOIs

        Returns:
            One flag per requested DOI, in request order: True if found

        Raises:
            VerificationError: Subclass describing why the request failed
        """
        if len(dois) > MAX_BATCH_SIZE:
            raise InvalidRequestError(
                f"Batch of {len(dois)} identifiers exceeds the limit of {MAX_BATCH_SIZE}"
            )

        headers = {}
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key

        try:
            response = self.session.post(
                self.config.endpoint,
                params={"fields": "externalIds"},
                json={"ids": [f"DOI:{doi}" for doi in dois]},
                headers=headers,
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout:
            raise RequestTimeoutError(
                f"Lookup request timed out after {self.config.timeout}s"
            )
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(f"Cannot connect to {self.config.endpoint}: {e}")
        except requests.exceptions.RequestException as e:
            raise InvalidRequestError(f"Lookup request failed: {e}")

        self._raise_for_status(response)

        try:
            body = response.json()
        except ValueError as e:
            raise ResponseFormatError(f"Lookup response is not JSON: {e}")

        if not isinstance(body, list) or len(body) != len(dois):
            raise ResponseFormatError(
                f"Expected a list of {len(dois)} entries, got "
                f"{len(body) if isinstance(body, list) else type(body).__name__}"
            )

        return [entry is not None for entry in body]

    def _raise_for_status(self, response) -> None:
        status = response.status_code
        if status < 400:
            return
        detail = response.text[:200] if response.text else ""
        if status == 429:
            raise RateLimitError("Lookup service rate limit exceeded: 429 Too Many Requests", status)
        if status >= 500:
            raise ServiceError(f"Lookup service error: {status} {detail}", status)
        raise InvalidRequestError(f"Lookup request rejected: {status} {detail}", status)
