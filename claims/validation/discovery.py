"""
Corpus Discovery

Enumerates record files in a corpus laid out as:

    <corpus>/<collection>/meta.yml
    <corpus>/<collection>/claims/<type>/<file>.yml
"""

import glob
import os
from typing import Dict, List

from claims.validation.records import RECORD_EXTENSIONS, RecordType


def list_collections(corpus_dir: str) -> List[str]:
    """Names of the collections (one directory per supplement), sorted."""
    if not os.path.isdir(corpus_dir):
        raise FileNotFoundError(f"Corpus directory not found: {corpus_dir}")
    return sorted(
        entry.name for entry in os.scandir(corpus_dir)
        if entry.is_dir() and not entry.name.startswith(".")
    )


def discover_corpus(corpus_dir: str) -> Dict[str, Dict[RecordType, List[str]]]:
    """Find every record file, grouped by collection and record type.

    Returns:
        {collection: {record_type: [sorted file paths]}}; types with no
        files are omitted.
    """
    corpus: Dict[str, Dict[RecordType, List[str]]] = {}
    for collection in list_collections(corpus_dir):
        base = os.path.join(corpus_dir, collection)
        groups: Dict[RecordType, List[str]] = {}

        meta = _matching(os.path.join(base, "meta"))
        if meta:
            groups[RecordType.META] = meta

        for record_type in RecordType.claim_types():
            files = _matching(os.path.join(base, "claims", record_type.value, "*"))
            if files:
                groups[record_type] = files

        corpus[collection] = groups
    return corpus


def flatten(corpus: Dict[str, Dict[RecordType, List[str]]]) -> List[str]:
    """All file paths of a discovered corpus, sorted."""
    return sorted(
        path
        for groups in corpus.values()
        for files in groups.values()
        for path in files
    )


def _matching(stem_pattern: str) -> List[str]:
    files: List[str] = []
    for ext in RECORD_EXTENSIONS:
        files.extend(p for p in glob.glob(stem_pattern + ext) if os.path.isfile(p))
    return sorted(files)
