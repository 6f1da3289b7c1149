"""
Pytest configuration and shared fixtures.
"""
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, List, Optional
from unittest.mock import Mock

import pytest
import yaml

from claims.identifiers.client import DOILookupClient
from claims.identifiers.retry import RetryPolicy
from claims.identifiers.verifier import BatchVerifier
from claims.utils.logging_config import logging_config
from claims.validation.engine import ValidationEngine
from claims.validation.schema_registry import SchemaRegistry
from claims.validation.vocabulary import VocabularyRegistry


REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture(autouse=True)
def isolate_tests(tmp_path, monkeypatch):
    """
    Automatically isolate each test:
    1. Point HOME at an empty directory so no user config is picked up
    2. Remove CLAIMS_* and API key variables from the environment
    3. Remove log handlers installed by CLI invocations
    """
    home = tmp_path / "home"
    home.mkdir(exist_ok=True)
    monkeypatch.setenv("HOME", str(home))

    for name in list(os.environ):
        if name.startswith("CLAIMS_") or name == "SEMANTIC_SCHOLAR_API_KEY":
            monkeypatch.delenv(name, raising=False)

    root_logger = logging.getLogger()
    level = root_logger.level

    yield

    for handler in (logging_config._console_handler, logging_config._log_file_handler):
        if handler is not None:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)


@pytest.fixture
def schema_dir(tmp_path):
    """Copy of the shipped JSON schemas."""
    target = tmp_path / "schemas"
    shutil.copytree(REPO_ROOT / "schemas", target)
    return target


@pytest.fixture
def vocab_dir(tmp_path):
    """Small vocabularies for tests."""
    target = tmp_path / "vocab"
    target.mkdir()
    (target / "effects.yml").write_text(
        "- focus-increase\n- muscle-strength\n- endurance\n- memory-formation\n",
        encoding="utf-8",
    )
    (target / "biomarkers.yml").write_text(
        "- testosterone\n- creatine-phosphate\n- cortisol\n",
        encoding="utf-8",
    )
    return target


@pytest.fixture
def corpus_dir(tmp_path):
    target = tmp_path / "supplements"
    target.mkdir()
    return target


@pytest.fixture
def write_claim(corpus_dir):
    """Write a record into the corpus and return its path as a string.

    Usage:
        write_claim("creatine", "effects", "name.yml", {...})
        write_claim("creatine", "meta", "meta.yml", {...})
    """
    def _write(collection: str, record_type: str, filename: str, data, raw: Optional[str] = None) -> str:
        if record_type == "meta":
            directory = corpus_dir / collection
        else:
            directory = corpus_dir / collection / "claims" / record_type
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / filename
        content = raw if raw is not None else yaml.safe_dump(data, sort_keys=False)
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def focus_effect() -> Dict[str, str]:
    return {
        "effect": "focus-increase",
        "kind": "cognitive",
        "direction": "up",
        "strength": "moderate",
    }


def _lookup_client(found: Optional[set] = None, side_effect=None) -> Mock:
    """Mock lookup client answering from a set of known DOIs."""
    client = Mock(spec=DOILookupClient)
    if side_effect is not None:
        client.lookup.side_effect = side_effect
    else:
        known = found or set()
        client.lookup.side_effect = lambda dois: [doi in known for doi in dois]
    return client


@pytest.fixture
def no_sleep() -> List[float]:
    """Collects requested backoff delays instead of sleeping."""
    return []


@pytest.fixture
def build_engine(schema_dir, vocab_dir, corpus_dir, no_sleep):
    """Factory for engines wired to the test contracts."""
    def _build(client: Optional[Mock] = None, verify: bool = True, max_workers: int = 1) -> ValidationEngine:
        verifier = None
        if verify:
            verifier = BatchVerifier(
                client if client is not None else _lookup_client(),
                policy=RetryPolicy(max_attempts=3, base_delay=0.5),
                sleep=no_sleep.append,
                max_workers=max_workers,
            )
        return ValidationEngine(
            SchemaRegistry(schema_dir),
            VocabularyRegistry(vocab_dir),
            verifier=verifier,
            corpus_dir=str(corpus_dir),
            max_workers=max_workers,
        )
    return _build


@pytest.fixture
def lookup_client():
    """Factory for mock lookup clients.

    Usage:
        client = lookup_client(found={"10.1000/abc"})
        client = lookup_client(side_effect=[RateLimitError("429"), [True]])
    """
    return _lookup_client
