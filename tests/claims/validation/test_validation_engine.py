"""
Unit tests for the Validation Engine.

Covers the run phases end to end against a temporary corpus: check
ordering, terminal load failures, selective vs full runs, fail-closed DOI
verification and deterministic output with several workers.
"""

import pytest

from claims.config.schema import ValidatorConfig
from claims.identifiers.cache import VerificationCache
from claims.identifiers.errors import RateLimitError
from claims.validation.engine import ValidationEngine
from claims.validation.errors import SchemaLoadError, VocabularyLoadError
from claims.validation.records import RecordType


class TestSingleRecordScenarios:
    """Representative single-file runs."""

    def test_valid_effect_without_paper(self, build_engine, write_claim, focus_effect, lookup_client):
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)
        client = lookup_client()
        engine = build_engine(client=client)

        summary = engine.run([path])

        assert summary.is_success
        assert len(summary.reports) == 1
        assert summary.reports[0].record_type == "effects"
        assert summary.reports[0].issues == []
        client.lookup.assert_not_called()

    def test_effect_missing_from_vocabulary(self, build_engine, write_claim, focus_effect, vocab_dir):
        (vocab_dir / "effects.yml").write_text("- endurance\n- muscle-strength\n", encoding="utf-8")
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)

        summary = build_engine().run([path])

        assert not summary.is_success
        assert summary.failures[0].messages == [
            "Invalid effect: 'focus-increase' not found in vocabulary"
        ]

    def test_unresolvable_doi(self, build_engine, write_claim, focus_effect, lookup_client):
        record = dict(focus_effect, paper="10.1000/xyz")
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", record)
        client = lookup_client(found=set())

        summary = build_engine(client=client).run([path])

        assert summary.failures[0].messages == ["DOI '10.1000/xyz' could not be verified"]
        assert summary.identifiers_checked == 1

    def test_resolvable_doi_passes(self, build_engine, write_claim, focus_effect, lookup_client):
        record = dict(focus_effect, paper="10.1000/xyz")
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", record)

        summary = build_engine(client=lookup_client(found={"10.1000/xyz"})).run([path])

        assert summary.is_success

    def test_meta_record(self, build_engine, write_claim):
        path = write_claim("creatine", "meta", "meta.yml", {"name": "Creatine", "dosage_unit": "gram"})

        summary = build_engine().run([path])

        assert summary.is_success
        assert summary.reports[0].record_type == "meta"


class TestCheckOrdering:
    """All checks run and their issues are reported in a fixed order."""

    def test_schema_vocabulary_filename_doi_order(self, build_engine, write_claim, lookup_client):
        record = {
            "effect": "telepathy",
            "kind": "cognitive",
            "direction": "sideways",
            "strength": "moderate",
            "paper": "10.1000/missing",
        }
        path = write_claim("creatine", "effects", "wrong-name.yml", record)

        report = build_engine(client=lookup_client()).run([path]).reports[0]
        fields = [issue.field for issue in report.issues]

        assert fields == ["direction", "effect", "filename", "paper"]
        assert report.messages[1] == "Invalid effect: 'telepathy' not found in vocabulary"
        assert "expected 'cognitive-telepathy-sideways-moderate.yml'" in report.messages[2]
        assert report.messages[3] == "DOI '10.1000/missing' could not be verified"

    def test_schema_errors_sorted_by_path(self, build_engine, write_claim):
        record = {"effect": "endurance", "kind": "physical", "direction": "up",
                  "strength": "huge", "dosage": {"unit": "cups", "value": 5}}
        path = write_claim("creatine", "effects", "physical-endurance-up-huge.yml", record)

        report = build_engine(verify=False).run([path]).reports[0]
        fields = [issue.field for issue in report.issues]

        assert fields == sorted(fields)
        assert "dosage/unit" in fields
        assert "strength" in fields

    def test_non_string_key_keeps_other_issues(self, build_engine, write_claim):
        raw = (
            "effect: nope-value\n"
            "kind: cognitive\n"
            "direction: up\n"
            "strength: moderate\n"
            "2020: note\n"
        )
        path = write_claim("creatine", "effects", "cognitive-nope-value-up-moderate.yml", None, raw=raw)

        report = build_engine().run([path]).reports[0]

        assert [issue.field for issue in report.issues] == ["root", "effect"]
        assert "2020 was unexpected" in report.messages[0]
        assert report.messages[1] == "Invalid effect: 'nope-value' not found in vocabulary"


class TestTerminalFailures:
    """Files that cannot be read yield exactly one issue."""

    def test_syntax_error(self, build_engine, write_claim):
        path = write_claim("creatine", "effects", "x.yml", None, raw="effect: [unclosed\n")

        report = build_engine().run([path]).reports[0]

        assert len(report.issues) == 1
        assert report.messages[0].startswith("Parse error:")

    def test_empty_file(self, build_engine, write_claim):
        path = write_claim("creatine", "effects", "x.yml", None, raw="")

        report = build_engine().run([path]).reports[0]

        assert report.messages == ["Empty file"]

    def test_non_mapping_content(self, build_engine, write_claim):
        path = write_claim("creatine", "effects", "x.yml", None, raw="- a\n- b\n")

        report = build_engine().run([path]).reports[0]

        assert report.messages == ["Parse error: expected a mapping, got list"]

    def test_missing_file(self, build_engine, corpus_dir):
        path = str(corpus_dir / "creatine" / "claims" / "effects" / "gone.yml")

        report = build_engine().run([path]).reports[0]

        assert len(report.issues) == 1
        assert report.messages[0].startswith("Unreadable file: File not found")

    def test_unknown_record_location(self, build_engine, corpus_dir):
        stray = corpus_dir / "notes.yml"
        stray.write_text("effect: endurance\n", encoding="utf-8")

        report = build_engine().run([str(stray)]).reports[0]

        assert report.record_type == "unknown"
        assert report.messages == ["Cannot determine record type from path"]

    def test_unreadable_file_does_not_stop_others(self, build_engine, write_claim, focus_effect):
        good = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)
        bad = write_claim("creatine", "effects", "broken.yml", None, raw="a: b: c\n")

        summary = build_engine().run([bad, good])

        assert summary.passed == 1
        assert [r.file_path for r in summary.failures] == [bad]


class TestRunModes:
    """Full corpus runs versus explicit file lists."""

    def test_full_mode_discovers_corpus(self, build_engine, write_claim, focus_effect):
        write_claim("creatine", "meta", "meta.yml", {"name": "Creatine"})
        write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)
        write_claim("caffeine", "meta", "meta.yml", {"name": "Caffeine"})

        summary = build_engine().run()

        assert summary.mode == "full"
        assert len(summary.reports) == 3
        assert summary.is_success

    def test_selective_mode_only_checks_given_files(self, build_engine, write_claim, focus_effect):
        write_claim("caffeine", "meta", "meta.yml", {})
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)

        summary = build_engine().run([path])

        assert summary.mode == "selective"
        assert [r.file_path for r in summary.reports] == [path]
        assert summary.is_success

    def test_duplicate_targets_collapsed(self, build_engine, write_claim, focus_effect):
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)

        summary = build_engine().run([path, path])

        assert len(summary.reports) == 1

    def test_empty_selection(self, build_engine):
        summary = build_engine().run([])

        assert summary.reports == []
        assert summary.is_success

    def test_missing_corpus_raises(self, build_engine, corpus_dir):
        corpus_dir.rmdir()

        with pytest.raises(FileNotFoundError):
            build_engine().run()


class TestContracts:
    """Contract loading happens before any record is validated."""

    def test_missing_schema_aborts(self, build_engine, write_claim, focus_effect, schema_dir):
        (schema_dir / "effects.schema.json").unlink()
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)

        with pytest.raises(SchemaLoadError):
            build_engine().run([path])

    def test_missing_vocabulary_aborts(self, build_engine, write_claim, focus_effect, vocab_dir):
        (vocab_dir / "effects.yml").unlink()
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)

        with pytest.raises(VocabularyLoadError):
            build_engine().run([path])

    def test_only_needed_contracts_loaded(self, build_engine, write_claim, vocab_dir):
        (vocab_dir / "effects.yml").unlink()
        path = write_claim("creatine", "meta", "meta.yml", {"name": "Creatine"})

        summary = build_engine().run([path])

        assert summary.is_success


class TestIdentifierResolution:
    """DOIs are resolved in one phase before validation and fail closed."""

    def test_each_doi_requested_once(self, build_engine, write_claim, focus_effect, lookup_client):
        paths = [
            write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml",
                        dict(focus_effect, paper="10.1000/shared")),
            write_claim("caffeine", "effects", "cognitive-focus-increase-up-moderate.yml",
                        dict(focus_effect, paper="10.1000/SHARED")),
            write_claim("creatine", "effects", "physical-endurance-up-weak.yml",
                        {"effect": "endurance", "kind": "physical", "direction": "up",
                         "strength": "weak", "paper": "10.1000/other"}),
        ]
        client = lookup_client(found={"10.1000/shared", "10.1000/other"})

        summary = build_engine(client=client).run(paths)

        assert summary.is_success
        client.lookup.assert_called_once_with(["10.1000/other", "10.1000/shared"])
        assert summary.identifiers_checked == 2

    def test_rate_limit_exhaustion_fails_closed(self, build_engine, write_claim, focus_effect,
                                                lookup_client, no_sleep):
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml",
                           dict(focus_effect, paper="10.1000/xyz"))
        client = lookup_client(side_effect=RateLimitError("429 Too Many Requests", 429))

        summary = build_engine(client=client).run([path])

        assert client.lookup.call_count == 3
        assert no_sleep == [0.5, 1.0]
        assert summary.failures[0].messages == ["DOI '10.1000/xyz' could not be verified"]

    def test_records_without_doi_unaffected_by_lookup_failure(self, build_engine, write_claim,
                                                              focus_effect, lookup_client):
        cited = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml",
                            dict(focus_effect, paper="10.1000/xyz"))
        plain = write_claim("caffeine", "effects", "cognitive-focus-increase-up-moderate.yml", focus_effect)
        client = lookup_client(side_effect=RateLimitError("429", 429))

        summary = build_engine(client=client).run([cited, plain])

        assert [r.file_path for r in summary.failures] == [cited]

    def test_verification_disabled(self, build_engine, write_claim, focus_effect):
        path = write_claim("creatine", "effects", "cognitive-focus-increase-up-moderate.yml",
                           dict(focus_effect, paper="10.1000/xyz"))

        summary = build_engine(verify=False).run([path])

        assert summary.is_success
        assert summary.identifiers_checked == 0

    def test_unresolved_doi_is_failure(self, build_engine, focus_effect):
        engine = build_engine()
        record = dict(focus_effect, paper="10.1000/late")
        cache = VerificationCache().freeze()

        issues = engine.validate_record(
            "x/claims/effects/cognitive-focus-increase-up-moderate.yml", record, RecordType.EFFECTS, cache
        )

        assert [i.message for i in issues] == ["DOI '10.1000/late' was not resolved before validation"]


class TestDeterminism:
    """Output does not depend on the worker count."""

    def test_reports_sorted_with_workers(self, build_engine, write_claim, lookup_client):
        paths = []
        for i, name in enumerate(["zinc", "alpha", "magnesium", "beta", "omega"]):
            paths.append(write_claim(name, "effects", "physical-endurance-up-weak.yml", {
                "effect": "endurance", "kind": "physical", "direction": "up",
                "strength": "weak", "paper": f"10.1000/{i}",
            }))
        client = lookup_client(found={"10.1000/0", "10.1000/2"})

        serial = build_engine(client=client).run(paths)
        parallel = build_engine(client=client, max_workers=4).run(paths)

        assert [r.file_path for r in serial.reports] == sorted(paths)
        assert [r.file_path for r in parallel.reports] == [r.file_path for r in serial.reports]
        assert [r.messages for r in parallel.reports] == [r.messages for r in serial.reports]


class TestFromConfig:
    """Engine construction from configuration."""

    def test_verifier_built_when_enabled(self, tmp_path):
        config = ValidatorConfig(corpus_dir=str(tmp_path), max_workers=2)
        config.verifier.batch_size = 100
        config.verifier.retry_attempts = 5

        engine = ValidationEngine.from_config(config)

        assert engine.verifier is not None
        assert engine.verifier.batch_size == 100
        assert engine.verifier.policy.max_attempts == 5
        assert engine.max_workers == 2
        assert engine.corpus_dir == str(tmp_path)

    def test_no_verifier_when_disabled(self):
        config = ValidatorConfig()
        config.verifier.enabled = False

        engine = ValidationEngine.from_config(config)

        assert engine.verifier is None
