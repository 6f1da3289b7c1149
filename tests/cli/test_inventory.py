"""
Tests for cli.inventory (the list subcommand).
"""

import pytest
from click.testing import CliRunner

from cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestListCLI:

    def test_lists_collections(self, runner, corpus_dir, write_claim):
        write_claim("creatine", "meta", "meta.yml", {"name": "Creatine"})
        write_claim("caffeine", "meta", "meta.yml", {"name": "Caffeine"})

        result = runner.invoke(main, ["list", "--corpus-dir", str(corpus_dir)])

        assert result.exit_code == 0
        assert "📦 Supplements found (2):" in result.output
        assert result.output.index("- caffeine") < result.output.index("- creatine")

    def test_counts(self, runner, corpus_dir, write_claim, focus_effect):
        write_claim("creatine", "meta", "meta.yml", {"name": "Creatine"})
        write_claim("creatine", "effects", "a.yml", focus_effect)
        write_claim("creatine", "effects", "b.yml", focus_effect)
        (corpus_dir / "empty").mkdir()

        result = runner.invoke(main, ["list", "--counts", "--corpus-dir", str(corpus_dir)])

        assert result.exit_code == 0
        assert "- creatine (meta: 1, effects: 2)" in result.output
        assert "- empty (no claims)" in result.output

    def test_corpus_from_environment(self, runner, corpus_dir, monkeypatch):
        (corpus_dir / "zinc").mkdir()
        monkeypatch.setenv("CLAIMS_CORPUS_DIR", str(corpus_dir))

        result = runner.invoke(main, ["list"])

        assert result.exit_code == 0
        assert "- zinc" in result.output

    def test_missing_corpus(self, runner, tmp_path):
        result = runner.invoke(main, ["list", "--corpus-dir", str(tmp_path / "nowhere")])

        assert result.exit_code == 2
        assert "Failed to list supplements" in result.output
