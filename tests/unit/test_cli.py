"""Tests for CLI interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from src.blogsearch.cli import (
    SAMPLE_POSTS,
    main,
    run_demo,
    run_estimate,
    run_index,
    run_search,
)
from src.blogsearch.config import Language, MockConfig
from src.retrieval.store import EmbeddingStore

LOGGING = "src.blogsearch.cli.configure_logging"

POST = "---\ntitle: Kody rabatowe\ndescription: Jak planować promocje\n---\n" + (
    "Jednorazowe kody rabatowe pomagają mierzyć skuteczność kanałów sprzedaży w sklepie."
)


@pytest.fixture
def content_dir(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    (root / "pl").mkdir(parents=True)
    (root / "pl" / "kody-rabatowe.mdx").write_text(POST, encoding="utf-8")
    return root


class TestCLI:
    def test_demo_runs_successfully(self, capsys: pytest.CaptureFixture[str]) -> None:
        run_demo("automatyzacja zamówień")
        captured = capsys.readouterr()
        assert "Blog Semantic Search - Demo Mode" in captured.out
        assert "Indexing" in captured.out
        assert "Results:" in captured.out
        assert "JSON output:" in captured.out

    def test_demo_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        run_demo("product feeds")
        out = capsys.readouterr().out
        data = json.loads(out.split("JSON output:", 1)[1])
        assert data["query"] == "product feeds"
        assert data["method"] in {"semantic", "keyword", "none"}
        assert data["count"] == len(data["results"])

    def test_sample_posts_valid(self) -> None:
        assert {p.language for p in SAMPLE_POSTS} == {Language.PL, Language.EN}
        for post in SAMPLE_POSTS:
            assert post.slug
            assert post.title
            assert len(post.body) > 50

    def test_main_no_args(self) -> None:
        with pytest.raises(SystemExit):
            with patch("sys.argv", ["blog-search"]), patch(LOGGING):
                main()

    def test_main_demo(self, capsys: pytest.CaptureFixture[str]) -> None:
        with patch("sys.argv", ["blog-search", "demo"]), patch(LOGGING):
            main()
        assert "Blog Semantic Search" in capsys.readouterr().out


class TestIndexAndSearch:
    def test_index_writes_snapshot(
        self, content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "data" / "embeddings.json"
        run_index(str(content_dir), str(output), MockConfig.with_overrides(embedding_dimensions=32))

        assert "Indexed 1 chunks from 1 posts" in capsys.readouterr().out
        store = EmbeddingStore.from_path(output)
        assert store.count == 1
        assert store.dimensions == 32

    def test_index_skips_untitled_draft(
        self, content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (content_dir / "pl" / "wip.mdx").write_text("---\ndraft: true\n---\nBody", encoding="utf-8")
        output = tmp_path / "embeddings.json"
        run_index(str(content_dir), str(output), MockConfig.with_overrides(embedding_dimensions=8))

        assert "Indexed 1 chunks from 1 posts" in capsys.readouterr().out
        assert EmbeddingStore.from_path(output).count == 1

    def test_index_writes_empty_snapshot_on_bad_frontmatter(
        self, content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        (content_dir / "pl" / "zepsuty.mdx").write_text(
            "---\ntitle: [unclosed\n---\nBody", encoding="utf-8"
        )
        output = tmp_path / "embeddings.json"
        run_index(str(content_dir), str(output), MockConfig.with_overrides(embedding_dimensions=8))

        assert "WARNING" in capsys.readouterr().out
        assert json.loads(output.read_text(encoding="utf-8")) == []

    def test_search_snapshot(
        self, content_dir: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        output = tmp_path / "embeddings.json"
        config = MockConfig.with_overrides(embedding_dimensions=32, embeddings_path=str(output))
        run_index(str(content_dir), None, config)
        capsys.readouterr()

        run_search("kody rabatowe", "pl", 3, config)
        data = json.loads(capsys.readouterr().out)
        assert data["query"] == "kody rabatowe"
        assert data["results"][0]["source_id"] == "kody-rabatowe"

    def test_search_without_snapshot(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        config = MockConfig.with_overrides(embeddings_path=str(tmp_path / "missing.json"))
        with pytest.raises(SystemExit):
            run_search("rabat", "all", None, config)
        assert "ERROR" in capsys.readouterr().out

    def test_estimate(self, content_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        run_estimate(str(content_dir), MockConfig.default())
        data = json.loads(capsys.readouterr().out)
        assert data["posts"] == 1
        assert data["estimated_chunks"] == 1
        assert data["estimated_tokens"] > 0
