"""CLI interface for blog search.

Provides command-line access to search operations:
- index: Build the embedding snapshot from the content directory
- search: Query the current snapshot
- estimate: Estimate embedding cost for the content directory
- demo: Run a complete demo with sample posts (mock mode)
- serve: Start the FastAPI server
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

from src.blogsearch.config import Language, LanguageFilter, MockConfig, SearchConfig
from src.blogsearch.embeddings import create_embedding_provider
from src.blogsearch.log import configure_logging
from src.blogsearch.record import SearchOutcome
from src.blogsearch.result import ProviderError
from src.blogsearch.service import SearchService
from src.indexing.builder import IndexBuilder, estimate_cost, write_snapshot
from src.indexing.content import BlogPost, load_posts
from src.retrieval.store import EmbeddingStore

logger = logging.getLogger(__name__)


SAMPLE_POSTS = [
    BlogPost(
        slug="automatyzacja-zamowien",
        language=Language.PL,
        title="Automatyzacja zamówień w e-commerce",
        description="Jak zautomatyzować obsługę zamówień i oszczędzić czas zespołu.",
        body=(
            "## Dlaczego automatyzacja\n\n"
            "Ręczne przepisywanie zamówień między sklepem a magazynem zajmuje "
            "godziny każdego dnia i prowadzi do błędów w adresach oraz stanach.\n\n"
            "## Od czego zacząć\n\n"
            "Zacznij od integracji sklepu z systemem magazynowym, a następnie "
            "dodaj automatyczne statusy zamówień i powiadomienia dla klientów."
        ),
    ),
    BlogPost(
        slug="promocje-i-rabaty",
        language=Language.PL,
        title="Promocje i rabaty bez chaosu",
        description="Planowanie promocji, kody rabatowe i kontrola marży.",
        body=(
            "## Kalendarz promocji\n\n"
            "Każda promocja powinna mieć datę startu, koniec i budżet. Rabat "
            "bez planu szybko zjada marżę i myli klientów w sklepie.\n\n"
            "## Kody rabatowe\n\n"
            "Generuj jednorazowe kody rabatowe i mierz, które kanały przynoszą "
            "zamówienia z najwyższą wartością koszyka."
        ),
    ),
    BlogPost(
        slug="product-feed-quality",
        language=Language.EN,
        title="Product feed quality for marketplaces",
        description="Keep product data consistent across every sales channel.",
        body=(
            "## Why feeds break\n\n"
            "Marketplaces reject listings with missing attributes, wrong "
            "categories or stale prices, and every rejection costs sales.\n\n"
            "## Automating feed checks\n\n"
            "Validate product feeds automatically before export, fix missing "
            "attributes in bulk and sync prices from a single source of truth."
        ),
    ),
    BlogPost(
        slug="reporting-automation",
        language=Language.EN,
        title="Automating e-commerce reporting",
        description="Daily sales reports without spreadsheets.",
        body=(
            "Sales, margin and ad spend reports can be generated automatically "
            "every morning from store and marketing data, so the team starts "
            "the day with numbers instead of copying them between spreadsheets."
        ),
    ),
]


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Blog Semantic Search - embedding search with keyword fallback"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run a complete demo")
    demo_parser.add_argument(
        "--query",
        default="automatyzacja zamówień",
        help="Query to demo",
    )

    # Search command
    search_parser = subparsers.add_parser("search", help="Search the embedding snapshot")
    search_parser.add_argument("query", help="Search query")
    search_parser.add_argument(
        "--language",
        choices=[f.value for f in LanguageFilter],
        default=LanguageFilter.ALL.value,
        help="Language filter",
    )
    search_parser.add_argument("--limit", type=int, default=None, help="Number of results")

    # Index command
    index_parser = subparsers.add_parser("index", help="Build the embedding snapshot")
    index_parser.add_argument("--content-dir", default=None, help="Blog content directory")
    index_parser.add_argument("--output", default=None, help="Snapshot output path")

    # Estimate command
    estimate_parser = subparsers.add_parser("estimate", help="Estimate embedding cost")
    estimate_parser.add_argument("--content-dir", default=None, help="Blog content directory")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start API server")
    serve_parser.add_argument("--host", default=None, help="Host")
    serve_parser.add_argument("--port", type=int, default=None, help="Port")

    args = parser.parse_args()
    config = SearchConfig()
    configure_logging(config.log_level)

    if args.command == "demo":
        run_demo(args.query)
    elif args.command == "search":
        run_search(args.query, args.language, args.limit, config)
    elif args.command == "index":
        run_index(args.content_dir, args.output, config)
    elif args.command == "estimate":
        run_estimate(args.content_dir, config)
    elif args.command == "serve":
        run_serve(args.host or config.api_host, args.port or config.api_port)
    else:
        parser.print_help()
        sys.exit(1)


def outcome_to_json(query: str, outcome: SearchOutcome) -> dict[str, object]:
    return {
        "query": query,
        "method": outcome.method.value,
        "count": outcome.count,
        "latency_ms": round(outcome.latency_ms, 2),
        "results": [
            {
                "source_id": r.source_id,
                "language": r.language.value,
                "title": r.title,
                "section": r.section_label,
                "locator": r.locator,
                "similarity": round(r.similarity, 4),
                "excerpt": r.excerpt,
            }
            for r in outcome.results
        ],
    }


def run_demo(query: str) -> None:
    """Run a complete demo with sample posts."""
    print("=" * 60)
    print("Blog Semantic Search - Demo Mode")
    print("=" * 60)
    print()

    # Mock vectors only share word directions, so the bar is lowered
    config = MockConfig.with_overrides(min_similarity=0.2, embedding_dimensions=256)
    builder = IndexBuilder(create_embedding_provider(config))

    print(f"[1/3] Indexing {len(SAMPLE_POSTS)} sample posts...")
    result = builder.build(SAMPLE_POSTS)
    if result.is_err():
        print(f"ERROR: {result.error}")  # type: ignore[union-attr]
        sys.exit(1)
    store = EmbeddingStore(result.unwrap())
    print(f"      Indexed {store.count} chunks")
    print()

    print(f'[2/3] Searching: "{query}"')
    print()
    outcome = SearchService(store, config).search(query)

    print("[3/3] Results:")
    print("-" * 60)
    print(f"Method: {outcome.method.value}")
    print(f"Latency: {outcome.latency_ms:.1f}ms")
    print(f"Results: {outcome.count}")
    print()
    for i, r in enumerate(outcome.results, 1):
        print(f"  [{i}] {r.title} ({r.language.value}, similarity: {r.similarity:.3f})")
        print(f"      {r.locator}")
        print(f"      {r.excerpt}")
        print()
    print("=" * 60)

    print("JSON output:")
    print(json.dumps(outcome_to_json(query, outcome), indent=2, ensure_ascii=False))


def run_search(
    query: str, language: str, limit: Optional[int], config: SearchConfig
) -> None:
    """Query the configured embedding snapshot."""
    try:
        store = EmbeddingStore.from_path(config.embeddings_path)
    except ProviderError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    outcome = SearchService(store, config).search(query, LanguageFilter(language), limit)
    print(json.dumps(outcome_to_json(query, outcome), indent=2, ensure_ascii=False))


def _write_empty_snapshot(output_path: str, reason: str) -> None:
    write_snapshot([], output_path)
    print(f"WARNING: {reason}; wrote empty snapshot to {output_path} (search will not work)")


def run_index(content_dir: Optional[str], output: Optional[str], config: SearchConfig) -> None:
    """Build the snapshot; on any failure write an empty one so builds continue."""
    output_path = output or config.embeddings_path

    try:
        posts = load_posts(content_dir or config.content_dir)
    except (OSError, ValueError) as e:
        logger.exception("Reading blog posts failed")
        _write_empty_snapshot(output_path, f"cannot read posts: {e}")
        return

    result = IndexBuilder(create_embedding_provider(config)).build(posts)
    if result.is_err():
        logger.error("Embedding generation failed: %s", result.error)  # type: ignore[union-attr]
        _write_empty_snapshot(output_path, "embedding generation failed")
        return

    records = result.unwrap()
    write_snapshot(records, output_path)
    print(f"Indexed {len(records)} chunks from {len(posts)} posts into {output_path}")


def run_estimate(content_dir: Optional[str], config: SearchConfig) -> None:
    """Print the embedding cost estimate."""
    estimate = estimate_cost(load_posts(content_dir or config.content_dir))
    print(json.dumps({
        "posts": estimate.posts,
        "estimated_chunks": estimate.chunks,
        "estimated_tokens": estimate.tokens,
        "estimated_cost_usd": estimate.cost_usd,
    }, indent=2))


def run_serve(host: str, port: int) -> None:
    """Start the FastAPI server."""
    import uvicorn
    uvicorn.run("src.api.app:create_default_app", factory=True, host=host, port=port)


if __name__ == "__main__":
    main()
