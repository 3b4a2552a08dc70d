"""Command line entry point for the Kagi MCP server."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from collections.abc import Mapping, Sequence

from kagimcp.client import DEFAULT_API_VERSION, KagiClient, SummarizerEngine
from kagimcp.server import KagiMcpServer

_VERSION_OPTIONS = (
    ("--search-api-version", "KAGI_SEARCH_API_VERSION", "API version for search endpoint"),
    (
        "--summarizer-api-version",
        "KAGI_SUMMARIZER_API_VERSION",
        "API version for summarizer endpoint",
    ),
    ("--fastgpt-api-version", "KAGI_FASTGPT_API_VERSION", "API version for FastGPT endpoint"),
    (
        "--enrich-api-version",
        "KAGI_ENRICH_API_VERSION",
        "API version for enrichment endpoint",
    ),
)


def parse_args(
    argv: Sequence[str] | None = None, environ: Mapping[str, str] | None = None
) -> argparse.Namespace:
    """Parse options; environment variables supply the defaults."""
    env = os.environ if environ is None else environ
    parser = argparse.ArgumentParser(
        prog="kagi-mcp-server", description="Kagi MCP Server for AI assistants"
    )
    parser.add_argument(
        "--api-key",
        default=env.get("KAGI_API_KEY"),
        help="Kagi API key (can also be set via KAGI_API_KEY environment variable)",
    )
    parser.add_argument(
        "--summarizer-engine",
        default=env.get("KAGI_SUMMARIZER_ENGINE", SummarizerEngine.CECIL.value),
        help="Default summarizer engine",
    )
    for option, variable, help_text in _VERSION_OPTIONS:
        parser.add_argument(option, default=env.get(variable, DEFAULT_API_VERSION), help=help_text)
    return parser.parse_args(argv)


def resolve_engine(name: str) -> SummarizerEngine:
    """Return the named engine, warning and using cecil when the name is unknown."""
    try:
        return SummarizerEngine(name)
    except ValueError:
        print(f"Warning: Unknown engine '{name}', defaulting to 'cecil'", file=sys.stderr)
        return SummarizerEngine.CECIL


async def _serve(args: argparse.Namespace, engine: SummarizerEngine) -> None:
    async with KagiClient(
        args.api_key,
        search_api_version=args.search_api_version,
        summarizer_api_version=args.summarizer_api_version,
        fastgpt_api_version=args.fastgpt_api_version,
        enrich_api_version=args.enrich_api_version,
    ) as client:
        await KagiMcpServer(client, engine).run(sys.stdin, sys.stdout)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the server on standard input and output."""
    args = parse_args(argv)
    if args.api_key is None:
        print(
            "Error: KAGI_API_KEY must be provided via --api-key or environment variable",
            file=sys.stderr,
        )
        return 1
    engine = resolve_engine(args.summarizer_engine)
    asyncio.run(_serve(args, engine))
    return 0


if __name__ == "__main__":
    sys.exit(main())