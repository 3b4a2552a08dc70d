"""Descriptions of the tools the server offers to MCP clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

ENGINE_NAMES = ("cecil", "agnes", "daphne", "muriel")
SUMMARY_TYPE_NAMES = ("summary", "takeaway")


@dataclass(frozen=True)
class Tool:
    """A tool advertised through ``tools/list``."""

    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Return the wire form of the tool."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


def _text(*parts: str) -> str:
    return " ".join(parts)


def _string(description: str, **extra: Any) -> dict[str, Any]:
    return {"type": "string", **extra, "description": description}


def _boolean(description: str) -> dict[str, Any]:
    return {"type": "boolean", "description": description}


def _object(required: str, **properties: dict[str, Any]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": [required]}


_SEARCH_DESCRIPTION = _text(
    "Fetch web results based on one or more queries using the Kagi Search API.",
    "Use for general search and when the user explicitly tells you to 'fetch'",
    "results/information. Results are from all queries given.",
    "They are numbered continuously, so that a user may be able to refer",
    "to a result by a specific number.",
)

_QUERIES_DESCRIPTION = _text(
    "One or more concise, keyword-focused search queries.",
    "Include essential context within each query for standalone use.",
)

_SUMMARIZER_DESCRIPTION = _text(
    "Summarize content from a URL using the Kagi Summarizer API.",
    "The Summarizer can summarize any document type",
    "(text webpage, video, audio, etc.)",
)

_SUMMARY_TYPE_DESCRIPTION = _text(
    "Type of summary to produce.",
    "Options are 'summary' for paragraph prose",
    "and 'takeaway' for a bulleted list of key points.",
)

_ENGINE_DESCRIPTION = _text(
    "Summarization engine to use.",
    "Defaults to configured engine.",
)

_LANGUAGE_DESCRIPTION = _text(
    "Desired output language using language codes",
    "(e.g., 'EN' for English).",
    "If not specified, the document's original language influences the output.",
)

_FASTGPT_DESCRIPTION = _text(
    "Generate AI-powered answers to questions using the Kagi FastGPT API.",
    "This tool performs web searches automatically to provide",
    "well-referenced, up-to-date responses.",
    "Use for direct questions that need AI-generated answers with citations.",
)

_CACHE_DESCRIPTION = _text(
    "Whether to allow cached requests & responses.",
    "Defaults to true.",
)

_WEB_SEARCH_DESCRIPTION = _text(
    "Whether to perform web searches to enrich answers.",
    "Currently, must be set to true.",
)

_ENRICH_WEB_DESCRIPTION = _text(
    "Find non-commercial, 'small web' content and discussions",
    "using Kagi's Web Enrichment API.",
    "Great for discovering unique websites and content",
    "that might not appear in regular search results.",
)

_ENRICH_NEWS_DESCRIPTION = _text(
    "Find non-mainstream news sources and discussions",
    "using Kagi's News Enrichment API.",
    "Useful for discovering alternative perspectives and news coverage.",
)


def get_tools() -> list[Tool]:
    """Return the tools the server exposes, in advertised order."""
    search_schema = _object(
        "queries",
        queries={
            "type": "array",
            "items": {"type": "string"},
            "description": _QUERIES_DESCRIPTION,
        },
    )
    summarizer_schema = _object(
        "url",
        url=_string("A URL to a document to summarize."),
        summary_type=_string(
            _SUMMARY_TYPE_DESCRIPTION,
            enum=list(SUMMARY_TYPE_NAMES),
            default=SUMMARY_TYPE_NAMES[0],
        ),
        engine=_string(_ENGINE_DESCRIPTION, enum=list(ENGINE_NAMES)),
        target_language=_string(_LANGUAGE_DESCRIPTION),
    )
    fastgpt_schema = _object(
        "query",
        query=_string("The question or query to be answered by the AI."),
        cache=_boolean(_CACHE_DESCRIPTION),
        web_search=_boolean(_WEB_SEARCH_DESCRIPTION),
    )
    enrich_web_schema = _object(
        "query",
        query=_string("The search query to find non-commercial web content."),
    )
    enrich_news_schema = _object(
        "query",
        query=_string("The search query to find non-mainstream news content."),
    )
    return [
        Tool("kagi_search_fetch", _SEARCH_DESCRIPTION, search_schema),
        Tool("kagi_summarizer", _SUMMARIZER_DESCRIPTION, summarizer_schema),
        Tool("kagi_fastgpt", _FASTGPT_DESCRIPTION, fastgpt_schema),
        Tool("kagi_enrich_web", _ENRICH_WEB_DESCRIPTION, enrich_web_schema),
        Tool("kagi_enrich_news", _ENRICH_NEWS_DESCRIPTION, enrich_news_schema),
    ]