"""Plain-text rendering of Kagi API answers for tool output."""

from __future__ import annotations

from collections.abc import Iterable

from kagimcp.client import EnrichType, FastGptData, SearchResponse, SearchResult


def format_search_results(query: str, response: SearchResponse) -> str:
    """Render search results for one query, numbering entries from 1."""
    lines = [f'-----\nResults for search query "{query}":\n-----\n']
    number = 1
    for result in response.data:
        if result.result_type == 0:
            if result.title is None or result.url is None:
                continue
            lines.append(f"{number}: {result.title}\n{result.url}\n")
            published = result.published if result.published is not None else "Not Available"
            lines.append(f"Published Date: {published}\n")
            if result.snippet is not None:
                lines.append(f"{result.snippet}\n")
            lines.append("\n")
            number += 1
        elif result.result_type == 1:
            if result.list is None:
                continue
            lines.append("Related searches:\n")
            lines.extend(f"- {item}\n" for item in result.list)
            lines.append("\n")
        else:
            if result.title is None:
                continue
            lines.append(f"{number}: {result.title}\n")
            if result.url is not None:
                lines.append(f"{result.url}\n")
            if result.snippet is not None:
                lines.append(f"{result.snippet}\n")
            lines.append("\n")
            number += 1
    return "".join(lines)


def format_fastgpt(data: FastGptData) -> str:
    """Render a FastGPT answer followed by its numbered references."""
    parts = [data.output]
    if data.references:
        parts.append("\n\nReferences:\n")
        for number, reference in enumerate(data.references, start=1):
            parts.append(f"{number}. {reference.title}\n")
            parts.append(f"   {reference.url}\n")
    return "".join(parts)


def format_enrich(
    query: str, enrich_type: EnrichType | str, results: Iterable[SearchResult]
) -> str:
    """Render enrichment results; only plain search results (type 0) are shown."""
    type_name = EnrichType(enrich_type).value
    parts = [f"Kagi {type_name} enrichment results for query: {query}\n\n"]
    for number, result in enumerate(results, start=1):
        if result.result_type != 0:
            continue
        title = result.title if result.title is not None else "[No Title]"
        parts.append(f"{number}. {title}\n")
        if result.url is not None:
            parts.append(f"   URL: {result.url}\n")
        if result.snippet:
            parts.append(f"   {result.snippet}\n")
        if result.published:
            parts.append(f"   Published: {result.published}\n")
        parts.append("\n")
    return "".join(parts)