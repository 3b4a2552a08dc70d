"""MCP server answering JSON-RPC requests with Kagi search and summarization tools."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Iterable, Mapping
from typing import Any, TextIO

from kagimcp.client import EnrichType, KagiClient, KagiError, SummarizerEngine, SummaryType
from kagimcp.formatting import format_enrich, format_fastgpt, format_search_results
from kagimcp.tools import get_tools

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "kagi-mcp-server"
SERVER_VERSION = "0.0.25"
SEARCH_LIMIT = 10

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
TOOL_FAILURE = -1


class ToolError(Exception):
    """A request that cannot be answered; carries the JSON-RPC error code."""

    def __init__(self, message: str, code: int = TOOL_FAILURE) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def _success(request_id: Any, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def _failure(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


def _get(value: Any, key: str) -> Any:
    return value.get(key) if isinstance(value, Mapping) else None


def _string(value: Any, key: str) -> str | None:
    item = _get(value, key)
    return item if isinstance(item, str) else None


def _boolean(value: Any, key: str) -> bool | None:
    item = _get(value, key)
    return item if isinstance(item, bool) else None


def _parse_request(text: str) -> dict[str, Any]:
    request = json.loads(text)
    if not isinstance(request, dict):
        raise ValueError("invalid type: expected a request object")
    if "jsonrpc" not in request:
        raise ValueError("missing field `jsonrpc`")
    if not isinstance(request["jsonrpc"], str):
        raise ValueError("invalid type for field `jsonrpc`: expected a string")
    if "id" not in request:
        raise ValueError("missing field `id`")
    if "method" not in request:
        raise ValueError("missing field `method`")
    if not isinstance(request["method"], str):
        raise ValueError("invalid type for field `method`: expected a string")
    return request


class KagiMcpServer:
    """Serves the Kagi tools over line-delimited JSON-RPC."""

    def __init__(self, client: KagiClient, default_engine: SummarizerEngine) -> None:
        self.client = client
        self.default_engine = default_engine

    def parse_engine(self, name: str | None) -> SummarizerEngine:
        """Map an engine name to an engine, falling back to the configured default."""
        if name is None:
            return self.default_engine
        try:
            return SummarizerEngine(name)
        except ValueError:
            return self.default_engine

    def parse_summary_type(self, name: str | None) -> SummaryType:
        """Return TAKEAWAY for "takeaway", SUMMARY for anything else."""
        return SummaryType.TAKEAWAY if name == SummaryType.TAKEAWAY.value else SummaryType.SUMMARY

    async def handle_search(self, queries: Iterable[Any]) -> str:
        """Run each query in turn and join the rendered results."""
        rendered = []
        for query in queries:
            if not isinstance(query, str):
                raise ToolError("Invalid query format - expected string")
            try:
                response = await self.client.search(query, SEARCH_LIMIT)
            except KagiError as exc:
                raise ToolError(f"Search failed for query '{query}': {exc}") from exc
            rendered.append(format_search_results(query, response))
        return "\n".join(rendered)

    async def handle_fastgpt(
        self, query: str, cache: bool | None = None, web_search: bool | None = None
    ) -> str:
        """Answer a question with FastGPT, listing its references."""
        try:
            data = await self.client.fastgpt(query, cache, web_search)
        except KagiError as exc:
            raise ToolError(f"FastGPT failed for query '{query}': {exc}") from exc
        return format_fastgpt(data)

    async def handle_enrich(self, query: str, enrich_type: EnrichType) -> str:
        """Query an enrichment index and render the plain results."""
        try:
            results = await self.client.enrich(query, enrich_type)
        except KagiError as exc:
            raise ToolError(f"Enrichment failed for query '{query}': {exc}") from exc
        return format_enrich(query, enrich_type, results)

    async def handle_summarize(
        self,
        url: str,
        engine: str | None = None,
        summary_type: str | None = None,
        target_language: str | None = None,
    ) -> str:
        """Summarize the document at ``url``."""
        try:
            data = await self.client.summarize(
                url,
                self.parse_engine(engine),
                self.parse_summary_type(summary_type),
                target_language,
            )
        except KagiError as exc:
            raise ToolError(f"Summarization failed: {exc}") from exc
        return data.output

    async def _call_tool(self, params: Any) -> str:
        if params is None:
            raise ToolError("Missing parameters", INVALID_PARAMS)
        name = _string(params, "name")
        if name is None:
            raise ToolError("Missing name parameter", INVALID_PARAMS)
        if "arguments" not in params:
            raise ToolError("Missing arguments parameter", INVALID_PARAMS)
        args = params["arguments"]

        if name == "kagi_search_fetch":
            queries = _get(args, "queries")
            if not isinstance(queries, list):
                raise ToolError("Missing or invalid 'queries' parameter", INVALID_PARAMS)
            return await self.handle_search(queries)
        if name == "kagi_summarizer":
            url = _string(args, "url")
            if url is None:
                raise ToolError("Missing 'url' parameter", INVALID_PARAMS)
            return await self.handle_summarize(
                url,
                _string(args, "engine"),
                _string(args, "summary_type"),
                _string(args, "target_language"),
            )
        if name in ("kagi_fastgpt", "kagi_enrich_web", "kagi_enrich_news"):
            query = _string(args, "query")
            if query is None:
                raise ToolError("Missing or invalid 'query' parameter", INVALID_PARAMS)
            if name == "kagi_fastgpt":
                return await self.handle_fastgpt(
                    query, _boolean(args, "cache"), _boolean(args, "web_search")
                )
            kind = EnrichType.WEB if name == "kagi_enrich_web" else EnrichType.NEWS
            return await self.handle_enrich(query, kind)
        raise ToolError(f"Tool '{name}' not found", METHOD_NOT_FOUND)

    async def handle_request(self, request: Mapping[str, Any]) -> dict[str, Any]:
        """Answer one parsed JSON-RPC request."""
        request_id = request.get("id")
        method = request.get("method")
        try:
            if method == "initialize":
                result: Any = {
                    "protocolVersion": PROTOCOL_VERSION,
                    "capabilities": {"tools": {}},
                    "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
                }
            elif method == "tools/list":
                result = {"tools": [tool.to_dict() for tool in get_tools()]}
            elif method == "tools/call":
                text = await self._call_tool(request.get("params"))
                result = {"content": [{"type": "text", "text": text}]}
            else:
                return _failure(request_id, METHOD_NOT_FOUND, f"Unknown method: {method}")
        except ToolError as exc:
            return _failure(request_id, exc.code, exc.message)
        return _success(request_id, result)

    async def handle_line(self, line: str) -> str | None:
        """Answer one input line; blank lines get no answer."""
        text = line.strip()
        if not text:
            return None
        try:
            request = _parse_request(text)
        except ValueError as exc:
            response = _failure(None, PARSE_ERROR, f"Parse error: {exc}")
        else:
            response = await self.handle_request(request)
        return json.dumps(response, separators=(",", ":"), ensure_ascii=False)

    async def run(self, reader: TextIO, writer: TextIO) -> None:
        """Answer requests line by line until the reader is exhausted."""
        while True:
            line = await asyncio.to_thread(reader.readline)
            if not line:
                break
            answer = await self.handle_line(line)
            if answer is None:
                continue
            writer.write(answer + "\n")
            writer.flush()