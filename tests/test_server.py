import io
import json

import pytest

from kagimcp.client import (
    ApiError,
    EnrichType,
    FastGptData,
    FastGptReference,
    SearchMeta,
    SearchResponse,
    SearchResult,
    SummarizerEngine,
    SummaryData,
    SummaryType,
)
from kagimcp.formatting import format_enrich, format_fastgpt, format_search_results
from kagimcp.server import KagiMcpServer, ToolError
from kagimcp.tools import get_tools

SEARCH_RESPONSE = SearchResponse(
    meta=SearchMeta(id="abc", node="node-1", ms=7),
    data=[SearchResult(result_type=0, url="https://example.com/a", title="Alpha", snippet="First")],
)
FASTGPT_DATA = FastGptData(
    output="Answer",
    tokens=5,
    references=[FastGptReference(title="Ref", snippet="s", url="https://example.com/r")],
)
ENRICH_RESULTS = [SearchResult(result_type=0, url="https://example.com/n", title="News")]


class FakeClient:
    def __init__(self):
        self.calls = []
        self.fail = False

    def _maybe_fail(self):
        if self.fail:
            raise ApiError(500, "boom")

    async def search(self, query, limit=None):
        self.calls.append(("search", query, limit))
        if query == "bad":
            raise ApiError(500, "boom")
        return SEARCH_RESPONSE

    async def summarize(self, url, engine=None, summary_type=None, target_language=None):
        self.calls.append(("summarize", url, engine, summary_type, target_language))
        self._maybe_fail()
        return SummaryData(output="summary text")

    async def fastgpt(self, query, cache=None, web_search=None):
        self.calls.append(("fastgpt", query, cache, web_search))
        self._maybe_fail()
        return FASTGPT_DATA

    async def enrich(self, query, enrich_type):
        self.calls.append(("enrich", query, enrich_type))
        self._maybe_fail()
        return ENRICH_RESULTS


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def server(client):
    return KagiMcpServer(client, SummarizerEngine.DAPHNE)


def call(name, arguments, request_id=1):
    return {
        "jsonrpc": "2.0",
        "id": request_id,
        "method": "tools/call",
        "params": {"name": name, "arguments": arguments},
    }


def test_parse_engine(server):
    assert server.parse_engine("agnes") is SummarizerEngine.AGNES
    assert server.parse_engine("muriel") is SummarizerEngine.MURIEL
    assert server.parse_engine(None) is SummarizerEngine.DAPHNE
    assert server.parse_engine("unknown") is SummarizerEngine.DAPHNE


def test_parse_summary_type(server):
    assert server.parse_summary_type("takeaway") is SummaryType.TAKEAWAY
    assert server.parse_summary_type("summary") is SummaryType.SUMMARY
    assert server.parse_summary_type(None) is SummaryType.SUMMARY
    assert server.parse_summary_type("other") is SummaryType.SUMMARY


@pytest.mark.asyncio
async def test_handle_search_joins_queries(server, client):
    text = await server.handle_search(["one", "two"])
    expected = (
        format_search_results("one", SEARCH_RESPONSE)
        + "\n"
        + format_search_results("two", SEARCH_RESPONSE)
    )
    assert text == expected
    assert client.calls == [("search", "one", 10), ("search", "two", 10)]


@pytest.mark.asyncio
async def test_handle_search_rejects_non_string(server):
    with pytest.raises(ToolError) as info:
        await server.handle_search(["ok", 5])
    assert info.value.message == "Invalid query format - expected string"
    assert info.value.code == -1


@pytest.mark.asyncio
async def test_handle_search_reports_failure(server):
    with pytest.raises(ToolError) as info:
        await server.handle_search(["bad"])
    assert info.value.message == "Search failed for query 'bad': API error: 500 - boom"


@pytest.mark.asyncio
async def test_handle_fastgpt(server, client):
    text = await server.handle_fastgpt("why", False, True)
    assert text == format_fastgpt(FASTGPT_DATA)
    assert client.calls == [("fastgpt", "why", False, True)]


@pytest.mark.asyncio
async def test_handle_fastgpt_failure(server, client):
    client.fail = True
    with pytest.raises(ToolError) as info:
        await server.handle_fastgpt("why")
    assert info.value.message.startswith("FastGPT failed for query 'why'")


@pytest.mark.asyncio
async def test_handle_enrich(server, client):
    text = await server.handle_enrich("topic", EnrichType.NEWS)
    assert text == format_enrich("topic", EnrichType.NEWS, ENRICH_RESULTS)
    assert client.calls == [("enrich", "topic", EnrichType.NEWS)]


@pytest.mark.asyncio
async def test_handle_summarize_uses_defaults(server, client):
    text = await server.handle_summarize("https://example.com/doc")
    assert text == "summary text"
    assert client.calls == [
        ("summarize", "https://example.com/doc", SummarizerEngine.DAPHNE, SummaryType.SUMMARY, None)
    ]


@pytest.mark.asyncio
async def test_handle_summarize_failure(server, client):
    client.fail = True
    with pytest.raises(ToolError) as info:
        await server.handle_summarize("https://example.com/doc")
    assert info.value.message.startswith("Summarization failed: ")


@pytest.mark.asyncio
async def test_initialize(server):
    response = await server.handle_request({"jsonrpc": "2.0", "id": 3, "method": "initialize"})
    assert response["id"] == 3
    assert response["result"]["protocolVersion"] == "2024-11-05"
    assert response["result"]["serverInfo"]["name"] == "kagi-mcp-server"
    assert "error" not in response


@pytest.mark.asyncio
async def test_tools_list(server):
    response = await server.handle_request({"jsonrpc": "2.0", "id": "x", "method": "tools/list"})
    assert response["result"]["tools"] == [tool.to_dict() for tool in get_tools()]


@pytest.mark.asyncio
async def test_tools_call_search(server):
    response = await server.handle_request(call("kagi_search_fetch", {"queries": ["one"]}))
    assert response["result"]["content"] == [
        {"type": "text", "text": format_search_results("one", SEARCH_RESPONSE)}
    ]


@pytest.mark.asyncio
async def test_tools_call_summarizer_passes_arguments(server, client):
    arguments = {
        "url": "https://example.com/doc",
        "engine": "cecil",
        "summary_type": "takeaway",
        "target_language": "EN",
    }
    response = await server.handle_request(call("kagi_summarizer", arguments))
    assert response["result"]["content"][0]["text"] == "summary text"
    assert client.calls == [
        ("summarize", "https://example.com/doc", SummarizerEngine.CECIL, SummaryType.TAKEAWAY, "EN")
    ]


@pytest.mark.asyncio
async def test_tools_call_fastgpt_ignores_non_boolean_flags(server, client):
    response = await server.handle_request(call("kagi_fastgpt", {"query": "q", "cache": "yes"}))
    assert response["result"]["content"] == [
        {"type": "text", "text": format_fastgpt(FASTGPT_DATA)}
    ]
    assert response["id"] == 1
    assert client.calls == [("fastgpt", "q", None, None)]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("name", "kind"),
    [("kagi_enrich_web", EnrichType.WEB), ("kagi_enrich_news", EnrichType.NEWS)],
)
async def test_tools_call_enrich(server, client, name, kind):
    response = await server.handle_request(call(name, {"query": "q"}))
    assert response["result"]["content"][0]["text"] == format_enrich("q", kind, ENRICH_RESULTS)
    assert client.calls == [("enrich", "q", kind)]


@pytest.mark.asyncio
async def test_tool_failure_gives_code_minus_one(server, client):
    client.fail = True
    response = await server.handle_request(call("kagi_enrich_web", {"query": "q"}))
    assert response["error"]["code"] == -1
    assert response["error"]["message"].startswith("Enrichment failed for query 'q'")
    assert "result" not in response


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("params", "message"),
    [
        (None, "Missing parameters"),
        ({"arguments": {}}, "Missing name parameter"),
        ({"name": 4, "arguments": {}}, "Missing name parameter"),
        ({"name": "kagi_fastgpt"}, "Missing arguments parameter"),
        ({"name": "kagi_search_fetch", "arguments": None}, "Missing or invalid 'queries' parameter"),
        ({"name": "kagi_search_fetch", "arguments": {"queries": "x"}}, "Missing or invalid 'queries' parameter"),
        ({"name": "kagi_summarizer", "arguments": {}}, "Missing 'url' parameter"),
        ({"name": "kagi_fastgpt", "arguments": {"query": 1}}, "Missing or invalid 'query' parameter"),
        ({"name": "kagi_enrich_news", "arguments": {}}, "Missing or invalid 'query' parameter"),
    ],
)
async def test_invalid_params(server, params, message):
    request = {"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": params}
    response = await server.handle_request(request)
    assert response["error"] == {"code": -32602, "message": message}
    assert response["id"] == 9


@pytest.mark.asyncio
async def test_unknown_tool(server):
    response = await server.handle_request(call("nope", {}))
    assert response["error"]["code"] == -32601
    assert "'nope'" in response["error"]["message"]


@pytest.mark.asyncio
async def test_unknown_method(server):
    response = await server.handle_request({"jsonrpc": "2.0", "id": 1, "method": "ping"})
    assert response["error"]["code"] == -32601
    assert response["error"]["message"].startswith("Unknown method: ")


@pytest.mark.asyncio
async def test_handle_line_blank(server):
    assert await server.handle_line("   \n") is None


@pytest.mark.asyncio
async def test_handle_line_round_trip(server):
    line = json.dumps({"jsonrpc": "2.0", "id": 42, "method": "initialize"})
    answer = await server.handle_line(line + "\n")
    decoded = json.loads(answer)
    assert decoded == await server.handle_request(json.loads(line))
    assert answer.startswith('{"jsonrpc":"2.0","id":42,"result":')


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "line",
    [
        "not json",
        "[1, 2]",
        '{"id": 1, "method": "initialize"}',
        '{"jsonrpc": "2.0", "method": "initialize"}',
        '{"jsonrpc": "2.0", "id": 1}',
        '{"jsonrpc": "2.0", "id": 1, "method": 7}',
    ],
)
async def test_handle_line_parse_errors(server, line):
    decoded = json.loads(await server.handle_line(line))
    assert decoded["id"] is None
    assert decoded["error"]["code"] == -32700
    assert decoded["error"]["message"].startswith("Parse error: ")
    assert "result" not in decoded


@pytest.mark.asyncio
async def test_run_answers_each_line(server):
    requests = [
        json.dumps({"jsonrpc": "2.0", "id": 1, "method": "initialize"}),
        "",
        json.dumps({"jsonrpc": "2.0", "id": 2, "method": "tools/list"}),
        "garbage",
    ]
    reader = io.StringIO("\n".join(requests) + "\n")
    writer = io.StringIO()
    await server.run(reader, writer)
    answers = [json.loads(line) for line in writer.getvalue().splitlines()]
    assert [answer["id"] for answer in answers] == [1, 2, None]
    assert answers[2]["error"]["code"] == -32700