# kagimcp

A Model Context Protocol (MCP) server that gives AI assistants access to
Kagi's Search, Universal Summarizer, FastGPT and Enrichment APIs, together
with a small async client for those APIs built on `httpx`.

## Installation

```sh
pip install kagimcp
```

## Running the server

The `kagi-mcp-server` command speaks JSON-RPC 2.0 over standard input and
output, one message per line. Provide your Kagi API key through the
environment or a flag:

```sh
export KAGI_API_KEY=placeholder
kagi-mcp-server
```

or

```sh
kagi-mcp-server --api-key placeholder
```

Without a key the command prints an error to standard error and exits with
status 1.

### Options

Each option can also be set through the environment variable shown; a flag
given on the command line wins over the variable.

| Flag | Environment variable | Default |
| --- | --- | --- |
| `--api-key` | `KAGI_API_KEY` | (required) |
| `--summarizer-engine` | `KAGI_SUMMARIZER_ENGINE` | `cecil` |
| `--search-api-version` | `KAGI_SEARCH_API_VERSION` | `v0` |
| `--summarizer-api-version` | `KAGI_SUMMARIZER_API_VERSION` | `v0` |
| `--fastgpt-api-version` | `KAGI_FASTGPT_API_VERSION` | `v0` |
| `--enrich-api-version` | `KAGI_ENRICH_API_VERSION` | `v0` |

Summarizer engines are `cecil`, `agnes`, `daphne` and `muriel`. An unknown
engine name prints a warning and falls back to `cecil`.

### Methods and tools

The server answers the methods `initialize`, `tools/list` and `tools/call`.
Through `tools/call` it offers these tools:

- `kagi_search_fetch` (`queries`: list of strings): up to 10 web results
  per query, rendered as text with numbered entries, published dates,
  snippets and related searches.
- `kagi_summarizer` (`url`, optional `engine`, `summary_type`
  `summary`/`takeaway`, `target_language`): a summary of the document at
  the URL. An unknown or missing engine uses the configured default.
- `kagi_fastgpt` (`query`, optional `cache` and `web_search` booleans): an
  AI-generated answer followed by its numbered references.
- `kagi_enrich_web` (`query`): non-commercial "small web" results.
- `kagi_enrich_news` (`query`): non-mainstream news results.

Errors come back as JSON-RPC errors: `-32700` for a line that is not a
valid request, `-32601` for an unknown method or tool, `-32602` for missing
or invalid parameters, and `-1` when the Kagi API call fails.

### Limits

- Every incoming message must carry `jsonrpc`, `id` and `method`; a
  notification without an `id` is answered with a parse error rather than
  ignored.
- Only tools are offered: there are no MCP resources, prompts or
  subscriptions, and tool calls are answered one at a time.

## Using the server from Python

`kagimcp.server.KagiMcpServer` takes a client and a default engine.
`handle_request` answers one parsed request dictionary, `handle_line` one
line of JSON text, and `run(reader, writer)` serves text streams until the
reader is exhausted.

```python
import asyncio

from kagimcp.client import KagiClient, SummarizerEngine
from kagimcp.server import KagiMcpServer


async def demo() -> None:
    async with KagiClient("placeholder") as client:
        server = KagiMcpServer(client, SummarizerEngine.CECIL)
        reply = await server.handle_line('{"jsonrpc":"2.0","id":1,"method":"tools/list"}')
        print(reply)


asyncio.run(demo())
```

## Using the client

```python
import asyncio

from kagimcp.client import EnrichType, KagiClient, SummarizerEngine, SummaryType


async def demo() -> None:
    async with KagiClient("placeholder") as client:
        results = await client.search("python asyncio", limit=10)
        for result in results.data:
            if result.result_type == 0:
                print(result.title, result.url)

        summary = await client.summarize(
            "https://example.com/article",
            engine=SummarizerEngine.CECIL,
            summary_type=SummaryType.SUMMARY,
        )
        print(summary.output)

        answer = await client.fastgpt("What is asyncio?", cache=True)
        print(answer.output, [ref.url for ref in answer.references])

        for item in await client.enrich("retro computing", EnrichType.WEB):
            print(item.title)


asyncio.run(demo())
```

`KagiClient` also offers `summarize_text` for text given directly. Each
endpoint's API version, the base URL prefix (default
`https://kagi.com/api`) and an `httpx.AsyncClient` of your own can be passed
to the constructor; a client passed in is not closed by `aclose`.

A response with a non-success status raises `kagimcp.client.ApiError`,
which carries the HTTP `status` and the response body as `message`.
Transport failures and answers that do not have the expected shape raise
`kagimcp.client.KagiError`, the base class of `ApiError`.

## Development

```sh
pip install -e ".[test]"
pytest
```