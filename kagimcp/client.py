"""Async client for the Kagi Search, Summarizer, FastGPT and Enrichment APIs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

API_BASE_URL_PREFIX = "https://kagi.com/api"
DEFAULT_API_VERSION = "v0"


class KagiError(Exception):
    """Base error for everything the Kagi client reports."""


class ApiError(KagiError):
    """The API answered with a non-success status, or the endpoint URL is invalid."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"API error: {status} - {message}")
        self.status = status
        self.message = message


class EnrichType(str, Enum):
    """Which enrichment index to query."""

    WEB = "web"
    NEWS = "news"


class SummarizerEngine(str, Enum):
    """Summarization engines offered by the Universal Summarizer."""

    CECIL = "cecil"
    AGNES = "agnes"
    DAPHNE = "daphne"
    MURIEL = "muriel"


class SummaryType(str, Enum):
    """Shape of the summary: prose or bulleted key points."""

    SUMMARY = "summary"
    TAKEAWAY = "takeaway"


def _matches(value: Any, kind: type) -> bool:
    if kind is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, kind)


def _field(data: Any, key: str, kind: type, *, required: bool = True) -> Any:
    if not isinstance(data, Mapping):
        raise KagiError("Serialization error: expected a JSON object")
    value = data.get(key)
    if value is None:
        if required:
            raise KagiError(f"Serialization error: missing field `{key}`")
        return None
    if not _matches(value, kind):
        raise KagiError(f"Serialization error: invalid type for field `{key}`")
    if kind is float:
        return float(value)
    return value


def _check_meta(payload: Any, fields: Mapping[str, type]) -> None:
    meta = _field(payload, "meta", Mapping)
    for key, kind in fields.items():
        _field(meta, key, kind)


@dataclass(frozen=True)
class Thumbnail:
    url: str
    width: int | None = None
    height: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Thumbnail:
        return cls(
            url=_field(data, "url", str),
            width=_field(data, "width", int, required=False),
            height=_field(data, "height", int, required=False),
        )


@dataclass(frozen=True)
class SearchMeta:
    id: str
    node: str
    ms: int
    api_balance: float | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchMeta:
        return cls(
            id=_field(data, "id", str),
            node=_field(data, "node", str),
            ms=_field(data, "ms", int),
            api_balance=_field(data, "api_balance", float, required=False),
        )


@dataclass(frozen=True)
class SearchResult:
    """One entry of a search or enrichment answer (type 0: result, type 1: related searches)."""

    result_type: int
    rank: int | None = None
    url: str | None = None
    title: str | None = None
    snippet: str | None = None
    published: str | None = None
    thumbnail: Thumbnail | None = None
    list: list[str] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchResult:
        thumbnail = _field(data, "thumbnail", Mapping, required=False)
        items = _field(data, "list", list, required=False)
        if items is not None and not all(isinstance(item, str) for item in items):
            raise KagiError("Serialization error: invalid type for field `list`")
        return cls(
            result_type=_field(data, "t", int),
            rank=_field(data, "rank", int, required=False),
            url=_field(data, "url", str, required=False),
            title=_field(data, "title", str, required=False),
            snippet=_field(data, "snippet", str, required=False),
            published=_field(data, "published", str, required=False),
            thumbnail=Thumbnail.from_dict(thumbnail) if thumbnail is not None else None,
            list=items,
        )


@dataclass(frozen=True)
class SearchResponse:
    meta: SearchMeta
    data: list[SearchResult]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchResponse:
        return cls(
            meta=SearchMeta.from_dict(_field(data, "meta", Mapping)),
            data=[SearchResult.from_dict(item) for item in _field(data, "data", list)],
        )


@dataclass(frozen=True)
class SummaryData:
    output: str
    tokens: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SummaryData:
        return cls(
            output=_field(data, "output", str),
            tokens=_field(data, "tokens", int, required=False),
        )


@dataclass(frozen=True)
class FastGptReference:
    title: str
    snippet: str
    url: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FastGptReference:
        return cls(
            title=_field(data, "title", str),
            snippet=_field(data, "snippet", str),
            url=_field(data, "url", str),
        )


@dataclass(frozen=True)
class FastGptData:
    output: str
    tokens: int
    references: list[FastGptReference] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FastGptData:
        references = _field(data, "references", list, required=False) or []
        return cls(
            output=_field(data, "output", str),
            tokens=_field(data, "tokens", int),
            references=[FastGptReference.from_dict(item) for item in references],
        )


def _parse_url(raw: str) -> httpx.URL:
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL:
        raise ApiError(400, "Invalid URL") from None
    if not url.scheme:
        raise ApiError(400, "Invalid URL")
    return url


class KagiClient:
    """Async client for Kagi's APIs, each endpoint with its own API version."""

    def __init__(
        self,
        api_key: str,
        search_api_version: str = DEFAULT_API_VERSION,
        summarizer_api_version: str = DEFAULT_API_VERSION,
        fastgpt_api_version: str = DEFAULT_API_VERSION,
        enrich_api_version: str = DEFAULT_API_VERSION,
        base_url_prefix: str = API_BASE_URL_PREFIX,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.search_api_version = search_api_version
        self.summarizer_api_version = summarizer_api_version
        self.fastgpt_api_version = fastgpt_api_version
        self.enrich_api_version = enrich_api_version
        self.base_url_prefix = base_url_prefix
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient()

    async def __aenter__(self) -> KagiClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this client created it."""
        if self._owns_http:
            await self._http.aclose()

    def _endpoint(self, version: str, *parts: str) -> str:
        return "/".join((self.base_url_prefix, version, *parts))

    async def _send(self, method: str, url: Any, **kwargs: Any) -> Any:
        headers = {"Authorization": f"Bot {self.api_key}"}
        try:
            response = await self._http.request(method, url, headers=headers, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise KagiError(f"HTTP request failed: {exc}") from exc
        if not response.is_success:
            try:
                text = response.text
            except Exception:  # undecodable error body
                text = ""
            raise ApiError(response.status_code, text)
        try:
            return response.json()
        except ValueError as exc:
            raise KagiError(
                f"HTTP request failed: error decoding response body: {exc}"
            ) from exc

    async def search(self, query: str, limit: int | None = None) -> SearchResponse:
        """Search the web; ``limit`` caps the number of results."""
        url = _parse_url(self._endpoint(self.search_api_version, "search"))
        params = {"q": query}
        if limit is not None:
            params["limit"] = str(limit)
        payload = await self._send("GET", url, params=params)
        return SearchResponse.from_dict(payload)

    async def _summarize(
        self,
        source_key: str,
        source: str,
        engine: SummarizerEngine | str | None,
        summary_type: SummaryType | str | None,
        target_language: str | None,
    ) -> SummaryData:
        body: dict[str, Any] = {source_key: source}
        if engine is not None:
            body["engine"] = SummarizerEngine(engine).value
        if summary_type is not None:
            body["summary_type"] = SummaryType(summary_type).value
        if target_language is not None:
            body["target_language"] = target_language
        url = self._endpoint(self.summarizer_api_version, "summarize")
        payload = await self._send("POST", url, json=body)
        _check_meta(payload, {"id": str, "node": str, "ms": int, "api_balance": float})
        return SummaryData.from_dict(_field(payload, "data", Mapping))

    async def summarize(
        self,
        url: str,
        engine: SummarizerEngine | str | None = None,
        summary_type: SummaryType | str | None = None,
        target_language: str | None = None,
    ) -> SummaryData:
        """Summarize the document at ``url``."""
        return await self._summarize("url", url, engine, summary_type, target_language)

    async def summarize_text(
        self,
        text: str,
        engine: SummarizerEngine | str | None = None,
        summary_type: SummaryType | str | None = None,
        target_language: str | None = None,
    ) -> SummaryData:
        """Summarize ``text`` given directly."""
        return await self._summarize("text", text, engine, summary_type, target_language)

    async def fastgpt(
        self,
        query: str,
        cache: bool | None = None,
        web_search: bool | None = None,
    ) -> FastGptData:
        """Answer ``query`` with FastGPT."""
        body: dict[str, Any] = {"query": query}
        if cache is not None:
            body["cache"] = cache
        if web_search is not None:
            body["web_search"] = web_search
        url = self._endpoint(self.fastgpt_api_version, "fastgpt")
        payload = await self._send("POST", url, json=body)
        _check_meta(payload, {"id": str, "node": str, "ms": int})
        return FastGptData.from_dict(_field(payload, "data", Mapping))

    async def enrich(
        self, query: str, enrich_type: EnrichType | str
    ) -> list[SearchResult]:
        """Query the web or news enrichment index for non-commercial content."""
        kind = EnrichType(enrich_type).value
        url = _parse_url(self._endpoint(self.enrich_api_version, "enrich", kind))
        payload = await self._send("GET", url, params={"q": query})
        return SearchResponse.from_dict(payload).data