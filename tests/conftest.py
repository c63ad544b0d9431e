"""Shared fixtures: canned summary payloads and stub fetchers."""

import httpx
import pytest

from askwiki.utils.wiki_client import SummaryFetcher

ADA_SUMMARY = (
    "Augusta Ada King, Countess of Lovelace was an English mathematician and writer. "
    "She is chiefly known for her work on Charles Babbage's proposed Analytical Engine. "
    "She was the first to recognise that the machine had applications beyond pure calculation."
)
ADA_URL = "https://en.wikipedia.org/wiki/Ada_Lovelace"


def summary_payload(title: str, extract: str, url: str, pageid: int = 1) -> dict:
    return {
        "title": title,
        "pageid": pageid,
        "extract": extract,
        "content_urls": {"desktop": {"page": url}},
        "thumbnail": {"source": "https://upload.wikimedia.org/thumb.png", "width": 320, "height": 240},
    }


def json_transport(payload: dict, status_code: int = 200, requests: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


class RaisingFetcher(SummaryFetcher):
    """Fetcher whose call itself blows up, as opposed to returning ok=False."""

    async def fetch(self, key: str):
        raise httpx.ConnectError("network is unreachable")


@pytest.fixture
def ada_fetcher() -> SummaryFetcher:
    payload = summary_payload("Ada Lovelace", ADA_SUMMARY, ADA_URL, pageid=974)
    return SummaryFetcher(transport=json_transport(payload))
