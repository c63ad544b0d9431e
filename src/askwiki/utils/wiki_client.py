from time import perf_counter
from typing import Any, Final
from urllib.parse import quote

import httpx
import structlog

from askwiki.config import settings
from askwiki.models import FetchResult

logger = structlog.get_logger(__name__)

SOURCE: Final[str] = "wikipedia"

NOT_FOUND: Final[str] = "not found"
NO_RESPONSE: Final[str] = "no response from service"
UNEXPECTED: Final[str] = "unexpected error while fetching summary"


def _status_error(status_code: int) -> str:
    if status_code == httpx.codes.NOT_FOUND:
        return NOT_FOUND
    return f"service returned error status {status_code}"


def _page_id(value: Any) -> int | None:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if value is not None:
        logger.debug("wiki.fetch.bad_metadata", field="pageid", value=repr(value))
    return None


def _thumbnail(value: Any) -> dict[str, Any] | None:
    if isinstance(value, dict):
        return value
    if value is not None:
        logger.debug("wiki.fetch.bad_metadata", field="thumbnail", value=repr(value))
    return None


class SummaryFetcher:
    """Looks up a reference summary for a topic key.

    Every failure mode is returned as ``FetchResult(ok=False)``; nothing raised
    by the transport escapes ``fetch``.
    """

    def __init__(
        self,
        api_base: str | None = None,
        page_base: str | None = None,
        timeout: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_base = api_base or settings.WIKI_API_BASE
        self.page_base = page_base or settings.WIKI_PAGE_BASE
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT
        self.user_agent = user_agent or settings.USER_AGENT
        self.transport = transport

    async def fetch(self, key: str) -> FetchResult:
        started = perf_counter()
        url = f"{self.api_base}{quote(key, safe='')}"
        logger.info("wiki.fetch.start", topic=key)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
            result = self._success(key, response.json())
        except httpx.HTTPStatusError as exc:
            return self._failure(key, _status_error(exc.response.status_code), started, status=exc.response.status_code)
        except httpx.RequestError as exc:
            return self._failure(key, NO_RESPONSE, started, detail=str(exc) or repr(exc))
        except Exception as exc:  # noqa: BLE001
            return self._failure(key, UNEXPECTED, started, detail=str(exc) or repr(exc))

        latency_ms = (perf_counter() - started) * 1000
        logger.info("wiki.fetch.completed", topic=result.topic, status_code=response.status_code, latency_ms=latency_ms)
        return result

    async def fetch_with_fallback(self, key: str, fallback: str | None = None, enabled: bool | None = None) -> FetchResult:
        """Fetch ``key``; on failure optionally retry once with a fixed fallback topic.

        The retry is off unless ``FALLBACK_TOPIC_ENABLED`` is set, in which case
        the failure for the primary key is returned unchanged.
        """
        fallback = fallback or settings.FALLBACK_TOPIC
        enabled = settings.FALLBACK_TOPIC_ENABLED if enabled is None else enabled

        result = await self.fetch(key)
        if result.ok or key == fallback:
            return result

        if not enabled:
            logger.info("wiki.fetch.fallback_skipped", topic=key, fallback=fallback)
            return result

        logger.warning("wiki.fetch.fallback", topic=key, fallback=fallback)
        retried = await self.fetch(fallback)
        tried_topics = [key, *retried.tried_topics]
        if retried.ok:
            return retried.model_copy(update={"tried_topics": tried_topics})
        return retried.model_copy(
            update={
                "tried_topics": tried_topics,
                "error_summary": f"{key}: {result.error}; {fallback}: {retried.error}",
            }
        )

    def _success(self, key: str, data: dict[str, Any]) -> FetchResult:
        content_urls = data.get("content_urls") or {}
        page_url = (content_urls.get("desktop") or {}).get("page") or f"{self.page_base}{key}"
        return FetchResult(
            topic=data.get("title") or key,
            source=SOURCE,
            ok=True,
            summary=data.get("extract") or "",
            url=page_url,
            tried_topics=[key],
            page_id=_page_id(data.get("pageid")),
            thumbnail=_thumbnail(data.get("thumbnail")),
        )

    def _failure(self, key: str, error: str, started: float, **fields: Any) -> FetchResult:
        latency_ms = (perf_counter() - started) * 1000
        logger.warning("wiki.fetch.failed", topic=key, error=error, latency_ms=latency_ms, **fields)
        return FetchResult(topic=key, source=SOURCE, ok=False, error=error, tried_topics=[key])
