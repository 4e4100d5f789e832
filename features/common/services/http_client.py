import asyncio
import logging
import aiohttp
from typing import Any, Awaitable, Callable, Dict, Optional

from features.common.exceptions.pipeline_exceptions import (
    UpstreamFetchError,
    FetchTimeoutError,
    ParseError
)
from core.config import settings

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

class HttpClient:
    """Shared aiohttp client with per-request timeout and linear-backoff retries."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        backoff: Optional[float] = None,
        session: Optional[aiohttp.ClientSession] = None,
        sleep: Sleep = asyncio.sleep
    ):
        """Initialize the client.

        Args:
            timeout: Seconds before an in-flight request is aborted
            retries: Total attempts per request
            backoff: Base delay in seconds, multiplied by the attempt number
            session: Optional pre-built session (owned by the caller)
            sleep: Awaitable used between attempts
        """
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self.retries = max(1, retries if retries is not None else settings.fetch_retries)
        self.backoff = backoff if backoff is not None else settings.fetch_backoff
        self._session = session
        self._owns_session = session is None
        self._sleep = sleep

    async def _init_session(self) -> aiohttp.ClientSession:
        if not self._session:
            self._session = aiohttp.ClientSession(
                headers={"User-Agent": settings.user_agent}
            )
        return self._session

    async def close(self):
        if self._session and self._owns_session:
            await self._session.close()
        self._session = None

    async def get_text(
        self,
        url: str,
        source: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> str:
        return await self._request(url, source, params, headers, as_json=False)

    async def get_json(
        self,
        url: str,
        source: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        return await self._request(url, source, params, headers, as_json=True)

    async def _request(
        self,
        url: str,
        source: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        as_json: bool
    ) -> Any:
        last_error: Optional[UpstreamFetchError] = None

        for attempt in range(1, self.retries + 1):
            try:
                logger.info(f"Fetching {source} (attempt {attempt}/{self.retries}): {url}")
                return await self._fetch_once(url, source, params, headers, as_json)
            except UpstreamFetchError as e:
                last_error = e
                logger.warning(f"⚠️ {source} attempt {attempt} failed: {str(e)}")
                if attempt < self.retries:
                    await self._sleep(self.backoff * attempt)

        logger.error(f"❌ {source} failed after {self.retries} attempts")
        raise last_error

    async def _fetch_once(
        self,
        url: str,
        source: str,
        params: Optional[Dict[str, Any]],
        headers: Optional[Dict[str, str]],
        as_json: bool
    ) -> Any:
        session = await self._init_session()
        try:
            async with session.get(
                url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as response:
                if response.status >= 400:
                    raise UpstreamFetchError(
                        source,
                        f"HTTP {response.status}",
                        status=response.status
                    )
                if as_json:
                    try:
                        return await response.json(content_type=None)
                    except ValueError:
                        raise ParseError(f"{source}: malformed JSON")
                return await response.text()
        except asyncio.TimeoutError:
            raise FetchTimeoutError(source, self.timeout)
        except aiohttp.ClientError as e:
            raise UpstreamFetchError(source, str(e))
