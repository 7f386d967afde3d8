"""Shared aiohttp session for the lookup services.

Every request is bounded by the configured timeout. Transport errors,
timeouts and non-success statuses are all raised as :class:`FetchError` so
the lookup caches never store them.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Mapping, Optional

import aiohttp

from arisa.configuration.app_configuration import HttpSettings
from arisa.errors import FetchError
from arisa.util.logger import get_logger

logger = get_logger("http_client")


class HttpStatusError(FetchError):
    """Upstream answered with a non-success HTTP status."""

    def __init__(self, url: str, status: int, reason: str | None = None) -> None:
        self.url = url
        self.status = status
        super().__init__(f"HTTP {status}{f' {reason}' if reason else ''} from {url}")


class HttpClient:
    """Lazily created ``aiohttp.ClientSession`` with a fixed timeout and user agent."""

    def __init__(self, settings: HttpSettings) -> None:
        self.settings = settings
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout_seconds),
                headers={"User-Agent": self.settings.user_agent},
            )
        return self._session

    async def _request(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
        as_json: bool,
    ) -> Any:
        session = self._get_session()
        try:
            async with session.get(url, params=params, headers=headers) as response:
                if response.status >= 400:
                    raise HttpStatusError(url, response.status, response.reason)
                if as_json:
                    return await response.json(content_type=None)
                return await response.text()
        except FetchError:
            raise
        except asyncio.TimeoutError as exc:
            logger.warning("Request to %s timed out after %.0fs", url, self.settings.timeout_seconds)
            raise FetchError(f"Request to {url} timed out") from exc
        except aiohttp.ContentTypeError as exc:
            raise FetchError(f"Unexpected response body from {url}") from exc
        except ValueError as exc:
            raise FetchError(f"Malformed JSON from {url}: {exc}") from exc
        except aiohttp.ClientError as exc:
            logger.warning("Request to %s failed: %s", url, exc)
            raise FetchError(f"Network error: {exc}") from exc

    async def get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        return await self._request(url, params=params, headers=headers, as_json=True)

    async def get_text(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> str:
        return await self._request(url, params=params, headers=headers, as_json=False)

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
