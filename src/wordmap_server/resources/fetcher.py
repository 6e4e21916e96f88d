"""
Asset Fetcher

Reads the static assets (coordinates, vocabulary, vectors) either over HTTP
or from a local directory, depending on the configured base. Assets are
treated as immutable for the lifetime of the process.

Every transport or filesystem failure is converted into ResourceLoadError so
callers only deal with the word map error taxonomy.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import httpx

from ..config import settings
from ..core.errors import ResourceLoadError

logger = logging.getLogger("wordmap.assets")


class AssetFetcher:
    """
    Fetches named assets relative to a base directory or URL.
    """

    def __init__(
        self,
        base: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        base : Optional[str]
            Directory path or http(s) URL. Defaults to settings.asset_base.

        timeout : Optional[float]
            HTTP timeout per request. Defaults to settings.fetch_timeout.

        transport : Optional[httpx.AsyncBaseTransport]
            Optional transport override for remote fetches (used by tests).
        """
        self.base = base or settings.asset_base
        self.timeout = timeout if timeout is not None else settings.fetch_timeout
        self._transport = transport

    @property
    def is_remote(self) -> bool:
        return self.base.startswith(("http://", "https://"))

    def location(self, name: str) -> str:
        if self.is_remote:
            return f"{self.base.rstrip('/')}/{name.lstrip('/')}"
        return str(Path(self.base) / name)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_bytes(self, name: str) -> bytes:
        """
        Fetch the raw bytes of an asset.

        Raises
        ------
        ResourceLoadError
            If the asset cannot be read.
        """
        location = self.location(name)
        logger.debug("Fetching asset %s", location)

        if self.is_remote:
            return await self._fetch_remote(location)
        return await self._fetch_local(location)

    async def fetch_text(self, name: str) -> str:
        data = await self.fetch_bytes(name)
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ResourceLoadError(f"Asset {name} is not valid UTF-8.") from exc

    async def fetch_json(self, name: str) -> Any:
        text = await self.fetch_text(name)
        try:
            return json.loads(text)
        except ValueError as exc:
            raise ResourceLoadError(f"Asset {name} is not valid JSON: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_remote(self, url: str) -> bytes:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(url)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error(
                "Asset request failed (%s): url=%s, error=%s",
                type(exc).__name__,
                url,
                str(exc),
            )
            raise ResourceLoadError(
                f"Failed to fetch {url}: {type(exc).__name__}"
            ) from exc

        return resp.content

    async def _fetch_local(self, path: str) -> bytes:
        try:
            return await asyncio.to_thread(Path(path).read_bytes)
        except OSError as exc:
            logger.error("Asset read failed: path=%s, error=%s", path, exc)
            raise ResourceLoadError(
                f"Failed to read {path}: {type(exc).__name__}"
            ) from exc
