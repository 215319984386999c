"""
Transport executor: issues one HTTP request against a Nightscout site and maps
the outcome onto the client's error types.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

import httpx

from nightscout_client.auth import Credentials
from nightscout_client.errors import ApiError, AuthenticationError, DecodeError, NetworkError
from nightscout_client.settings import ClientConfig

logger = logging.getLogger(__name__)

QueryParams = Sequence[tuple[str, str]]


class Transport:
    def __init__(
        self,
        config: ClientConfig,
        credentials: Credentials,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.config = config
        self.credentials = credentials
        self.http_client = http_client

    def headers(self, with_body: bool = False) -> dict[str, str]:
        headers = {"accept": "application/json"}
        if with_body:
            headers["content-type"] = "application/json"
        headers.update(self.credentials.headers())
        return headers

    async def request(
        self,
        method: str,
        path: str,
        params: Optional[QueryParams] = None,
        json_data: Any = None,
    ) -> Any:
        """Send a single request and return the decoded JSON body.

        Args:
            method: HTTP method, e.g. ``GET`` or ``POST``.
            path: Path relative to the configured base URL.
            params: Ordered query parameters. Keys may repeat.
            json_data: Optional JSON body.

        Returns:
            The parsed JSON body, or ``None`` when the body is empty.
        """
        url = self.config.url_for(path)
        method = method.upper()
        headers = self.headers(with_body=json_data is not None)

        try:
            if self.http_client is not None:
                response = await self._send(self.http_client, method, url, params, json_data, headers)
            else:
                async with httpx.AsyncClient(follow_redirects=True, timeout=self.config.timeout) as client:
                    response = await self._send(client, method, url, params, json_data, headers)
        except httpx.TimeoutException as e:
            raise NetworkError(f"Timed out calling Nightscout {method} {url}: {e}", original=e) from e
        except httpx.RequestError as e:
            raise NetworkError(f"Request error calling Nightscout {method} {url}: {e}", original=e) from e

        logger.debug(f"Request {method} {url} completed with status: {response.status_code}")

        if not response.is_success:
            if response.status_code == 401:
                raise AuthenticationError(response.status_code, response.text, url=url)
            raise ApiError(response.status_code, response.text, url=url)

        if not response.content:
            return None
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DecodeError(path, f"invalid JSON body: {e}") from e

    @staticmethod
    async def _send(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        params: Optional[QueryParams],
        json_data: Any,
        headers: dict[str, str],
    ) -> httpx.Response:
        return await client.request(
            method=method,
            url=url,
            params=list(params) if params else None,
            json=json_data,
            headers=headers,
        )
