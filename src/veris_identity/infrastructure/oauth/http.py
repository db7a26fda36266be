"""HTTP client for identity provider endpoints."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from veris_identity.exceptions import UpstreamUnavailableError

logger = logging.getLogger(__name__)


class ProviderHTTPError(Exception):
    """A provider answered with a 4xx status.

    Raised to the verifier, which decides what the rejection means.
    """

    def __init__(self, status_code: int, body: Any):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Provider returned {status_code}")

    @property
    def error(self) -> str | None:
        """OAuth ``error`` code of the body (RFC 6749 section 5.2), if any."""
        if isinstance(self.body, dict) and isinstance(self.body.get("error"), str):
            return self.body["error"]
        return None


class ProviderHttpClient:
    """Thin wrapper around ``httpx.AsyncClient`` for provider calls.

    Every request carries the configured timeout. Connection failures,
    timeouts and 5xx answers become ``UpstreamUnavailableError``; 4xx answers
    become ``ProviderHTTPError``.
    """

    def __init__(
        self,
        provider: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._provider = provider
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def get_json(self, url: str, headers: dict[str, str] | None = None) -> Any:
        return await self._request("GET", url, headers=headers)

    async def post_form(
        self,
        url: str,
        data: dict[str, str],
        headers: dict[str, str] | None = None,
    ) -> Any:
        return await self._request("POST", url, data=data, headers=headers)

    async def _request(self, method: str, url: str, **kwargs: Any) -> Any:
        client = await self._get_client()
        try:
            response = await client.request(method, url, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.ConnectError as e:
            logger.warning("%s connection failed (%s %s): %s", self._provider, method, url, e)
            raise UpstreamUnavailableError(f"Could not reach {self._provider}") from e
        except httpx.TimeoutException as e:
            logger.warning("%s timeout (%s %s)", self._provider, method, url)
            raise UpstreamUnavailableError(f"{self._provider} did not answer in time") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status >= 500:
                logger.warning("%s returned error %d (%s %s)", self._provider, status, method, url)
                raise UpstreamUnavailableError(
                    f"{self._provider} returned an error",
                ) from e
            raise ProviderHTTPError(status, _safe_json(e.response)) from e
        except httpx.HTTPError as e:
            logger.warning(
                "%s request failed (%s %s, %s)",
                self._provider,
                method,
                url,
                type(e).__name__,
            )
            raise UpstreamUnavailableError(f"Could not reach {self._provider}") from e
        except ValueError as e:
            logger.warning("%s returned a non-JSON body (%s %s)", self._provider, method, url)
            raise UpstreamUnavailableError(
                f"{self._provider} returned an unreadable response",
            ) from e


def _safe_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
