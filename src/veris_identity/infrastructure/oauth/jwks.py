"""Provider signing keys (JWKS), fetched lazily and refreshed on rotation."""

from __future__ import annotations

import asyncio
import logging

import jwt

from veris_identity.exceptions import NoMatchingKeyError, UpstreamUnavailableError
from veris_identity.infrastructure.oauth.http import ProviderHTTPError, ProviderHttpClient

logger = logging.getLogger(__name__)


class JWKSKeySet:
    """Published key set of one provider.

    Not fetched until first needed. ``refresh`` replaces the cached keys and
    is safe to call at any time; concurrent refreshes collapse into one
    fetch.
    """

    def __init__(self, url: str, http: ProviderHttpClient):
        self._url = url
        self._http = http
        self._key_set: jwt.PyJWKSet | None = None
        self._lock = asyncio.Lock()

    @property
    def url(self) -> str:
        return self._url

    @property
    def ready(self) -> bool:
        return self._key_set is not None

    async def refresh(self) -> None:
        """Fetch the key set again.

        Raises
        ------
        UpstreamUnavailableError
            If the key set cannot be fetched or parsed
        """
        logger.info("Refreshing JWKS from %s", self._url)
        try:
            data = await self._http.get_json(self._url)
        except ProviderHTTPError as e:
            raise UpstreamUnavailableError("Could not fetch provider signing keys") from e

        try:
            self._key_set = jwt.PyJWKSet.from_dict(data)
        except (jwt.PyJWKSetError, jwt.InvalidKeyError, TypeError, KeyError) as e:
            logger.error("JWKS from %s could not be parsed: %s", self._url, e)
            raise UpstreamUnavailableError("Provider signing keys are unusable") from e

    async def get_signing_key(self, kid: str | None) -> jwt.PyJWK:
        """Return the key with the given ``kid``.

        An unknown ``kid`` triggers one refresh, since providers rotate keys.

        Raises
        ------
        NoMatchingKeyError
            If no key matches after the refresh
        UpstreamUnavailableError
            If the key set cannot be fetched
        """
        if not kid:
            raise NoMatchingKeyError("ID token header has no key id")

        key = self._lookup(kid)
        if key is not None:
            return key

        async with self._lock:
            # Another task may have refreshed while we waited
            key = self._lookup(kid)
            if key is None:
                await self.refresh()
                key = self._lookup(kid)

        if key is None:
            logger.warning("No key %s in JWKS %s", kid, self._url)
            raise NoMatchingKeyError()
        return key

    def _lookup(self, kid: str) -> jwt.PyJWK | None:
        if self._key_set is None:
            return None
        for key in self._key_set.keys:
            if key.key_id == kid:
                return key
        return None
