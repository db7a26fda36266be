"""
Fixtures for provider verifier tests.

Provider endpoints are served by ``httpx.MockTransport``; ID tokens are
signed with RSA keys generated for the test session and published through a
fake JWKS endpoint.
"""

import json
import time

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm

from veris_identity.infrastructure.oauth import ProviderHttpClient


def _generate_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def public_jwk(private_key, kid: str) -> dict:
    jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    jwk.update({"kid": kid, "alg": "RS256", "use": "sig"})
    return jwk


class FakeProvider:
    """Serves canned JSON per URL and records every request."""

    def __init__(self):
        self.routes: dict[str, httpx.Response | Exception] = {}
        self.requests: list[httpx.Request] = []

    def respond(self, url: str, status: int = 200, json_body=None) -> None:
        self.routes[url] = httpx.Response(status, json=json_body)

    def fail(self, url: str, error: Exception) -> None:
        self.routes[url] = error

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url).split("?")[0]
        route = self.routes.get(url)
        if route is None:
            return httpx.Response(404, json={"error": "not_found"})
        if isinstance(route, Exception):
            raise route
        return route

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url).split("?")[0] == url]

    def client(self, provider: str) -> ProviderHttpClient:
        return ProviderHttpClient(provider, timeout=1.0, transport=httpx.MockTransport(self.handler))


@pytest.fixture(scope="session")
def signing_key():
    """RSA key published in the fake JWKS as ``key-1``."""
    return _generate_key()


@pytest.fixture(scope="session")
def other_key():
    """RSA key that no JWKS publishes (or publishes as ``key-2``)."""
    return _generate_key()


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def make_id_token(signing_key):
    """Factory for RS256 ID tokens; keyword arguments override claims."""

    def _make(key=None, kid="key-1", drop=(), **overrides) -> str:
        now = int(time.time())
        claims = {
            "iss": "https://accounts.google.com",
            "aud": "ios-client",
            "sub": "google-sub-1",
            "email": "Ada@Example.com",
            "given_name": "Ada",
            "family_name": "Lovelace",
            "iat": now,
            "exp": now + 600,
        }
        claims.update(overrides)
        for name in drop:
            claims.pop(name, None)
        return jwt.encode(
            claims,
            key or signing_key,
            algorithm="RS256",
            headers={"kid": kid},
        )

    return _make


@pytest.fixture
def jwks(signing_key) -> dict:
    """Key set publishing ``signing_key`` as ``key-1``."""
    return {"keys": [public_jwk(signing_key, "key-1")]}


@pytest.fixture
def jwk_factory():
    """Turn a private key into its public JWK with the given ``kid``."""
    return public_jwk
