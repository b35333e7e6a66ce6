# sheetchat/infra/google_auth.py

import json
import logging
import threading
import time

import requests
from jose import jwt
from jose.exceptions import JOSEError
from pydantic import BaseModel, ValidationError

from sheetchat.core.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

# =========================
# CONFIGURATION
# =========================

TOKEN_URL = "https://oauth2.googleapis.com/token"
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]
JWT_LIFETIME = 3600
EXPIRY_MARGIN = 60  # refresh a minute before Google would reject the token


class ServiceAccount(BaseModel):
    client_email: str
    private_key: str
    token_uri: str = TOKEN_URL

    @classmethod
    def from_json(cls, text: str) -> "ServiceAccount":
        """Parse a service account JSON key file."""
        try:
            return cls.model_validate(json.loads(text))
        except (ValueError, TypeError, ValidationError) as e:
            logger.debug("Service account key rejected: %s", e)
            raise ConfigurationError("Invalid JSON key.") from e


# =========================
# JWT
# =========================

def create_jwt(account: ServiceAccount, scopes: list[str] | None = None, now: int | None = None) -> str:
    """RS256-signed assertion for the OAuth 2.0 JWT bearer flow."""
    now = int(time.time()) if now is None else now
    claims = {
        "iss": account.client_email,
        "scope": " ".join(scopes or SCOPES),
        "aud": account.token_uri,
        "iat": now,
        "exp": now + JWT_LIFETIME,
    }
    try:
        return jwt.encode(claims, account.private_key, algorithm="RS256")
    except JOSEError as e:
        raise ConfigurationError("Invalid service account private key.") from e


# =========================
# TOKEN PROVIDER
# =========================

class TokenProvider:
    """Exchanges a signed JWT for a bearer token and caches it until expiry."""

    def __init__(self, account: ServiceAccount, session: requests.Session | None = None, clock=time.time):
        self.account = account
        self.session = session or requests.Session()
        self.clock = clock
        self._token = None
        self._expires_at = 0.0
        self._lock = threading.Lock()

    def get_token(self) -> str:
        with self._lock:
            if self._token and self.clock() < self._expires_at:
                return self._token
            self._token, lifetime = self._request_token()
            self._expires_at = self.clock() + max(lifetime - EXPIRY_MARGIN, 0)
            return self._token

    def invalidate(self):
        with self._lock:
            self._token = None
            self._expires_at = 0.0

    def _request_token(self) -> tuple[str, int]:
        assertion = create_jwt(self.account, now=int(self.clock()))
        try:
            resp = self.session.post(
                self.account.token_uri,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
            )
        except requests.RequestException as e:
            raise TransportError(f"Token request failed ({e})") from e

        if not resp.ok:
            raise TransportError(f"Token request failed ({resp.status_code})")

        try:
            data = resp.json()
        except ValueError as e:
            raise TransportError("Token request failed (invalid response)") from e
        if not isinstance(data, dict):
            raise TransportError("Token request failed (invalid response)")

        token = data.get("access_token")
        if not token:
            raise TransportError("Token request failed (no access_token)")

        logger.info("Obtained access token for %s", self.account.client_email)
        return token, int(data.get("expires_in", JWT_LIFETIME))
