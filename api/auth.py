"""
Caller authentication.

Chat requests carry a Supabase access token. It is verified locally against
the project's published key set; when that fails for any reason (unknown
key, legacy HS256 secret, expired, JWKS unreachable) Supabase itself is asked
about the token. Only when both fail is the request rejected.
"""

import hmac
import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import jwt
from jwt import PyJWKClient
from supabase import Client

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

SIGNING_ALGORITHMS = ["RS256", "ES256"]


@dataclass
class AuthenticatedUser:
    user_id: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)


def extract_bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationError("Missing or invalid authorization header.")
    token = authorization[len("Bearer "):].strip()
    if not token:
        raise AuthenticationError("Missing or invalid authorization header.")
    return token


def require_authorization(authorization: Optional[str]) -> str:
    """
    Token for endpoints that delegate authorization to row-level security:
    only its presence is checked here.
    """
    if not authorization:
        raise AuthenticationError("Missing Authorization header")
    return authorization.removeprefix("Bearer ").strip()


def verify_admin_token(provided: Optional[str], expected: Optional[str] = None) -> None:
    expected = expected if expected is not None else os.getenv("ADMIN_TOKEN")
    # An unset secret must not turn into an open endpoint
    if not expected or not provided or not hmac.compare_digest(provided, expected):
        raise AuthenticationError("Unauthorized")


class SupabaseTokenVerifier:
    """
    Args:
        client: Service client used for the server-side fallback check
        supabase_url: Project URL (defaults to SUPABASE_URL)
        jwks_client: Pre-built key-set client (tests pass a fake)
    """

    def __init__(
        self,
        client: Client,
        supabase_url: Optional[str] = None,
        jwks_client: Optional[PyJWKClient] = None,
    ):
        supabase_url = supabase_url or os.getenv("SUPABASE_URL")
        if not supabase_url:
            raise EnvironmentError("SUPABASE_URL must be set in environment or passed as an argument.")

        self.client = client
        self.issuer = f"{supabase_url.rstrip('/')}/auth/v1"
        host = urlparse(supabase_url).netloc
        self.jwks_client = jwks_client or PyJWKClient(f"https://{host}/auth/v1/.well-known/jwks.json")

    def verify(self, token: str) -> AuthenticatedUser:
        try:
            claims = self._verify_signature(token)
            return AuthenticatedUser(user_id=claims["sub"], email=claims.get("email"), claims=claims)
        except jwt.PyJWTError as e:
            logger.info(f"Local JWT verification failed ({type(e).__name__}); asking Supabase")
        return self._introspect(token)

    def _verify_signature(self, token: str) -> Dict[str, Any]:
        signing_key = self.jwks_client.get_signing_key_from_jwt(token)
        return jwt.decode(
            token,
            signing_key.key,
            algorithms=SIGNING_ALGORITHMS,
            issuer=self.issuer,
            options={"verify_aud": False, "require": ["sub", "exp"]},
        )

    def _introspect(self, token: str) -> AuthenticatedUser:
        try:
            response = self.client.auth.get_user(token)
        except Exception as e:
            logger.warning(f"❌ Supabase rejected token: {e}")
            raise AuthenticationError("Invalid Supabase JWT.") from e

        user = getattr(response, "user", None) if response is not None else None
        if user is None:
            raise AuthenticationError("Invalid Supabase JWT.")
        return AuthenticatedUser(user_id=user.id, email=getattr(user, "email", None))
