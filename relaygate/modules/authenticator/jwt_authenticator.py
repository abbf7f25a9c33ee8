"""
JWT token authenticator.

Verifies signed JWTs with a shared secret and turns the claims into a
profile: "sub" becomes the profile id, the other claims its attributes.
"""

import logging
from typing import Iterable, Optional

import jwt

from ..core import CredentialsError, Profile, TokenAuthenticator, TokenCredentials, WebContext

logger = logging.getLogger(__name__)


class JwtAuthenticator(TokenAuthenticator):
    """
    Validates JWT bearer tokens.

    This class is a black box that:
    - Verifies token signatures
    - Verifies audience and issuer when configured
    - Attaches a profile built from the claims
    """

    def __init__(
        self,
        secret: str,
        algorithms: Iterable[str] = ("HS256",),
        audience: Optional[str] = None,
        issuer: Optional[str] = None
    ):
        """
        Initialize JWT authenticator.

        Args:
            secret: Shared secret used to verify signatures
            algorithms: Accepted signing algorithms
            audience: Expected audience claim (not verified when None)
            issuer: Expected issuer claim (not verified when None)
        """
        self.secret = secret
        self.algorithms = list(algorithms)
        self.audience = audience
        self.issuer = issuer

    def validate(self, credentials: Optional[TokenCredentials], context: WebContext) -> None:
        if credentials is None:
            raise CredentialsError("credentials must not be null")
        token = credentials.token
        if token is None or not token.strip():
            raise CredentialsError("token must not be blank")

        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": bool(self.audience),
                    "verify_iss": bool(self.issuer),
                    "verify_exp": True,
                }
            )
        except jwt.ExpiredSignatureError as e:
            raise CredentialsError("JWT token expired") from e
        except jwt.InvalidAudienceError as e:
            raise CredentialsError(f"Invalid audience in JWT (expected {self.audience})") from e
        except jwt.InvalidIssuerError as e:
            raise CredentialsError(f"Invalid issuer in JWT (expected {self.issuer})") from e
        except jwt.InvalidTokenError as e:
            raise CredentialsError(f"Invalid JWT token: {e}") from e

        subject = claims.pop("sub", None)
        if not subject:
            raise CredentialsError("JWT has no subject")

        logger.debug(f"JWT validated for subject {subject}")
        credentials.user_profile = Profile(id=str(subject), attributes=claims)

    def __repr__(self) -> str:
        return f"JwtAuthenticator(algorithms={self.algorithms!r}, audience={self.audience!r}, issuer={self.issuer!r})"
