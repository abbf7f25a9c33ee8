"""
Stub authenticators for tests and local development.

They show the contract every authenticator honors: mutate the
credentials in place on success, raise CredentialsError on failure.
"""

from typing import Optional

from ..core import (
    CredentialsError,
    Profile,
    TokenAuthenticator,
    TokenCredentials,
    UsernamePasswordAuthenticator,
    UsernamePasswordCredentials,
    WebContext,
)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class SimpleTestTokenAuthenticator(TokenAuthenticator):
    """Accepts any non-blank token; the token becomes the profile id."""

    def validate(self, credentials: Optional[TokenCredentials], context: WebContext) -> None:
        if credentials is None:
            raise CredentialsError("credentials must not be null")
        if _is_blank(credentials.token):
            raise CredentialsError("token must not be blank")

        credentials.user_profile = Profile(id=credentials.token)


class SimpleTestUsernamePasswordAuthenticator(UsernamePasswordAuthenticator):
    """Accepts a login when the password equals the username."""

    def validate(self, credentials: Optional[UsernamePasswordCredentials], context: WebContext) -> None:
        if credentials is None:
            raise CredentialsError("credentials must not be null")

        username = credentials.username
        if _is_blank(username):
            raise CredentialsError("Username cannot be blank")
        if _is_blank(credentials.password):
            raise CredentialsError("Password cannot be blank")
        if username != credentials.password:
            raise CredentialsError(f"Username : '{username}' does not match password")

        credentials.user_profile = Profile(id=username, attributes={"username": username})
