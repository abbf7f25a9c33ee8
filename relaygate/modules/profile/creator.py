"""Profile creators."""

from typing import Optional

from ..core import Credentials, Profile, ProfileCreator, WebContext


class AuthenticatorProfileCreator(ProfileCreator):
    """Returns the profile the authenticator attached to the credentials."""

    def create(self, credentials: Optional[Credentials], context: WebContext) -> Optional[Profile]:
        if credentials is None:
            return None
        return credentials.user_profile

    def __repr__(self) -> str:
        return "AuthenticatorProfileCreator()"


# Shared default; clients treat it as "not configured yet"
INSTANCE = AuthenticatorProfileCreator()
