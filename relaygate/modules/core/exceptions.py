"""Error taxonomy for the authentication pipeline."""

from typing import Dict, Optional


class RelaygateError(Exception):
    """Base class for relaygate errors."""


class ConfigurationError(RelaygateError):
    """
    Fatal setup problem surfaced to the integrator.

    Raised for missing collaborators, incompatible collaborator types and
    invalid configuration values. Never converted into an authentication
    outcome.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    @classmethod
    def missing(cls, field: str) -> "ConfigurationError":
        return cls(f"{field} cannot be null", field=field)


class CredentialsError(RelaygateError):
    """Credentials were present but invalid (bad password, expired token, malformed input)."""


class HttpAction(Exception):
    """
    Control-flow signal: the web layer must perform this HTTP action now.

    Not an error. Collaborators raise it when they need a redirect or a
    direct response in the middle of the pipeline; it propagates unchanged
    to the web layer. Deliberately outside RelaygateError so that handlers
    for pipeline errors never catch it.
    """

    def __init__(
        self,
        code: int,
        message: str = "",
        headers: Optional[Dict[str, str]] = None,
        content: str = "",
    ):
        super().__init__(message or f"HTTP action {code}")
        self.code = code
        self.headers = dict(headers or {})
        self.content = content

    def apply(self, context) -> "HttpAction":
        """Write status, headers and body to the web context."""
        context.set_response_status(self.code)
        for name, value in self.headers.items():
            context.set_response_header(name, value)
        if self.content:
            context.write_response_content(self.content)
        return self

    @property
    def location(self) -> Optional[str]:
        return self.headers.get("Location")

    @classmethod
    def redirect(cls, url: str, context=None) -> "HttpAction":
        action = cls(302, f"redirect to {url}", headers={"Location": url})
        return action.apply(context) if context is not None else action

    @classmethod
    def ok(cls, content: str = "", context=None) -> "HttpAction":
        action = cls(200, "ok", content=content)
        return action.apply(context) if context is not None else action

    @classmethod
    def unauthorized(cls, realm: Optional[str] = None, context=None) -> "HttpAction":
        headers = {}
        if realm:
            headers["WWW-Authenticate"] = f'Basic realm="{realm}"'
        action = cls(401, "authentication required", headers=headers)
        return action.apply(context) if context is not None else action

    @classmethod
    def forbidden(cls, context=None) -> "HttpAction":
        action = cls(403, "forbidden")
        return action.apply(context) if context is not None else action

    def __repr__(self) -> str:
        return f"HttpAction(code={self.code}, headers={self.headers!r})"
