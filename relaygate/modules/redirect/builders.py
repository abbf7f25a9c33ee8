"""Redirect action builders for login pages and inline login forms."""

import html
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from ..core import RedirectAction, RedirectActionBuilder, WebContext


def add_query_parameters(url: str, **parameters: Optional[str]) -> str:
    """Append query parameters to a URL, keeping any it already has."""
    scheme, netloc, path, query, fragment = urlsplit(url)
    pairs = parse_qsl(query, keep_blank_values=True)
    pairs.extend((name, value) for name, value in parameters.items() if value is not None)
    return urlunsplit((scheme, netloc, path, urlencode(pairs), fragment))


class UrlRedirectActionBuilder(RedirectActionBuilder):
    """Redirects to a fixed login URL, optionally telling it where to come back."""

    def __init__(
        self,
        login_url: str,
        callback_url: Optional[str] = None,
        callback_parameter: str = "callback"
    ):
        self.login_url = login_url
        self.callback_url = callback_url
        self.callback_parameter = callback_parameter

    def redirect(self, context: WebContext) -> RedirectAction:
        if not self.callback_url:
            return RedirectAction.redirect(self.login_url)
        return RedirectAction.redirect(
            add_query_parameters(self.login_url, **{self.callback_parameter: self.callback_url})
        )

    def __repr__(self) -> str:
        return f"UrlRedirectActionBuilder(login_url={self.login_url!r}, callback_url={self.callback_url!r})"


LOGIN_FORM_TEMPLATE = """<!DOCTYPE html>
<html>
<body>
<form action="{action}" method="post">
<label>Username: <input type="text" name="{username}" /></label>
<label>Password: <input type="password" name="{password}" /></label>
<input type="submit" value="Submit" />
</form>
</body>
</html>
"""


class FormRedirectActionBuilder(RedirectActionBuilder):
    """Renders an inline login form posting to the callback URL."""

    def __init__(
        self,
        callback_url: str,
        username_parameter: str = "username",
        password_parameter: str = "password"
    ):
        self.callback_url = callback_url
        self.username_parameter = username_parameter
        self.password_parameter = password_parameter

    def redirect(self, context: WebContext) -> RedirectAction:
        return RedirectAction.render(LOGIN_FORM_TEMPLATE.format(
            action=html.escape(self.callback_url),
            username=html.escape(self.username_parameter),
            password=html.escape(self.password_parameter)
        ))
