"""
FastAPI/Starlette web context adapter.

Reads request data from a Starlette Request and buffers response writes
until the route handler turns them into a FastAPI Response.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import Request, Response

from ..core.exceptions import HttpAction

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class StarletteWebContext:
    """
    WebContext implementation for FastAPI route handlers.

    Request parameters are the query string plus, when built with
    from_request(), the fields of a posted form. Query parameters win
    when a name appears in both.

    The session is request.session when SessionMiddleware is installed,
    otherwise a dictionary that lives as long as this context.
    """

    def __init__(self, request: Request, form: Optional[Mapping[str, str]] = None):
        self.request = request
        self._form: Mapping[str, str] = form or {}
        if "session" in request.scope:
            self._session = request.session
        else:
            logger.debug("SessionMiddleware not installed - using per-request session")
            self._session: Dict[str, Any] = {}

        self._status = 200
        self._headers: Dict[str, str] = {}
        self._content = ""

    @classmethod
    async def from_request(cls, request: Request) -> "StarletteWebContext":
        """
        Build a context with the request body's form fields already read.

        The pipeline is synchronous, so the body has to be read here, in
        the async route handler, before the context is handed over.

        Args:
            request: Incoming FastAPI request

        Returns:
            Context whose request parameters include the posted form fields
        """
        form: Dict[str, str] = {}
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            data = await request.form()
            # Uploaded files are not credentials
            form = {key: value for key, value in data.items() if isinstance(value, str)}
        return cls(request, form=form)

    def get_request_parameter(self, name: str) -> Optional[str]:
        value = self.request.query_params.get(name)
        if value is None:
            value = self._form.get(name)
        return value

    def get_request_header(self, name: str) -> Optional[str]:
        return self.request.headers.get(name)

    def get_request_method(self) -> str:
        return self.request.method

    def get_full_request_url(self) -> str:
        return str(self.request.url)

    def get_session_attribute(self, name: str) -> Any:
        return self._session.get(name)

    def set_session_attribute(self, name: str, value: Any) -> None:
        self._session[name] = value

    def set_response_status(self, code: int) -> None:
        self._status = code

    def set_response_header(self, name: str, value: str) -> None:
        self._headers[name] = value

    def write_response_content(self, content: str) -> None:
        self._content += content

    def to_response(self, media_type: str = "text/html") -> Response:
        """Build a FastAPI Response from everything written to this context."""
        return Response(
            content=self._content,
            status_code=self._status,
            headers=self._headers,
            media_type=media_type
        )


def action_to_response(action: HttpAction, media_type: str = "text/html") -> Response:
    """
    Convert a control-flow signal into a FastAPI Response.

    Args:
        action: HttpAction raised by the pipeline

    Returns:
        Response carrying the action's status, headers and body
    """
    return Response(
        content=action.content,
        status_code=action.code,
        headers=action.headers,
        media_type=media_type
    )
