"""
In-memory web context.

Used by tests and by callers that drive the pipeline outside an HTTP
framework (CLI tools, batch jobs).
"""

from typing import Any, Dict, Optional


class MockWebContext:
    """
    Web context backed by plain dictionaries.

    Request data is configured with the builder-style add_* methods;
    response writes are recorded for later inspection.
    """

    def __init__(
        self,
        method: str = "GET",
        url: str = "http://localhost/",
        session: Optional[Dict[str, Any]] = None
    ):
        self.method = method.upper()
        self.url = url
        self.parameters: Dict[str, str] = {}
        self.headers: Dict[str, str] = {}
        self.session: Dict[str, Any] = session if session is not None else {}

        self.response_status = 200
        self.response_headers: Dict[str, str] = {}
        self.response_content = ""

    @classmethod
    def create(cls) -> "MockWebContext":
        return cls()

    def add_request_parameters(self, **parameters: str) -> "MockWebContext":
        self.parameters.update(parameters)
        return self

    def add_request_parameter(self, name: str, value: str) -> "MockWebContext":
        self.parameters[name] = value
        return self

    def add_request_headers(self, headers: Dict[str, str]) -> "MockWebContext":
        for name, value in headers.items():
            self.add_request_header(name, value)
        return self

    def add_request_header(self, name: str, value: str) -> "MockWebContext":
        # Header names are case-insensitive
        self.headers[name.lower()] = value
        return self

    def set_request_method(self, method: str) -> "MockWebContext":
        self.method = method.upper()
        return self

    def get_request_parameter(self, name: str) -> Optional[str]:
        return self.parameters.get(name)

    def get_request_header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def get_request_method(self) -> str:
        return self.method

    def get_full_request_url(self) -> str:
        return self.url

    def get_session_attribute(self, name: str) -> Any:
        return self.session.get(name)

    def set_session_attribute(self, name: str, value: Any) -> None:
        self.session[name] = value

    def set_response_status(self, code: int) -> None:
        self.response_status = code

    def set_response_header(self, name: str, value: str) -> None:
        self.response_headers[name] = value

    def write_response_content(self, content: str) -> None:
        self.response_content += content
