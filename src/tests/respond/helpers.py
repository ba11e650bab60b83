import json

from starlette.requests import Request

from respond.config import RespondConfig
from respond.responder import Responder
from respond.sink import ResponseSink


def make_request(method: str = "GET", path: str = "/") -> Request:
    scope = {
        "type": "http",
        "method": method,
        "path": path,
        "query_string": b"",
        "headers": [],
    }
    return Request(scope)


def streaming_responder(sink: ResponseSink) -> Responder:
    return Responder(sink, make_request(), RespondConfig(buffer_raw=False, chunk_size=4))


def assert_error(sink: ResponseSink, status: int, message: str):
    assert sink.status_code == status
    assert sink.headers["Content-Type"] == "application/json"
    body = json.loads(sink.body)
    assert body["status"] == status
    if message:
        assert body["message"] == message
    else:
        assert "message" not in body


class StatusError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status


class StatusCodeError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self._status = status

    def status_code(self) -> int:
        return self._status


class CodeError(Exception):
    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.code = status


class BadReader:
    """Returns ``prefix`` on the first read, then fails with a status carrying error."""

    def __init__(self, failure_status: int, prefix: bytes = b""):
        self.failure_status = failure_status
        self.prefix = prefix

    def read(self, size: int = -1) -> bytes:
        if self.prefix:
            prefix, self.prefix = self.prefix, b""
            return prefix

        raise StatusError(self.failure_status, "bad monkey")


class FakeRedirector:
    def __init__(self, url: str):
        self.url = url

    def redirect(self) -> str:
        return self.url
