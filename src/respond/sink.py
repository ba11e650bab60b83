"""Output sinks the responder writes status, headers and body to."""

import logging
from typing import Protocol, runtime_checkable
from urllib.parse import quote, urljoin, urlsplit

from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.responses import Response

from respond.exceptions import ResponderPreconditionError

logger = logging.getLogger(__name__)


@runtime_checkable
class Sink(Protocol):
    """The transport a responder writes a single response to."""

    def set_header(self, name: str, value: str) -> None:
        """Set a response header, replacing any previous value."""
        ...

    def write_status(self, status_code: int) -> None:
        """Commit the response status. Headers must be set before this is called."""
        ...

    def write_body(self, data: bytes) -> int:
        """Append bytes to the response body, returning how many were written."""
        ...


class ResponseSink:
    """In-memory sink that can be turned into a Starlette response.

    It behaves like a real transport once the status is committed: header changes
    and further status writes are ignored.
    """

    def __init__(self):
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.body = bytearray()

    @property
    def committed(self) -> bool:
        return self.status_code is not None

    def set_header(self, name: str, value: str) -> None:
        if self.committed:
            logger.warning(f"Ignoring header {name!r}, the response status was already written")
            return

        self.headers[name] = value

    def write_status(self, status_code: int) -> None:
        if self.committed:
            logger.warning(
                f"Superfluous status write ({status_code}), the response was already committed with "
                f"{self.status_code}"
            )
            return

        self.status_code = status_code

    def write_body(self, data: bytes) -> int:
        if not self.committed:
            self.write_status(200)

        self.body.extend(data)
        return len(data)

    def to_response(self) -> Response:
        return Response(
            content=bytes(self.body),
            status_code=self.status_code or 200,
            headers=dict(self.headers),
        )

    def __repr__(self):
        body_preview = bytes(self.body[:20])
        if len(self.body) > 20:
            body_preview += b"..."

        return (
            f"<{self.__class__.__name__} "
            f"status={self.status_code} "
            f"headers={dict(self.headers)} "
            f"body={body_preview!r}"
            f">"
        )


def write_redirect(sink: Sink, request: Request | None, url: str, status_code: int) -> None:
    """Point the client at another URL.

    Relative URLs are resolved against the path of the current request, which is why
    a request is required here even though no other response needs one.
    """
    if request is None:
        raise ResponderPreconditionError("A request is required to write a redirect")

    if not urlsplit(url).scheme and not url.startswith("/"):
        url = urljoin(request.url.path, url)

    sink.set_header("Location", quote(url, safe=":/%#?=@[]!$&'()*+,;"))
    sink.write_status(status_code)
