"""
Capability protocols for respond.

None of these are base classes you have to inherit from. The responder probes
values and errors for them at runtime, so any object exposing the right member
qualifies.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ErrorWithStatus(Protocol):
    """An error carrying the HTTP 4XX/5XX status it should respond with as ``status``.

    ``status`` may be a plain integer attribute or a zero-argument method returning one.
    """

    status: int


@runtime_checkable
class ErrorWithStatusCode(Protocol):
    """An error exposing its HTTP status as ``status_code`` (Starlette's HTTPException does)."""

    status_code: int


@runtime_checkable
class ErrorWithCode(Protocol):
    """An error exposing its HTTP status as ``code`` (urllib's HTTPError does)."""

    code: int


@runtime_checkable
class Redirector(Protocol):
    """A result telling the responder to redirect instead of writing a 2XX body."""

    def redirect(self) -> str:
        """Return the URL the response should redirect to."""
        ...


@runtime_checkable
class Readable(Protocol):
    """Anything that can be read like a file. Such results are written as raw bytes, not JSON."""

    def read(self, size: int = -1) -> bytes: ...


@runtime_checkable
class ContentTypeSpecified(Protocol):
    """A raw result that knows which Content-Type it should be served with.

    Returning an empty string keeps the default, "application/octet-stream".
    """

    def content_type(self) -> str: ...


@runtime_checkable
class FileNameSpecified(Protocol):
    """A raw result that should be offered to the client as a download.

    A non-empty name switches Content-Disposition from "inline" to
    ``attachment; filename="<name>"``.
    """

    def file_name(self) -> str: ...


@runtime_checkable
class Closable(Protocol):
    def close(self) -> None: ...
