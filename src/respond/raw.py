"""Header resolution and copy helpers for raw (non-JSON) byte responses."""

import mimetypes
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from urllib.parse import quote

from respond.capabilities import Closable, ContentTypeSpecified, FileNameSpecified, Readable

DEFAULT_CONTENT_TYPE = "application/octet-stream"
INLINE = "inline"


@dataclass(frozen=True)
class RawResultDescriptor:
    """Headers and cleanup behavior derived from a raw result."""

    content_type: str = DEFAULT_CONTENT_TYPE
    disposition: str = INLINE
    close_on_finish: bool = False

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": self.content_type,
            "Content-Disposition": self.disposition,
        }


def resolve_headers(stream: Readable) -> RawResultDescriptor:
    """Probe a raw result for its optional capabilities.

    Every probe is independent, a stream may implement any combination of
    ``content_type()``, ``file_name()`` and ``close()``.
    """
    return RawResultDescriptor(
        content_type=raw_content_type(stream),
        disposition=raw_content_disposition(stream),
        close_on_finish=isinstance(stream, Closable) and callable(stream.close),
    )


def raw_content_type(stream: Readable) -> str:
    if not isinstance(stream, ContentTypeSpecified):
        return DEFAULT_CONTENT_TYPE

    return stream.content_type() or DEFAULT_CONTENT_TYPE


def raw_content_disposition(stream: Readable) -> str:
    if not isinstance(stream, FileNameSpecified):
        return INLINE

    return attachment(stream.file_name())


def attachment(file_name: str) -> str:
    """Build an attachment Content-Disposition, falling back to inline when there's no name.

    Header values must be Latin-1, so names with non-ASCII characters get an ASCII
    ``filename`` for old clients and the real name as an RFC 6266 ``filename*``.
    """
    if not file_name:
        return INLINE

    if file_name.isascii():
        return f'attachment; filename="{_quote_file_name(file_name)}"'

    fallback = "".join(char if char.isascii() else "_" for char in file_name)
    return f"attachment; filename=\"{_quote_file_name(fallback)}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def _quote_file_name(file_name: str) -> str:
    return file_name.replace("\\", "\\\\").replace('"', '\\"')


def type_by_extension(extension: str) -> str:
    """Look up the MIME type for an extension such as ".jpg", returns "" when unknown.

    Text types get an explicit utf-8 charset, the same way Starlette fills one in.
    """
    if not mimetypes.inited:
        mimetypes.init()

    media_type = mimetypes.types_map.get(extension) or mimetypes.types_map.get(extension.lower(), "")
    if media_type.startswith("text/") and "charset" not in media_type:
        media_type += "; charset=utf-8"

    return media_type


def content_type_for_file(file_name: str) -> str:
    """Determine the Content-Type for a file name/path from its extension.

    "foo/bar/baz.jpg" gives "image/jpeg". Names without an extension, or with one
    that has no known mapping, are served as "application/octet-stream".
    """
    dot = file_name.rfind(".")
    if dot < 0:
        return DEFAULT_CONTENT_TYPE

    return type_by_extension(file_name[dot:]) or DEFAULT_CONTENT_TYPE


def iter_chunks(stream: Readable, chunk_size: int) -> Iterator[bytes]:
    """Read a stream to exhaustion. Errors raised while reading propagate."""
    while chunk := stream.read(chunk_size):
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")

        yield bytes(chunk)


@contextmanager
def closing_stream(stream: Readable, descriptor: RawResultDescriptor) -> Iterator[Readable]:
    """Close the stream once the block exits, however it exits, if it is closable."""
    try:
        yield stream
    finally:
        if descriptor.close_on_finish:
            stream.close()
