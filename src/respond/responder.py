import io
import logging
from collections.abc import Mapping
from typing import Any

import jinja2
from starlette.requests import Request

from respond.capabilities import Readable, Redirector
from respond.config import RespondConfig
from respond.encoding import JSONEncoder, encode_json
from respond.errors import FailureDescriptor, classify, first_error
from respond.exceptions import ErrorResponse, JSONEncodingError, ResponderPreconditionError
from respond.intent import Raw, Redirect, Value, resolve_intent
from respond.raw import (
    INLINE,
    attachment,
    closing_stream,
    content_type_for_file,
    iter_chunks,
    resolve_headers,
)
from respond.sink import Sink, write_redirect

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"


def to(sink: Sink, request: Request | None = None, config: RespondConfig | None = None) -> "Responder":
    """Create a responder for the given request, typically the first line of a handler.

    ```python
    def get_user(request, sink):
        respond = to(sink, request)
        respond.ok(*find_user(request.path_params["id"]))
    ```
    """
    return Responder(sink, request, config)


class Responder:
    """Writes handler results to a sink with the right status code and headers.

    Success helpers take the value together with any number of optional errors. When
    one of the errors is not None the value is ignored and the request fails with the
    status derived from that error instead:

    ```python
    user, err = find_user(user_id)
    respond.ok(user, err)
    ```

    Values that implement ``redirect()`` turn into redirects, values that implement
    ``read()`` are written as raw bytes and everything else is encoded as JSON.

    Args:
        sink: Where the response is written, required.
        request: The request being answered, only needed for redirects.
        config: Write behavior, defaults to ``RespondConfig()``.
        encoder: Turns reply values into JSON bytes.
    """

    def __init__(
        self,
        sink: Sink,
        request: Request | None = None,
        config: RespondConfig | None = None,
        *,
        encoder: JSONEncoder = encode_json,
    ):
        if sink is None:
            raise ResponderPreconditionError("A responder cannot be created without a sink to write to")

        self.sink = sink
        self.request = request
        self.config = config or RespondConfig()
        self.encoder = encoder

    def reply(self, status: int, value: Any, *errs: BaseException | None) -> None:
        """Respond with the status code of your choice and the value encoded for it."""
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        match resolve_intent(value):
            case Redirect(url):
                # Redirects always use their own status, whatever was requested.
                self.redirect(url)

            case Raw(stream):
                self._write_raw(status, stream)

            case Value(payload):
                self._write_json(status, payload)

    def ok(self, value: Any, *errs: BaseException | None) -> None:
        self.reply(200, value, *errs)

    def created(self, value: Any, *errs: BaseException | None) -> None:
        self.reply(201, value, *errs)

    def accepted(self, value: Any, *errs: BaseException | None) -> None:
        self.reply(202, value, *errs)

    def no_content(self, *errs: BaseException | None) -> None:
        """Respond with a 204 and nothing but the status."""
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        self.sink.write_status(204)

    def not_modified(self, *errs: BaseException | None) -> None:
        """Respond with a bodiless 304, typically after an ETag staleness check."""
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        self.sink.write_status(304)

    def html(self, markup: str, *errs: BaseException | None) -> None:
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        self.sink.set_header("Content-Type", HTML_CONTENT_TYPE)
        self.sink.write_status(200)
        if markup:
            self.sink.write_body(markup.encode("utf-8"))

    def html_template(self, template: jinja2.Template | None, context: Any = None, *errs: BaseException | None) -> None:
        """Render a template with the given context as a 200 HTML response.

        Mappings are passed as the template's variables, any other value is available
        to the template as ``context``. Rendering failures are answered through ``fail``.
        """
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        if template is None:
            self.sink.set_header("Content-Type", HTML_CONTENT_TYPE)
            self.sink.write_status(200)
            return

        match context:
            case None:
                variables = {}

            case Mapping():
                variables = context

            case _:
                variables = {"context": context}

        chunks = (part.encode("utf-8") for part in template.generate(variables))
        self._write_stream(200, {"Content-Type": HTML_CONTENT_TYPE}, chunks)

    def serve(self, file_name: str, data: Readable | None, *errs: BaseException | None) -> None:
        """Deliver file data inline, e.g. images or videos the client should embed.

        The file name only determines the Content-Type. The stream is read to completion
        but closing it is left to the caller.
        """
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        self._write_file(file_name, INLINE, data)

    def serve_bytes(self, file_name: str, data: bytes | None, *errs: BaseException | None) -> None:
        self.serve(file_name, io.BytesIO(data or b""), *errs)

    def download(self, file_name: str, data: Readable | None, *errs: BaseException | None) -> None:
        """Deliver file data as an attachment so clients offer to save it under ``file_name``.

        The stream is read to completion but closing it is left to the caller.
        """
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        self._write_file(file_name, attachment(file_name), data)

    def download_bytes(self, file_name: str, data: bytes | None, *errs: BaseException | None) -> None:
        self.download(file_name, io.BytesIO(data or b""), *errs)

    def redirect(self, uri_format: str, *args: Any) -> None:
        """Perform a 307 temporary redirect, ``args`` are %-formatted into the URL."""
        self._redirect(307, uri_format, args)

    def redirect_to(self, redirector: Redirector | None, *errs: BaseException | None) -> None:
        """Perform a 307 temporary redirect to the URL given by ``redirector.redirect()``."""
        self._redirect_to(self.redirect, redirector, errs)

    def redirect_permanent(self, uri_format: str, *args: Any) -> None:
        """Perform a 308 permanent redirect, ``args`` are %-formatted into the URL."""
        self._redirect(308, uri_format, args)

    def redirect_permanent_to(self, redirector: Redirector | None, *errs: BaseException | None) -> None:
        self._redirect_to(self.redirect_permanent, redirector, errs)

    def fail(self, err: BaseException | None) -> None:
        """Respond with the 4XX/5XX status and message that best describe the error.

        The error chain is searched for a ``status``, ``status_code`` or ``code``
        capability, see ``respond.errors.classify``.
        """
        failure = classify(err)
        self._log_failure(failure, err)
        self._write_failure(failure)

    def bad_request(self, msg: str = "", *args: Any) -> None:
        self._fail_with(400, msg, args)

    def unauthorized(self, msg: str = "", *args: Any) -> None:
        self._fail_with(401, msg, args)

    def forbidden(self, msg: str = "", *args: Any) -> None:
        self._fail_with(403, msg, args)

    def not_found(self, msg: str = "", *args: Any) -> None:
        self._fail_with(404, msg, args)

    def method_not_allowed(self, msg: str = "", *args: Any) -> None:
        self._fail_with(405, msg, args)

    def conflict(self, msg: str = "", *args: Any) -> None:
        self._fail_with(409, msg, args)

    def gone(self, msg: str = "", *args: Any) -> None:
        self._fail_with(410, msg, args)

    def too_many_requests(self, msg: str = "", *args: Any) -> None:
        self._fail_with(429, msg, args)

    def internal_server_error(self, msg: str = "", *args: Any) -> None:
        self._fail_with(500, msg, args)

    def not_implemented(self, msg: str = "", *args: Any) -> None:
        self._fail_with(501, msg, args)

    def bad_gateway(self, msg: str = "", *args: Any) -> None:
        self._fail_with(502, msg, args)

    def service_unavailable(self, msg: str = "", *args: Any) -> None:
        self._fail_with(503, msg, args)

    def gateway_timeout(self, msg: str = "", *args: Any) -> None:
        self._fail_with(504, msg, args)

    def _fail_with(self, status: int, msg: str, args: tuple) -> None:
        try:
            message = _format(msg, args)
        except (TypeError, ValueError) as e:
            self.fail(e)
            return

        self.fail(ErrorResponse(status, message))

    def _redirect(self, status: int, uri_format: str, args: tuple) -> None:
        try:
            uri = _format(uri_format or "", args)
        except (TypeError, ValueError) as e:
            self.fail(e)
            return

        if not uri:
            self.fail(ValueError("unable to redirect to empty url"))
            return

        write_redirect(self.sink, self.request, uri, status)

    def _redirect_to(self, redirect, redirector: Redirector | None, errs: tuple) -> None:
        if (err := first_error(*errs)) is not None:
            self.fail(err)
            return

        if redirector is None:
            self.fail(ValueError("unable to redirect using a None redirector"))
            return

        redirect(redirector.redirect())

    def _write_json(self, status: int, value: Any) -> None:
        try:
            body = self.encoder(value)
        except Exception as e:
            self.fail(JSONEncodingError(f"unable to encode response as JSON: {e}"))
            return

        self.sink.set_header("Content-Type", JSON_CONTENT_TYPE)
        self.sink.write_status(status)
        self.sink.write_body(body)

    def _write_failure(self, failure: FailureDescriptor) -> None:
        # Always the built-in encoder, a failure body must never fail to encode.
        self.sink.set_header("Content-Type", JSON_CONTENT_TYPE)
        self.sink.write_status(failure.status)
        self.sink.write_body(encode_json(failure.to_dict()))

    def _write_raw(self, status: int, stream: Readable) -> None:
        descriptor = resolve_headers(stream)
        with closing_stream(stream, descriptor):
            self._write_stream(status, descriptor.headers, iter_chunks(stream, self.config.chunk_size))

    def _write_file(self, file_name: str, disposition: str, data: Readable | None) -> None:
        headers = {
            "Content-Type": content_type_for_file(file_name),
            "Content-Disposition": disposition,
        }
        if data is None:
            self._write_stream(200, headers, iter(()))
            return

        self._write_stream(200, headers, iter_chunks(data, self.config.chunk_size))

    def _write_stream(self, status: int, headers: dict[str, str], chunks) -> None:
        """Write headers, status and the body produced by ``chunks``.

        When buffering, the body is produced before anything is committed so that a
        failure can still be answered properly. When streaming, a failure can only be
        appended to what was already sent.
        """
        if self.config.buffer_raw:
            try:
                body = b"".join(chunks)
            except Exception as e:
                self.fail(e)
                return

            self._write_head(status, headers)
            if body:
                self.sink.write_body(body)

            return

        self._write_head(status, headers)
        while True:
            try:
                chunk = next(chunks, None)
            except Exception as e:
                logger.warning(
                    f"Response body failed after the {status} status was sent, the error can only be appended "
                    f"to the partial body: {e}"
                )
                self.fail(e)
                return

            if chunk is None:
                return

            self.sink.write_body(chunk)

    def _write_head(self, status: int, headers: dict[str, str]) -> None:
        for name, value in headers.items():
            self.sink.set_header(name, value)

        self.sink.write_status(status)

    def _log_failure(self, failure: FailureDescriptor, err: BaseException | None) -> None:
        if failure.status >= 500:
            logger.warning(f"Responding with {failure.status}: {failure.message}", exc_info=err)
        elif self.config.log_client_errors:
            logger.info(f"Responding with {failure.status}: {failure.message}")
        else:
            logger.debug(f"Responding with {failure.status}: {failure.message}")


def _format(template: str, args: tuple) -> str:
    if not args:
        return template

    return template % args
